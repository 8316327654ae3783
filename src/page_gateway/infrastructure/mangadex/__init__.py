# 📚 page_gateway/infrastructure/mangadex/__init__.py
"""📚 Інтеграція з API метаданих: клієнт та локатор сторінок."""

from .metadata_client import DEFAULT_API_BASE, MangaDexClient
from .page_locator import PageLocator, parse_manifest

__all__ = ["DEFAULT_API_BASE", "MangaDexClient", "PageLocator", "parse_manifest"]
