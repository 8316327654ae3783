# 📥 page_gateway/infrastructure/delivery/__init__.py
from .direct_fetcher import DEFAULT_CONTENT_TYPE, DirectFetcher

__all__ = ["DEFAULT_CONTENT_TYPE", "DirectFetcher"]
