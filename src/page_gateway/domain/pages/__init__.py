# 📄 page_gateway/domain/pages/__init__.py
"""📄 Доменна модель сторінок: DTO, контракти, вибір якості."""

from .entities import (
    ChapterPageManifest,
    Failed,
    FetchedImage,
    PageRequest,
    QualityTier,
    ResolvedPageURL,
    RetrievalOutcome,
    RetrievalPath,
    RetrievalState,
    Served,
    TransientArtifact,
)
from .interfaces import IDirectFetcher, IPageLocator, IRenderFallback, IRenderSession
from .services import QualitySelector, select_page

__all__ = [
    "ChapterPageManifest",
    "Failed",
    "FetchedImage",
    "IDirectFetcher",
    "IPageLocator",
    "IRenderFallback",
    "IRenderSession",
    "PageRequest",
    "QualitySelector",
    "QualityTier",
    "ResolvedPageURL",
    "RetrievalOutcome",
    "RetrievalPath",
    "RetrievalState",
    "Served",
    "TransientArtifact",
    "select_page",
]
