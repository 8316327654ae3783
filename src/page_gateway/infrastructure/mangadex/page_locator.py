# 📜 page_gateway/infrastructure/mangadex/page_locator.py
"""
📜 PageLocator: свіжий маніфест сторінок розділу з at-home сервера.

Кожен виклик ходить в апстрім, бо хост доставки та хеш є тимчасовими токенами.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from typing import Any, Dict, Tuple

# 🧩 Внутрішні модулі проєкту
from page_gateway.domain.pages import ChapterPageManifest, IPageLocator
from page_gateway.shared.errors import UpstreamUnavailable
from page_gateway.shared.utils.logger import LOG_NAME
from .metadata_client import MangaDexClient

logger = logging.getLogger(f"{LOG_NAME}.locator")


class PageLocator(IPageLocator):
    """📜 Перетворює відповідь at-home сервера на `ChapterPageManifest`."""

    def __init__(self, client: MangaDexClient) -> None:
        self._client = client

    async def locate(self, chapter_id: str) -> ChapterPageManifest:
        payload = await self._client.get_at_home_server(chapter_id)	# ⚠️ NotFound/UpstreamUnavailable летять далі
        manifest = parse_manifest(payload)
        logger.debug(
            "📜 Маніфест %s: pages=%d reduced=%d host=%s",
            chapter_id,
            len(manifest.standard_refs),
            len(manifest.reduced_refs),
            manifest.delivery_base_url,
            extra={"chapter_id": chapter_id},
        )
        return manifest


def parse_manifest(payload: Dict[str, Any]) -> ChapterPageManifest:
    """🧩 Валідує структуру `{baseUrl, chapter: {hash, data, dataSaver}}`."""
    base_url = payload.get("baseUrl")
    chapter = payload.get("chapter")
    if not isinstance(base_url, str) or not base_url:
        raise UpstreamUnavailable(details="at-home response without baseUrl")
    if not isinstance(chapter, dict):
        raise UpstreamUnavailable(details="at-home response without chapter")

    content_hash = chapter.get("hash")
    if not isinstance(content_hash, str) or not content_hash:
        raise UpstreamUnavailable(details="at-home response without chapter.hash")

    return ChapterPageManifest(
        delivery_base_url=base_url,
        content_hash=content_hash,
        standard_refs=_refs(chapter, "data"),
        reduced_refs=_refs(chapter, "dataSaver"),
    )


def _refs(chapter: Dict[str, Any], key: str) -> Tuple[str, ...]:
    raw = chapter.get(key)
    if raw is None:
        return ()
    if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
        raise UpstreamUnavailable(details=f"chapter.{key} is not a list of file names")
    return tuple(raw)


__all__ = ["PageLocator", "parse_manifest"]
