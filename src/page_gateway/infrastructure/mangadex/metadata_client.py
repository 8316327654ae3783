# 📚 page_gateway/infrastructure/mangadex/metadata_client.py
"""
📚 MangaDexClient: тонкий read-only клієнт API метаданих.

🔹 Пошук манґи, картка манґи, стрічка розділів, at-home сервер розділу.
🔹 Відповіді повертаються як декодований JSON без перетворень.
🔹 404 (або `{"result": "error"}` зі статусом 404) → NotFound, решта збоїв → UpstreamUnavailable.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx															# 🌐 Асинхронний HTTP-клієнт

# 🔠 Системні імпорти
import logging															# 🧾 Логування запитів
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union	# 🧰 Типізація
from urllib.parse import quote											# 🔐 Екранування ідентифікаторів у шляху

# 🧩 Внутрішні модулі проєкту
from page_gateway.errors.strategies import HttpxErrorStrategy			# 📜 httpx → UpstreamUnavailable
from page_gateway.shared.errors import NotFound, UpstreamUnavailable	# ⚠️ Доменні помилки
from page_gateway.shared.metrics import UPSTREAM_REQUESTS, safe_inc		# 📈 Метрики апстріму
from page_gateway.shared.utils.logger import LOG_NAME					# 🏷️ Базове ім'я логера

logger = logging.getLogger(f"{LOG_NAME}.mangadex")

DEFAULT_API_BASE = "https://api.mangadex.org"							# 🌐 Публічне API
DEFAULT_SEARCH_LIMIT = 10												# 🔎 Результатів пошуку
DEFAULT_CHAPTERS_LIMIT = 30											# 🗂️ Розділів на сторінку стрічки
DEFAULT_LANGUAGE = "en"												# 🌍 Мова перекладу
INCLUDES: Tuple[Tuple[str, str], ...] = (								# 🔗 Пов'язані сутності в картці
    ("includes[]", "cover_art"),
    ("includes[]", "author"),
)

QueryParams = Sequence[Tuple[str, Union[str, int]]]


# ================================
# 🏛️ КЛІЄНТ
# ================================
class MangaDexClient:
    """📚 Read-only доступ до API метаданих поверх спільного `httpx.AsyncClient`."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        api_base: str = DEFAULT_API_BASE,
        search_limit: int = DEFAULT_SEARCH_LIMIT,
        chapters_limit: int = DEFAULT_CHAPTERS_LIMIT,
        default_language: str = DEFAULT_LANGUAGE,
    ) -> None:
        self._client = client											# 🌐 Спільний HTTP-клієнт (життєвим циклом керує контейнер)
        self._api_base = api_base.rstrip("/")							# 🏠 База API без кінцевого слеша
        self.search_limit = int(search_limit)							# 🔎 Ліміт пошуку за замовчуванням
        self.chapters_limit = int(chapters_limit)						# 🗂️ Ліміт стрічки розділів за замовчуванням
        self.default_language = default_language or DEFAULT_LANGUAGE	# 🌍 Мова перекладу за замовчуванням
        self._errors = HttpxErrorStrategy()								# 📜 Стратегія конвертації помилок

    @property
    def api_base(self) -> str:
        return self._api_base

    # ================================
    # 🚪 ПУБЛІЧНИЙ ІНТЕРФЕЙС
    # ================================
    async def search_manga(self, title: str, limit: Optional[int] = None) -> Dict[str, Any]:
        """🔎 Пошук манґи за назвою."""
        params: List[Tuple[str, Union[str, int]]] = [("title", title), ("limit", int(limit or self.search_limit))]
        params.extend(INCLUDES)
        return await self._get_json("search", "/manga", params)

    async def get_manga(self, manga_id: str) -> Dict[str, Any]:
        """📖 Картка манґи з обкладинкою та автором."""
        return await self._get_json("manga", f"/manga/{_segment(manga_id)}", INCLUDES, resource_id=manga_id)

    async def get_chapters(
        self,
        manga_id: str,
        translated_language: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Dict[str, Any]:
        """🗂️ Стрічка розділів манґи (новіші томи та розділи першими)."""
        params: QueryParams = (
            ("translatedLanguage[]", translated_language or self.default_language),
            ("limit", int(limit or self.chapters_limit)),
            ("offset", int(offset)),
            ("order[volume]", "desc"),
            ("order[chapter]", "desc"),
        )
        return await self._get_json("feed", f"/manga/{_segment(manga_id)}/feed", params, resource_id=manga_id)

    async def get_at_home_server(self, chapter_id: str) -> Dict[str, Any]:
        """🏠 Хост доставки, хеш та списки файлів розділу."""
        return await self._get_json("at_home", f"/at-home/server/{_segment(chapter_id)}", (), resource_id=chapter_id)

    # ================================
    # 🧰 ДОПОМІЖНІ МЕТОДИ
    # ================================
    async def _get_json(
        self,
        endpoint: str,
        path: str,
        params: QueryParams,
        *,
        resource_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        url = f"{self._api_base}{path}"
        logger.debug("🌍 GET %s", url, extra={"endpoint": endpoint, "params": list(params)})

        try:
            response = await self._client.get(url, params=list(params))
        except httpx.HTTPError as exc:
            safe_inc(UPSTREAM_REQUESTS, endpoint=endpoint, outcome="transport_error")
            error = self._errors.handle(exc) or UpstreamUnavailable(details=str(exc), url=url)
            logger.warning("🌐 Апстрім недоступний: %s", error, extra=error.to_log_extra())
            raise error from exc

        if response.status_code == 404:
            safe_inc(UPSTREAM_REQUESTS, endpoint=endpoint, outcome="not_found")
            raise NotFound(_not_found_message(endpoint), details=f"GET {url} → 404", resource_id=resource_id)

        if not response.is_success:
            safe_inc(UPSTREAM_REQUESTS, endpoint=endpoint, outcome="http_error")
            logger.warning("🔢 HTTP %s від %s", response.status_code, url)
            raise UpstreamUnavailable(details=f"HTTP {response.status_code}", url=url, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            safe_inc(UPSTREAM_REQUESTS, endpoint=endpoint, outcome="decode_error")
            raise UpstreamUnavailable(details=f"invalid JSON: {exc}", url=url) from exc

        if not isinstance(payload, dict):
            safe_inc(UPSTREAM_REQUESTS, endpoint=endpoint, outcome="decode_error")
            raise UpstreamUnavailable(details="unexpected JSON shape", url=url)

        if payload.get("result") == "error":
            statuses = _error_statuses(payload)
            if 404 in statuses:
                safe_inc(UPSTREAM_REQUESTS, endpoint=endpoint, outcome="not_found")
                raise NotFound(_not_found_message(endpoint), details=f"GET {url} → error body", resource_id=resource_id)
            safe_inc(UPSTREAM_REQUESTS, endpoint=endpoint, outcome="error_body")
            raise UpstreamUnavailable(details=f"error body: {statuses or 'no status'}", url=url)

        safe_inc(UPSTREAM_REQUESTS, endpoint=endpoint, outcome="ok")
        return payload


def _segment(identifier: str) -> str:
    """🔐 Ідентифікатор як один сегмент шляху."""
    return quote(str(identifier), safe="")


def _error_statuses(payload: Dict[str, Any]) -> List[int]:
    statuses: List[int] = []
    for item in payload.get("errors") or []:
        if isinstance(item, dict):
            try:
                statuses.append(int(item.get("status")))
            except (TypeError, ValueError):
                continue
    return statuses


def _not_found_message(endpoint: str) -> str:
    if endpoint == "at_home":
        return "Chapter not found upstream"
    return "Manga not found upstream"


__all__ = ["DEFAULT_API_BASE", "DEFAULT_CHAPTERS_LIMIT", "DEFAULT_LANGUAGE", "DEFAULT_SEARCH_LIMIT", "MangaDexClient"]
