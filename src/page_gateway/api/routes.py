# 🛣️ page_gateway/api/routes.py
"""
🛣️ HTTP-ендпоінти шлюзу.

🔹 Метадані (пошук, картка, розділи, маніфест): прямий переклад запитів в API.
🔹 `/chapter/{id}/download/{page}`: автомат отримання сторінки; відключення клієнта його скасовує (499).
🔹 Помилки підіймаються як `GatewayError` і рендеряться глобальним хендлером.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from fastapi import APIRouter, Query, Request								# 🚀 Маршрутизація FastAPI
from fastapi.responses import JSONResponse, Response						# 📤 Відповіді
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest			# 📈 Експорт метрик

# 🔠 Системні імпорти
import asyncio																# 🔄 Гонка з відключенням клієнта
import logging																# 🧾 Логування запитів
from typing import Any, Dict, Optional										# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from page_gateway.domain.pages import Failed, PageRequest, QualityTier		# 🧱 Доменні DTO
from page_gateway.errors.reason_mapper import build_error_payload			# 🧭 Помилка → JSON
from page_gateway.shared.errors import InvalidPage						# ⚠️ Некоректний номер сторінки
from page_gateway.shared.utils.logger import LOG_NAME						# 🏷️ Базове ім'я логера

logger = logging.getLogger(f"{LOG_NAME}.api")

router = APIRouter(prefix="/api")											# 🧭 Публічне API
service_router = APIRouter()												# 🩺 Службові ендпоінти

DISCONNECT_POLL_S = 0.5														# ⏱️ Як часто перевіряти відключення клієнта
CLIENT_CLOSED_REQUEST = 499													# 🔌 Клієнт пішов до відповіді


def _container(request: Request) -> Any:
    return request.app.state.container


async def _retrieve_while_connected(
    request: Request,
    orchestrator: Any,
    page_request: PageRequest,
    *,
    poll_interval: float = DISCONNECT_POLL_S,
) -> Optional[Any]:
    """
    🔌 Запускає автомат і паралельно стежить за клієнтом.

    Якщо клієнт відключився раніше, ніж автомат завершився, задачу скасовано
    (рендер прибирає свій тимчасовий файл) і повертається `None`.
    """
    task = asyncio.ensure_future(orchestrator.retrieve(page_request))
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=poll_interval)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.info("🔌 Клієнт відключився, скасовуємо отримання", extra=page_request.log_extra())
                return None
    finally:
        if not task.done():
            task.cancel()
            await asyncio.wait({task})


def _parse_page(raw: str) -> int:
    """🔢 Номер сторінки з шляху; нечислове значення → InvalidPage."""
    try:
        return int(raw)
    except ValueError as exc:
        raise InvalidPage(details=f"page must be an integer, got {raw!r}") from exc


# ================================
# 📚 МЕТАДАНІ
# ================================
@router.get("/manga/search")
async def search_manga(
    request: Request,
    title: str = Query("", description="Назва манґи"),
    limit: Optional[int] = Query(None, ge=1, le=100, description="За замовчуванням: mangadex.search_limit"),
) -> Dict[str, Any]:
    return await _container(request).metadata_client.search_manga(title, limit)


@router.get("/manga/{manga_id}")
async def get_manga(request: Request, manga_id: str) -> Dict[str, Any]:
    return await _container(request).metadata_client.get_manga(manga_id)


@router.get("/manga/{manga_id}/chapters")
async def get_chapters(
    request: Request,
    manga_id: str,
    lang: Optional[str] = Query(None, description="За замовчуванням: mangadex.default_language"),
    limit: Optional[int] = Query(None, ge=1, le=500, description="За замовчуванням: mangadex.chapters_limit"),
    offset: int = Query(0, ge=0),
) -> Dict[str, Any]:
    return await _container(request).metadata_client.get_chapters(manga_id, lang, limit, offset)


@router.get("/chapter/{chapter_id}/pages")
async def get_chapter_pages(request: Request, chapter_id: str) -> Dict[str, Any]:
    manifest = await _container(request).page_locator.locate(chapter_id)
    return {"result": "ok", **manifest.to_dict()}


# ================================
# 🖼️ СТОРІНКА
# ================================
@router.get("/chapter/{chapter_id}/download/{page}")
async def download_page(
    request: Request,
    chapter_id: str,
    page: str,
    quality: str = Query("standard", description="standard | reduced (аліаси: data, data-saver)"),
) -> Response:
    page_index = _parse_page(page)
    tier = QualityTier.parse(quality)										# ⚠️ Невідомий рівень → InvalidPage (400)
    page_request = PageRequest(chapter_id=chapter_id, page_index=page_index, tier=tier)
    logger.debug("📨 Запит сторінки", extra=page_request.log_extra())

    outcome = await _retrieve_while_connected(request, _container(request).orchestrator, page_request)
    if outcome is None:
        return Response(status_code=CLIENT_CLOSED_REQUEST)
    if isinstance(outcome, Failed):
        status, body = build_error_payload(outcome.error)
        return JSONResponse(status_code=status, content=body)

    return Response(
        content=outcome.content,
        media_type=outcome.content_type,
        headers={"X-Retrieval-Path": outcome.path.value},
    )


# ================================
# 🩺 СЛУЖБОВІ
# ================================
@service_router.get("/health")
async def health(request: Request) -> Dict[str, Any]:
    session = getattr(_container(request), "browser_session", None)
    return {"status": "ok", "browser": bool(getattr(session, "is_running", False))}


@service_router.get("/metrics")
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


__all__ = ["router", "service_router"]
