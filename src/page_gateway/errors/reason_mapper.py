# 🧭 page_gateway/errors/reason_mapper.py
"""
🧭 Мапить винятки → `ReasonCode` + контекст для тексту помилки.

🔹 Розрізняє помилки клієнта (`InvalidPage`) і збої апстріму/рендеру.
🔹 Сирі httpx/Playwright-винятки теж отримують осмислений код.
🔹 `build_error_payload` повертає HTTP-статус і JSON-тіло для відповіді.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging															# 🧾 Логування процесу мапінгу
from typing import Any, Dict, Tuple										# 📐 Типи для повернення

# 🧩 Внутрішні модулі проєкту
from page_gateway.errors.reason_codes import ReasonCode, http_status_for	# 🧮 Перелік причин
from page_gateway.errors.strategies import (							# 📜 Конвертація сторонніх винятків
    HttpxErrorStrategy,
    PlaywrightErrorStrategy,
    convert_error,
)
from page_gateway.shared.errors import (								# ⚠️ Доменні помилки
    GatewayError,
    InvalidPage,
    NotFound,
    RenderError,
    UpstreamUnavailable,
)
from page_gateway.shared.utils.logger import LOG_NAME					# 🏷️ Базове ім'я логера


# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.errors.reason_mapper")


# ================================
# 💬 ТЕКСТИ ВІДПОВІДЕЙ
# ================================
MESSAGES: Dict[ReasonCode, str] = {
    ReasonCode.INVALID_PAGE: "Invalid page number",
    ReasonCode.QUALITY_TIER_UNAVAILABLE: "Requested quality tier is unavailable for this page",
    ReasonCode.NOT_FOUND: "Resource not found upstream",
    ReasonCode.UPSTREAM_UNAVAILABLE: "Upstream service unavailable",
    ReasonCode.TRANSPORT_ERROR: "Upstream service unavailable",
    ReasonCode.RENDER_ERROR: "Failed to download page",
    ReasonCode.INTERNAL: "Internal server error",
}

_FALLBACK_STRATEGIES = (HttpxErrorStrategy(), PlaywrightErrorStrategy())


# ================================
# 🧭 ОСНОВНИЙ МАПЕР
# ================================
def map_error_to_reason(exc: BaseException) -> Tuple[ReasonCode, Dict[str, Any]]:
    """
    Повертає (reason_code, ctx): ctx потрапляє у JSON-тіло відповіді.
    """
    logger.debug("🔎 map_error_to_reason start", extra={"exc_type": type(exc).__name__})

    error = exc if isinstance(exc, GatewayError) else None
    if error is None and isinstance(exc, Exception):
        error = convert_error(exc, _FALLBACK_STRATEGIES)

    if error is None:
        logger.warning("❓ Unknown error mapped to INTERNAL", extra={"exc_type": type(exc).__name__})
        return ReasonCode.INTERNAL, {}

    return error.reason, _context_for(error)


def build_error_payload(exc: BaseException) -> Tuple[int, Dict[str, Any]]:
    """📦 Формує (HTTP-статус, тіло) для відповіді клієнту."""
    reason, ctx = map_error_to_reason(exc)
    message = exc.message if isinstance(exc, GatewayError) and exc.message else MESSAGES[reason]
    body: Dict[str, Any] = {"error": message, "reason": reason.value}
    body.update(ctx)
    return http_status_for(reason), body


# ================================
# 🧩 ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def _context_for(error: GatewayError) -> Dict[str, Any]:
    """Витягує безпечні для клієнта поля з доменної помилки."""
    if isinstance(error, InvalidPage):
        ctx: Dict[str, Any] = {}
        if error.page_index is not None:
            ctx["page"] = error.page_index
        if error.available is not None:
            ctx["available"] = error.available
        return ctx
    if isinstance(error, NotFound) and error.resource_id:
        return {"id": error.resource_id}
    if isinstance(error, UpstreamUnavailable) and error.status_code is not None:
        return {"upstream_status": error.status_code}
    if isinstance(error, RenderError) and error.stage:
        return {"stage": error.stage}
    return {}


__all__ = ["MESSAGES", "build_error_payload", "map_error_to_reason"]
