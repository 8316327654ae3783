# 🧮 page_gateway/errors/reason_codes.py
"""
🧮 Перелік причин відмови та їх HTTP-класи.

🔹 Єдине джерело кодів для логів, метрик і JSON-відповідей.
🔹 Клієнтські помилки (400) відокремлені від збоїв апстріму та рендеру (5xx).
"""

from __future__ import annotations

# 🔠 Системні імпорти
from enum import Enum													# 🏷️ Перелік причин
from types import MappingProxyType										# 🧊 Імутабельна мапа статусів
from typing import Mapping												# 🧰 Типізація


class ReasonCode(str, Enum):
    """🧮 Машинно-читані причини відмови."""

    INVALID_PAGE = "invalid_page"										# 🔢 Індекс/якість незадовільні для маніфесту
    QUALITY_TIER_UNAVAILABLE = "quality_tier_unavailable"				# 🪶 Reduced відсутній у строгому режимі
    NOT_FOUND = "not_found"												# 🔍 Розділ невідомий апстріму
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"						# 🌐 Транспорт/декодування метаданих
    TRANSPORT_ERROR = "transport_error"									# 📡 Пряме завантаження не вдалося
    RENDER_ERROR = "render_error"										# 🖼️ Рендер-фолбек не вдався
    INTERNAL = "internal"												# ❓ Непередбачений збій


HTTP_STATUS_BY_REASON: Mapping[ReasonCode, int] = MappingProxyType(
    {
        ReasonCode.INVALID_PAGE: 400,
        ReasonCode.QUALITY_TIER_UNAVAILABLE: 400,
        ReasonCode.NOT_FOUND: 502,
        ReasonCode.UPSTREAM_UNAVAILABLE: 502,
        ReasonCode.TRANSPORT_ERROR: 502,
        ReasonCode.RENDER_ERROR: 500,
        ReasonCode.INTERNAL: 500,
    }
)


def http_status_for(reason: ReasonCode) -> int:
    """🔢 Повертає HTTP-статус для причини (500 для невідомих)."""
    return HTTP_STATUS_BY_REASON.get(reason, 500)


__all__ = ["HTTP_STATUS_BY_REASON", "ReasonCode", "http_status_for"]
