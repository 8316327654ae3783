# 🚨 page_gateway/shared/errors.py
"""
🚨 Ієрархія доменних помилок шлюзу сторінок.

🔹 `GatewayError`: база з `ReasonCode`, деталями та `to_log_extra()`.
🔹 `InvalidPage` означає помилку клієнта (індекс/якість), решта описує збої апстріму чи рендеру.
🔹 `TransportError`: внутрішній сигнал для переходу на рендер-фолбек.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from typing import Dict, Optional										# 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from page_gateway.errors.reason_codes import ReasonCode, http_status_for	# 🧮 Коди причин


# ================================
# 🧠 БАЗОВА ПОМИЛКА
# ================================
class GatewayError(Exception):
    """🧠 Базовий виняток шлюзу з кодом причини."""

    reason: ReasonCode = ReasonCode.INTERNAL							# 🧮 Причина за замовчуванням

    def __init__(self, message: str, *, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message											# 🗒️ Текст для відповіді
        self.details = details											# 🧾 Технічні подробиці (лише логи)

    @property
    def http_status(self) -> int:
        """🔢 HTTP-клас помилки."""
        return http_status_for(self.reason)

    def to_log_extra(self) -> Dict[str, object]:
        """📦 Формує словник для `logger.extra`."""
        extra: Dict[str, object] = {"error_code": self.reason.value}
        if self.details:
            extra["details"] = self.details
        return extra

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


# ================================
# 🙋 ПОМИЛКИ КЛІЄНТА
# ================================
class InvalidPage(GatewayError):
    """🔢 Індекс сторінки або рівень якості не відповідають маніфесту."""

    reason = ReasonCode.INVALID_PAGE

    def __init__(
        self,
        message: str = "Invalid page number",
        *,
        details: Optional[str] = None,
        page_index: Optional[int] = None,
        available: Optional[int] = None,
    ) -> None:
        super().__init__(message, details=details)
        self.page_index = page_index									# 🔢 Запитаний індекс
        self.available = available										# 📏 Довжина обраного списку

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        if self.page_index is not None:
            extra["page_index"] = self.page_index
        if self.available is not None:
            extra["available"] = self.available
        return extra


class QualityTierUnavailable(InvalidPage):
    """🪶 Reduced-копія відсутня для сторінки (строгий режим)."""

    reason = ReasonCode.QUALITY_TIER_UNAVAILABLE


# ================================
# 🌐 ПОМИЛКИ АПСТРІМУ
# ================================
class NotFound(GatewayError):
    """🔍 Ідентифікатор невідомий апстріму."""

    reason = ReasonCode.NOT_FOUND

    def __init__(self, message: str = "Chapter not found upstream", *, details: Optional[str] = None, resource_id: Optional[str] = None) -> None:
        super().__init__(message, details=details)
        self.resource_id = resource_id

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        if self.resource_id:
            extra["resource_id"] = self.resource_id
        return extra


class UpstreamUnavailable(GatewayError):
    """🌐 Транспортна помилка або неможливо декодувати відповідь апстріму."""

    reason = ReasonCode.UPSTREAM_UNAVAILABLE

    def __init__(
        self,
        message: str = "Upstream metadata service unavailable",
        *,
        details: Optional[str] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, details=details)
        self.url = url
        self.status_code = status_code

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        if self.url:
            extra["url"] = self.url
        if self.status_code is not None:
            extra["status_code"] = self.status_code
        return extra


class TransportError(UpstreamUnavailable):
    """📡 Пряме завантаження байтів не вдалося (з'єднання, таймаут, не-2xx)."""

    reason = ReasonCode.TRANSPORT_ERROR

    def __init__(
        self,
        message: str = "Direct page fetch failed",
        *,
        details: Optional[str] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, details=details, url=url, status_code=status_code)


# ================================
# 🖼️ ПОМИЛКИ РЕНДЕРУ
# ================================
class RenderError(GatewayError):
    """🖼️ Рендер не стабілізувався, зображення не з'явилося або знімок не вдався."""

    reason = ReasonCode.RENDER_ERROR

    def __init__(self, message: str = "Failed to download page", *, details: Optional[str] = None, stage: Optional[str] = None) -> None:
        super().__init__(message, details=details)
        self.stage = stage												# 🧭 Етап: navigate/stable/visible/capture/persist

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        if self.stage:
            extra["render_stage"] = self.stage
        return extra


__all__ = [
    "GatewayError",
    "InvalidPage",
    "NotFound",
    "QualityTierUnavailable",
    "RenderError",
    "TransportError",
    "UpstreamUnavailable",
]
