# 📜 page_gateway/errors/strategies.py
"""
📜 Стратегії конвертації сторонніх винятків у доменні `GatewayError`.

🔹 Тримають знання про httpx/Playwright поза сервісами, що їх викликають.
🔹 Нові стратегії додаються без зміни ядра.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx															# 🌐 HTTP-клієнт (винятки)
from playwright.async_api import Error as PlaywrightError				# 🎭 Базова помилка Playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError	# ⏳ Таймаути Playwright

# 🔠 Системні імпорти
import logging															# 🧾 Логування стратегій
from typing import Iterable, Optional, Protocol, Type					# 📐 Типи

# 🧩 Внутрішні модулі проєкту
from page_gateway.shared.errors import (								# ⚠️ Доменні помилки
    GatewayError,
    RenderError,
    UpstreamUnavailable,
)
from page_gateway.shared.utils.logger import LOG_NAME					# 🏷️ Базове ім'я логера


# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.errors.strategies")


# ================================
# 🧠 КОНТРАКТ СТРАТЕГІЙ
# ================================
class IErrorHandlingStrategy(Protocol):
    """🧠 Контракт, що визначає єдиний метод `handle`."""

    def handle(self, error: Exception) -> Optional[GatewayError]:
        """Вертає `GatewayError`, якщо виняток розпізнано, або None."""


# ================================
# 🌐 HTTPX-СТРАТЕГІЯ
# ================================
class HttpxErrorStrategy(IErrorHandlingStrategy):
    """🌐 Перетворює httpx-помилки на `UpstreamUnavailable` або його нащадка."""

    def __init__(self, error_cls: Type[UpstreamUnavailable] = UpstreamUnavailable) -> None:
        self._error_cls = error_cls										# 🏷️ Цільовий клас (UpstreamUnavailable/TransportError)

    def handle(self, error: Exception) -> Optional[GatewayError]:
        if not isinstance(error, httpx.HTTPError):
            return None

        url = _request_url(error)
        if isinstance(error, httpx.TimeoutException):					# ⏱️ Будь-який таймаут
            logger.debug("⏱️ httpx timeout", extra={"url": url})
            return self._error_cls(details=f"timeout: {error}", url=url)

        if isinstance(error, httpx.HTTPStatusError):					# 🔢 Неочікуваний статус
            status = error.response.status_code
            logger.debug("🔢 httpx status error", extra={"url": url, "status": status})
            return self._error_cls(details=f"HTTP {status}", url=url, status_code=status)

        logger.debug("🌐 httpx transport error", extra={"url": url})
        return self._error_cls(details=f"{type(error).__name__}: {error}", url=url)


# ================================
# 🎭 PLAYWRIGHT-СТРАТЕГІЯ
# ================================
class PlaywrightErrorStrategy(IErrorHandlingStrategy):
    """🎭 Конвертує винятки Playwright у `RenderError` з міткою етапу."""

    def __init__(self, stage: Optional[str] = None) -> None:
        self._stage = stage

    def handle(self, error: Exception) -> Optional[GatewayError]:
        if isinstance(error, PlaywrightTimeoutError):
            logger.debug("⏳ Playwright timeout", extra={"render_stage": self._stage})
            return RenderError(details=f"timeout: {error}", stage=self._stage)
        if isinstance(error, PlaywrightError):
            logger.debug("🎭 Playwright error", extra={"render_stage": self._stage})
            return RenderError(details=str(error), stage=self._stage)
        return None


def convert_error(error: Exception, strategies: Iterable[IErrorHandlingStrategy]) -> Optional[GatewayError]:
    """🔁 Прогоняє виняток крізь стратегії; перша, що впізнала, перемагає."""
    if isinstance(error, GatewayError):
        return error
    for strategy in strategies:
        converted = strategy.handle(error)
        if converted is not None:
            return converted
    return None


def _request_url(error: httpx.HTTPError) -> Optional[str]:
    """🔗 Дістає URL запиту, якщо httpx його знає."""
    try:
        return str(error.request.url)
    except RuntimeError:												# ℹ️ `.request` не встановлено
        return None


__all__ = [
    "HttpxErrorStrategy",
    "IErrorHandlingStrategy",
    "PlaywrightErrorStrategy",
    "convert_error",
]
