# 📦 page_gateway/config/container.py
"""
📦 Контейнер залежностей шлюзу.

🔹 Створює сервіси в правильному порядку DI з налаштувань ConfigService.
🔹 Володіє спільними ресурсами: `httpx.AsyncClient` та сесією браузера.
🔹 `startup()` / `shutdown()` викликаються один раз з lifespan застосунку.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx                                                             # 🌐 Спільний HTTP-клієнт

# 🔠 Системні імпорти
import logging                                                           # 🧾 Базові засоби логування
from pathlib import Path                                                 # 📁 Тимчасова тека рендеру
from typing import TYPE_CHECKING, Any, Optional                          # 🧮 Допоміжні типи

# 🧩 Внутрішні модулі проєкту
from page_gateway.domain.pages import QualitySelector                    # 🪶 Вибір якості
from page_gateway.infrastructure.delivery import DirectFetcher           # 📥 Пряме завантаження
from page_gateway.infrastructure.mangadex import MangaDexClient, PageLocator  # 📚 API метаданих
from page_gateway.infrastructure.retrieval import RetrievalOrchestrator  # 🧭 Автомат отримання
from page_gateway.infrastructure.web import BrowserSession, RenderFallback  # 🖼️ Рендер-фолбек
from page_gateway.shared.utils.logger import LOG_NAME, init_logging_from_config  # 🧾 Конфіг логування

if TYPE_CHECKING:
    from page_gateway.config.config_service import ConfigService         # 🗂️ Тип під час перевірки

logger = logging.getLogger(f"{LOG_NAME}.container")


# ================================
# 🛠️ ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def _int_or_default(value: Any, default: int) -> int:
    """
    Повертає ціле число або запасне значення, якщо каст неможливий.
    """
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def bootstrap_logging(config: "ConfigService") -> logging.Logger:
    """🪵 Піднімає логування з розділу `logging` конфігурації."""
    return init_logging_from_config(config.section("logging"))


# ================================
# 📦 КОНТЕЙНЕР
# ================================
class Container:
    """📦 Збирає граф сервісів шлюзу."""

    def __init__(self, config: "ConfigService") -> None:
        self.config = config

        timeout_s = float(config.get("http.timeout_s", 30, cast=float))
        self.http_client = httpx.AsyncClient(                            # 🌐 Один клієнт на процес
            timeout=httpx.Timeout(timeout_s),
            headers={"User-Agent": str(config.get("http.user_agent", "page-gateway/0.1"))},
            follow_redirects=True,
        )

        self.metadata_client = MangaDexClient(
            self.http_client,
            api_base=str(config.get("mangadex.api_base", "https://api.mangadex.org")),
            search_limit=_int_or_default(config.get("mangadex.search_limit"), 10),
            chapters_limit=_int_or_default(config.get("mangadex.chapters_limit"), 30),
            default_language=str(config.get("mangadex.default_language", "en")),
        )
        self.page_locator = PageLocator(self.metadata_client)
        self.quality_selector = QualitySelector(
            strict_reduced_tier=config.get_bool("retrieval.strict_reduced_tier", False),
        )
        self.direct_fetcher = DirectFetcher(
            self.http_client,
            max_bytes=_int_or_default(config.get("direct.max_bytes"), 20 * 1024 * 1024),
            chunk_size=_int_or_default(config.get("direct.chunk_size"), 64 * 1024),
            default_content_type=str(config.get("direct.default_content_type", "image/jpeg")),
            verify_magic=config.get_bool("direct.verify_magic", False),
        )

        self.browser_session = BrowserSession(
            headless=config.get_bool("playwright.headless", True),
            launch_args=config.get("playwright.launch_args", ["--no-sandbox"]),
            launch_channel=config.get("playwright.launch_channel"),
            user_agent=config.get("playwright.user_agent"),
            max_pages=_int_or_default(config.get("render.max_pages"), 4),
        )
        temp_dir: Optional[str] = config.get("render.temp_dir")
        self.render_fallback = RenderFallback(
            self.browser_session,
            temp_dir=Path(temp_dir) if temp_dir else None,
            navigation_timeout_ms=_int_or_default(config.get("render.navigation_timeout_ms"), 30000),
            stable_timeout_ms=_int_or_default(config.get("render.stable_timeout_ms"), 10000),
            visible_timeout_ms=_int_or_default(config.get("render.visible_timeout_ms"), 10000),
            total_timeout_s=float(config.get("render.total_timeout_s", 45, cast=float)),
            image_selector=str(config.get("render.image_selector", "img")),
        )

        self.orchestrator = RetrievalOrchestrator(
            self.page_locator,
            self.direct_fetcher,
            self.render_fallback,
            selector=self.quality_selector,
        )
        logger.debug("🧱 Контейнер зібрано")

    async def startup(self) -> None:
        """🔌 Запускає спільний браузер."""
        logger.info("🚀 Старт ресурсів шлюзу")
        await self.browser_session.startup()

    async def shutdown(self) -> None:
        """📴 Закриває браузер і HTTP-клієнт (ідемпотентно)."""
        logger.info("📴 Зупинка ресурсів шлюзу")
        try:
            await self.browser_session.shutdown()
        finally:
            if not self.http_client.is_closed:
                await self.http_client.aclose()


__all__ = ["Container", "bootstrap_logging"]
