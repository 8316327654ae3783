# 🧭 page_gateway/infrastructure/web/browser_session.py
"""
🧭 BrowserSession: спільний на процес Chromium під керуванням Playwright.

🔹 Запускається один раз при старті застосунку та закривається при зупинці.
🔹 Кожен фолбек отримує власний BrowserContext + Page (ізольовані cookies та навігація).
🔹 Семафор обмежує кількість одночасних вкладок; вкладка закривається за будь-яких умов.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from playwright.async_api import (									# 🧠 Асинхронний API Playwright
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)

# 🔠 Системні імпорти
import asyncio														# ⏳ Семафор та блокування
import logging														# 🧾 Логування подій
from contextlib import asynccontextmanager							# 🤝 Контекст ізольованої вкладки
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence	# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from page_gateway.domain.pages import IRenderSession					# 🧭 Контракт сесії рендеру
from page_gateway.shared.errors import RenderError						# 🚨 Помилка рендеру
from page_gateway.shared.utils.logger import LOG_NAME					# 🏷️ Базове ім'я логера

logger = logging.getLogger(f"{LOG_NAME}.browser")					# 🧾 Ініціалізований логер сервісу


# ================================
# 🏛️ ГОЛОВНИЙ КЛАС
# ================================
class BrowserSession(IRenderSession):
    """
    🧭 Реалізація IRenderSession на базі Playwright Chromium.
    """

    # ================================
    # 🧱 ІНІЦІАЛІЗАЦІЯ
    # ================================
    def __init__(
        self,
        *,
        headless: bool = True,
        launch_args: Optional[Sequence[str]] = None,
        launch_channel: Optional[str] = None,
        user_agent: Optional[str] = None,
        max_pages: int = 4,
    ) -> None:
        """
        🧱 Зберігає налаштування запуску; сам браузер стартує в `startup()`.

        Args:
            headless (bool): Режим без інтерфейсу.
            launch_args (Sequence[str] | None): Аргументи Chromium (типово `--no-sandbox`).
            launch_channel (str | None): Канал запуску (наприклад, chrome).
            user_agent (str | None): User-Agent для контекстів.
            max_pages (int): Максимум одночасних ізольованих вкладок.
        """
        self._playwright: Optional[Playwright] = None				# 🧠 Об'єкт Playwright (лінива ініціалізація)
        self._browser: Optional[Browser] = None						# 🌐 Поточний браузер Chromium

        self._is_headless = bool(headless)
        self._launch_args: List[str] = list(launch_args) if launch_args is not None else ["--no-sandbox"]
        self._launch_channel = launch_channel
        self._user_agent = user_agent
        self._max_pages = max(1, int(max_pages))
        self._pages_gate = asyncio.Semaphore(self._max_pages)		# 🚦 Обмеження одночасних вкладок
        self._lifecycle_lock = asyncio.Lock()						# 🔒 Старт/стоп не перетинаються

        logger.info(
            "✅ BrowserSession: headless=%s, max_pages=%s, args=%s",
            self._is_headless,
            self._max_pages,
            self._launch_args,
        )

    async def __aenter__(self) -> "BrowserSession":
        """🤝 Підтримує шаблон async with."""
        await self.startup()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        """🚪 Закриває браузер після виходу з async with."""
        await self.shutdown()

    # ================================
    # 🚪 ПУБЛІЧНИЙ ІНТЕРФЕЙС
    # ================================
    @property
    def is_running(self) -> bool:
        return bool(self._browser and self._browser.is_connected())

    async def startup(self) -> None:
        """
        🔌 Запускає Playwright і Chromium, якщо вони ще не активні.
        """
        async with self._lifecycle_lock:
            if self.is_running:										# 🧪 Браузер уже активний
                return

            if self._playwright is None:
                self._playwright = await async_playwright().start()	# 🚀 Старт Playwright runtime

            launch_kwargs: Dict[str, Any] = {"headless": self._is_headless}
            if self._launch_channel:
                launch_kwargs["channel"] = self._launch_channel
            if self._launch_args:
                launch_kwargs["args"] = list(self._launch_args)

            logger.info("🚀 Запуск Chromium (headless=%s)…", self._is_headless)
            self._browser = await self._playwright.chromium.launch(**launch_kwargs)
            logger.info("✅ Chromium готовий до рендеру")

    async def shutdown(self) -> None:
        """
        📴 Завершує сесію браузера та Playwright.
        """
        async with self._lifecycle_lock:
            if self._browser:
                try:
                    await self._browser.close()
                finally:
                    self._browser = None
                    logger.info("🔒 Chromium закрито")

            if self._playwright:
                try:
                    await self._playwright.stop()
                finally:
                    self._playwright = None
                    logger.info("🔌 Playwright зупинено")

    @asynccontextmanager
    async def isolated_page(self) -> AsyncIterator[Page]:
        """
        🪟 Відкриває окремий контекст та вкладку для однієї навігації.

        Вкладка і контекст закриваються при виході, навіть якщо запит скасовано.
        """
        async with self._pages_gate:
            browser = self._browser
            if browser is None or not browser.is_connected():
                raise RenderError(details="browser session is not running", stage="session")

            context: BrowserContext = await browser.new_context(user_agent=self._user_agent)
            page: Optional[Page] = None
            try:
                page = await context.new_page()
                yield page
            finally:
                await self._close_quietly(page, context)

    # ================================
    # 🧰 ДОПОМІЖНІ МЕТОДИ
    # ================================
    @staticmethod
    async def _close_quietly(page: Optional[Page], context: BrowserContext) -> None:
        """🔒 Закриває вкладку і контекст; збій закриття лише логуються."""
        if page is not None:
            try:
                if not page.is_closed():
                    await page.close()
            except Exception as close_err:							# noqa: BLE001
                logger.debug("ℹ️ Не вдалося закрити вкладку: %s", close_err)
        try:
            await context.close()
        except Exception:											# noqa: BLE001
            logger.debug("⚠️ Не вдалося закрити контекст", exc_info=True)


__all__ = ["BrowserSession"]
