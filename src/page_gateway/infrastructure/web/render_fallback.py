# 🖼️ page_gateway/infrastructure/web/render_fallback.py
"""
🖼️ RenderFallback: знімок сторінки через спільний браузер, коли пряме завантаження впало.

🔹 Ізольована вкладка на одну навігацію (сесію не створює й не закриває).
🔹 Обмежені очікування: стабільність (networkidle) та видимість першого `<img>`.
🔹 Знімок елемента пишеться через `aiofiles` в унікальний тимчасовий файл.
🔹 Частковий файл прибирається при будь-якій помилці або скасуванні.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import aiofiles														# 💽 Асинхронний запис файлу
from playwright.async_api import Page									# 📄 Вкладка Playwright

# 🔠 Системні імпорти
import asyncio														# ⏳ Загальний дедлайн
import logging														# 🧾 Логування етапів
import os															# 📁 Дескриптор mkstemp
import re															# 🧪 Очищення ідентифікаторів для імені файлу
import tempfile														# 🧪 Унікальні імена файлів
from pathlib import Path												# 🛤️ Шляхи
from typing import Optional											# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from page_gateway.domain.pages import IRenderFallback, IRenderSession, TransientArtifact
from page_gateway.errors.strategies import PlaywrightErrorStrategy		# 🎭 Playwright → RenderError
from page_gateway.shared.errors import RenderError						# 🚨 Помилка рендеру
from page_gateway.shared.utils.logger import LOG_NAME					# 🏷️ Базове ім'я логера

logger = logging.getLogger(f"{LOG_NAME}.render")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


class RenderFallback(IRenderFallback):
    """🖼️ Рендерить URL зображення як сторінку і зберігає піксели елемента."""

    def __init__(
        self,
        session: IRenderSession,
        *,
        temp_dir: Optional[Path] = None,
        navigation_timeout_ms: int = 30000,
        stable_timeout_ms: int = 10000,
        visible_timeout_ms: int = 10000,
        total_timeout_s: float = 45.0,
        image_selector: str = "img",
    ) -> None:
        self._session = session										# 🌐 Спільна сесія (не володіємо нею)
        self._temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir())
        self._navigation_timeout_ms = int(navigation_timeout_ms)
        self._stable_timeout_ms = int(stable_timeout_ms)
        self._visible_timeout_ms = int(visible_timeout_ms)
        self._total_timeout_s = float(total_timeout_s)
        self._image_selector = image_selector or "img"

    @property
    def temp_dir(self) -> Path:
        return self._temp_dir

    async def capture(self, url: str, *, chapter_id: str, page_index: int) -> TransientArtifact:
        """
        📸 Повертає тимчасовий артефакт із знімком або піднімає RenderError.

        Args:
            url: Розв'язаний URL сторінки.
            chapter_id: Ідентифікатор розділу (для імені файлу).
            page_index: Індекс сторінки (для імені файлу).
        """
        logger.info("🖼️ Рендер-фолбек для %s", url, extra={"chapter_id": chapter_id, "page_index": page_index})
        try:
            data = await asyncio.wait_for(self._render(url), timeout=self._total_timeout_s)
        except asyncio.TimeoutError as exc:
            raise RenderError(details=f"render exceeded {self._total_timeout_s}s", stage="deadline") from exc

        return await self._persist(data, chapter_id=chapter_id, page_index=page_index)

    # ================================
    # 🎭 ЕТАПИ РЕНДЕРУ
    # ================================
    async def _render(self, url: str) -> bytes:
        async with self._session.isolated_page() as page:
            await self._step("navigate", self._navigate(page, url))
            await self._step("stable", page.wait_for_load_state("networkidle", timeout=self._stable_timeout_ms))

            image = page.locator(self._image_selector).first
            await self._step("visible", image.wait_for(state="visible", timeout=self._visible_timeout_ms))
            data = await self._step("capture", image.screenshot(timeout=self._visible_timeout_ms))

        if not data:
            raise RenderError(details="empty screenshot", stage="capture")
        logger.debug("📸 Знімок отримано (%d байт)", len(data))
        return data

    async def _navigate(self, page: Page, url: str) -> None:
        response = await page.goto(url, wait_until="load", timeout=self._navigation_timeout_ms)
        if response is not None and response.status >= 400:
            logger.warning("⚠️ Навігація повернула HTTP %s для %s", response.status, url)

    @staticmethod
    async def _step(stage: str, awaitable):
        """🎭 Виконує етап і перетворює збої Playwright на RenderError з міткою."""
        try:
            return await awaitable
        except RenderError:
            raise
        except Exception as exc:
            error = PlaywrightErrorStrategy(stage).handle(exc)
            if error is None:
                raise
            logger.warning("❌ Етап рендеру '%s' не вдався: %s", stage, error, extra=error.to_log_extra())
            raise error from exc

    # ================================
    # 💾 ЗБЕРЕЖЕННЯ АРТЕФАКТУ
    # ================================
    async def _persist(self, data: bytes, *, chapter_id: str, page_index: int) -> TransientArtifact:
        """💾 Пише знімок у файл `page_<chapter>_<index>_<random>.png`."""
        safe_chapter = _UNSAFE_CHARS.sub("_", chapter_id)[:64] or "chapter"
        try:
            self._temp_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f"page_{safe_chapter}_{page_index}_",
                suffix=".png",
                dir=str(self._temp_dir),
            )
            os.close(fd)
        except OSError as exc:
            raise RenderError(details=f"cannot create transient file: {exc}", stage="persist") from exc

        path = Path(tmp_name)
        try:
            async with aiofiles.open(path, "wb") as file_handle:
                await file_handle.write(data)
        except BaseException as exc:
            path.unlink(missing_ok=True)							# 🧹 Частковий файл не лишаємо
            if isinstance(exc, OSError):
                raise RenderError(details=f"cannot write transient file: {exc}", stage="persist") from exc
            raise

        logger.debug("💾 Артефакт збережено: %s", path)
        return TransientArtifact(path=path, content=data, content_type="image/png")


__all__ = ["RenderFallback"]
