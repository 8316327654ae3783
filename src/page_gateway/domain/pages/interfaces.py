# 🧩 page_gateway/domain/pages/interfaces.py
"""
🧩 Контракти компонентів шляху отримання сторінок.

🔹 Оркестратор бачить лише ці Protocol-и, тому тестується без мережі й браузера.
🔹 `IRenderSession` віддає ізольовану вкладку, а не керування браузером напряму.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from typing import Any, AsyncContextManager, Protocol, runtime_checkable	# 🧰 Protocol-и

# 🧩 Внутрішні модулі
from .entities import ChapterPageManifest, FetchedImage, TransientArtifact


@runtime_checkable
class IPageLocator(Protocol):
    """📜 Отримує свіжий маніфест сторінок розділу."""

    async def locate(self, chapter_id: str) -> ChapterPageManifest:
        """Raises: NotFound, UpstreamUnavailable."""
        ...


@runtime_checkable
class IDirectFetcher(Protocol):
    """📡 Одна спроба завантажити байти за URL."""

    async def fetch(self, url: str) -> FetchedImage:
        """Raises: TransportError."""
        ...


@runtime_checkable
class IRenderFallback(Protocol):
    """🖼️ Рендерить URL як сторінку та знімає зображення у тимчасовий файл."""

    async def capture(self, url: str, *, chapter_id: str, page_index: int) -> TransientArtifact:
        """Raises: RenderError."""
        ...


@runtime_checkable
class IRenderSession(Protocol):
    """🌐 Спільна на процес сесія браузера."""

    async def startup(self) -> None:
        ...

    async def shutdown(self) -> None:
        ...

    def isolated_page(self) -> AsyncContextManager[Any]:
        """Відкриває окремий контекст+вкладку; закриває при виході за будь-яких умов."""
        ...


__all__ = ["IDirectFetcher", "IPageLocator", "IRenderFallback", "IRenderSession"]
