# tests/conftest.py
import asyncio
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Додаємо src у sys.path, щоб працював імпорт "page_gateway.…" без встановлення пакета
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from page_gateway.domain.pages import ChapterPageManifest  # noqa: E402

SHOT = b"\x89PNG\r\n\x1a\nshot"


@pytest.fixture
def manifest() -> ChapterPageManifest:
    """5 сторінок повної якості, лише 3 у data-saver."""
    return ChapterPageManifest(
        delivery_base_url="https://cdn.example.org/",
        content_hash="abc123",
        standard_refs=["p1.png", "p2.png", "p3.png", "p4.png", "p5.png"],
        reduced_refs=["s1.jpg", "s2.jpg", "s3.jpg"],
    )


class FakeRenderSession:
    """Сесія рендеру без браузера: віддає одну й ту саму фейкову вкладку."""

    def __init__(self, page) -> None:
        self.page = page
        self.opened = 0

    async def startup(self) -> None:
        pass

    async def shutdown(self) -> None:
        pass

    @asynccontextmanager
    async def isolated_page(self):
        self.opened += 1
        yield self.page


@pytest.fixture
def make_render_page():
    """Фабрика фейкової вкладки Playwright: (page, image)."""

    def factory(screenshot: bytes = SHOT):
        image = MagicMock()
        image.wait_for = AsyncMock()
        image.screenshot = AsyncMock(return_value=screenshot)

        page = MagicMock()
        page.goto = AsyncMock(return_value=MagicMock(status=200))
        page.wait_for_load_state = AsyncMock()
        page.locator.return_value.first = image
        return page, image

    return factory


@pytest.fixture
def render_session(make_render_page) -> FakeRenderSession:
    page, _ = make_render_page()
    return FakeRenderSession(page)


@pytest.fixture
def blocking_write(monkeypatch) -> asyncio.Event:
    """
    Підміняє aiofiles.open у рендер-фолбеку: write пише частину байтів на диск
    і зависає. Повертає подію, що спрацьовує, коли частковий файл уже існує.
    """
    started = asyncio.Event()

    class HalfWrittenFile:
        def __init__(self, path, mode) -> None:
            self._path = path
            self._mode = mode
            self._handle = None

        async def __aenter__(self):
            self._handle = open(self._path, self._mode)
            return self

        async def __aexit__(self, exc_type, exc, tb) -> None:
            self._handle.close()

        async def write(self, data: bytes) -> int:
            self._handle.write(data[: len(data) // 2])
            self._handle.flush()
            started.set()
            await asyncio.sleep(10)
            return len(data)

    monkeypatch.setattr("page_gateway.infrastructure.web.render_fallback.aiofiles.open", HalfWrittenFile)
    return started
