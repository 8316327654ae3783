"""
🧪 test_render_fallback.py: RenderFallback з фейковою сесією

Перевіряє:
- Послідовність етапів: навігація → стабільність → видимість → знімок
- Збереження артефакту у тимчасовій теці
- Мітки етапів у RenderError та загальний дедлайн
- Відсутність файлів після скасування, зокрема під час запису
"""

import asyncio

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from conftest import SHOT, FakeRenderSession
from page_gateway.infrastructure.web import RenderFallback
from page_gateway.shared.errors import RenderError

URL = "https://cdn.example.org/data/h/p1.png"


@pytest.mark.asyncio
async def test_capture_runs_stages_and_persists_png(tmp_path, make_render_page):
    page, image = make_render_page()
    session = FakeRenderSession(page)
    renderer = RenderFallback(session, temp_dir=tmp_path)

    artifact = await renderer.capture(URL, chapter_id="ch/1", page_index=3)

    page.goto.assert_awaited_once()
    assert page.goto.await_args.args[0] == URL
    page.wait_for_load_state.assert_awaited_once()
    assert page.wait_for_load_state.await_args.args[0] == "networkidle"
    page.locator.assert_called_once_with("img")
    image.wait_for.assert_awaited_once()
    assert image.wait_for.await_args.kwargs["state"] == "visible"

    assert artifact.content == SHOT
    assert artifact.content_type == "image/png"
    assert artifact.path.parent == tmp_path
    assert artifact.path.name.startswith("page_ch_1_3_")
    assert artifact.path.read_bytes() == SHOT
    assert session.opened == 1


@pytest.mark.asyncio
async def test_two_captures_get_distinct_files(tmp_path, render_session):
    renderer = RenderFallback(render_session, temp_dir=tmp_path)

    first, second = await asyncio.gather(
        renderer.capture(URL, chapter_id="ch", page_index=0),
        renderer.capture(URL, chapter_id="ch", page_index=0),
    )

    assert first.path != second.path


@pytest.mark.asyncio
async def test_invisible_image_is_render_error_with_stage(tmp_path, make_render_page):
    page, image = make_render_page()
    image.wait_for.side_effect = PlaywrightTimeoutError("Timeout 10000ms exceeded")
    renderer = RenderFallback(FakeRenderSession(page), temp_dir=tmp_path)

    with pytest.raises(RenderError) as exc_info:
        await renderer.capture(URL, chapter_id="ch", page_index=0)

    assert exc_info.value.stage == "visible"
    image.screenshot.assert_not_awaited()
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_empty_screenshot_is_render_error(tmp_path, make_render_page):
    page, _ = make_render_page(screenshot=b"")
    renderer = RenderFallback(FakeRenderSession(page), temp_dir=tmp_path)

    with pytest.raises(RenderError) as exc_info:
        await renderer.capture(URL, chapter_id="ch", page_index=0)

    assert exc_info.value.stage == "capture"


@pytest.mark.asyncio
async def test_overall_deadline_is_render_error(tmp_path, make_render_page):
    page, _ = make_render_page()

    async def hang(*args, **kwargs):
        await asyncio.sleep(10)

    page.wait_for_load_state.side_effect = hang
    renderer = RenderFallback(FakeRenderSession(page), temp_dir=tmp_path, total_timeout_s=0.05)

    with pytest.raises(RenderError) as exc_info:
        await renderer.capture(URL, chapter_id="ch", page_index=0)

    assert exc_info.value.stage == "deadline"
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_cancellation_during_navigation_leaves_no_files(tmp_path, make_render_page):
    page, _ = make_render_page()
    started = asyncio.Event()

    async def hang(*args, **kwargs):
        started.set()
        await asyncio.sleep(10)

    page.wait_for_load_state.side_effect = hang
    renderer = RenderFallback(FakeRenderSession(page), temp_dir=tmp_path)

    task = asyncio.create_task(renderer.capture(URL, chapter_id="ch", page_index=0))
    await started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_cancellation_during_write_removes_partial_file(tmp_path, render_session, blocking_write):
    renderer = RenderFallback(render_session, temp_dir=tmp_path)

    task = asyncio.create_task(renderer.capture(URL, chapter_id="ch", page_index=7))
    await blocking_write.wait()

    partial = list(tmp_path.iterdir())
    assert len(partial) == 1
    assert partial[0].read_bytes() == SHOT[: len(SHOT) // 2]

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert list(tmp_path.iterdir()) == []
