"""
🧪 test_routes.py: HTTP-поверхня шлюзу через FastAPI TestClient

Контейнер підміняється фейком, тому браузер і мережа не потрібні.
"""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from page_gateway.api import create_app
from page_gateway.api.routes import _retrieve_while_connected
from page_gateway.domain.pages import Failed, PageRequest, QualityTier, RetrievalPath, Served
from page_gateway.shared.errors import NotFound, RenderError, UpstreamUnavailable


@pytest.fixture
def container(manifest):
    return SimpleNamespace(
        startup=AsyncMock(),
        shutdown=AsyncMock(),
        metadata_client=AsyncMock(),
        page_locator=AsyncMock(**{"locate.return_value": manifest}),
        orchestrator=AsyncMock(),
        browser_session=SimpleNamespace(is_running=True),
    )


@pytest.fixture
def client(container):
    app = create_app(lambda: container)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


def test_lifespan_starts_and_stops_container(container):
    with TestClient(create_app(lambda: container)):
        container.startup.assert_awaited_once()
    container.shutdown.assert_awaited_once()


def test_download_served_returns_bytes_and_content_type(client, container):
    container.orchestrator.retrieve.return_value = Served(
        content=b"\xff\xd8img", content_type="image/jpeg", path=RetrievalPath.DIRECT
    )

    response = client.get("/api/chapter/ch-1/download/2?quality=data-saver")

    assert response.status_code == 200
    assert response.content == b"\xff\xd8img"
    assert response.headers["content-type"] == "image/jpeg"
    assert response.headers["x-retrieval-path"] == "direct"
    container.orchestrator.retrieve.assert_awaited_once_with(
        PageRequest(chapter_id="ch-1", page_index=2, tier=QualityTier.REDUCED)
    )


def test_download_render_failure_is_500_with_generic_message(client, container):
    container.orchestrator.retrieve.return_value = Failed(error=RenderError(stage="visible"))

    response = client.get("/api/chapter/ch-1/download/0")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to download page", "reason": "render_error", "stage": "visible"}


def test_download_not_found_is_502(client, container):
    container.orchestrator.retrieve.return_value = Failed(error=NotFound(resource_id="ch-x"))

    response = client.get("/api/chapter/ch-x/download/0")

    assert response.status_code == 502
    assert response.json()["reason"] == "not_found"


@pytest.mark.parametrize("path", ["/api/chapter/ch/download/abc", "/api/chapter/ch/download/0?quality=ultra"])
def test_bad_page_or_quality_is_400_without_retrieval(client, container, path):
    response = client.get(path)

    assert response.status_code == 400
    assert response.json()["reason"] == "invalid_page"
    container.orchestrator.retrieve.assert_not_awaited()


def test_pages_returns_manifest_shape(client):
    response = client.get("/api/chapter/ch-1/pages")

    assert response.status_code == 200
    body = response.json()
    assert body["baseUrl"] == "https://cdn.example.org"
    assert body["chapter"]["data"][0] == "p1.png"


def test_metadata_passthrough_and_query_defaults(client, container):
    container.metadata_client.get_chapters.return_value = {"result": "ok", "data": []}

    response = client.get("/api/manga/m1/chapters")

    assert response.status_code == 200
    assert response.json() == {"result": "ok", "data": []}
    container.metadata_client.get_chapters.assert_awaited_once_with("m1", None, None, 0)

    client.get("/api/manga/m1/chapters", params={"lang": "uk", "limit": 5, "offset": 10})
    container.metadata_client.get_chapters.assert_awaited_with("m1", "uk", 5, 10)


def test_metadata_upstream_error_is_mapped(client, container):
    container.metadata_client.search_manga.side_effect = UpstreamUnavailable(status_code=503)

    response = client.get("/api/manga/search", params={"title": "x"})

    assert response.status_code == 502
    assert response.json()["upstream_status"] == 503


def test_unexpected_exception_is_internal(client, container):
    container.metadata_client.get_manga.side_effect = RuntimeError("kaboom")

    response = client.get("/api/manga/m1")

    assert response.status_code == 500
    assert response.json()["reason"] == "internal"


def test_health_and_metrics(client):
    assert client.get("/health").json() == {"status": "ok", "browser": True}

    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "gateway_pages_served_total" in metrics.text


@pytest.mark.asyncio
async def test_client_disconnect_cancels_retrieval():
    started = asyncio.Event()
    cancelled = asyncio.Event()

    async def hanging_retrieve(page_request):
        started.set()
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.set()
            raise

    orchestrator = SimpleNamespace(retrieve=hanging_retrieve)
    request = SimpleNamespace(is_disconnected=AsyncMock(side_effect=lambda: started.is_set()))

    outcome = await _retrieve_while_connected(request, orchestrator, PageRequest("ch", 0), poll_interval=0.01)

    assert outcome is None
    assert cancelled.is_set()


@pytest.mark.asyncio
async def test_connected_client_gets_outcome():
    served = Served(content=b"img", content_type="image/jpeg", path=RetrievalPath.DIRECT)
    orchestrator = SimpleNamespace(retrieve=AsyncMock(return_value=served))
    request = SimpleNamespace(is_disconnected=AsyncMock(return_value=False))

    outcome = await _retrieve_while_connected(request, orchestrator, PageRequest("ch", 0), poll_interval=0.01)

    assert outcome is served


def test_download_after_disconnect_is_499(client, monkeypatch):
    monkeypatch.setattr("page_gateway.api.routes._retrieve_while_connected", AsyncMock(return_value=None))

    response = client.get("/api/chapter/ch/download/0")

    assert response.status_code == 499
    assert response.content == b""
