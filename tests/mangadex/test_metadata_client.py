"""
🧪 test_metadata_client.py: MangaDexClient поверх httpx.MockTransport

Перевіряє:
- Шляхи та query-параметри запитів
- 404 і error-тіло → NotFound
- 5xx, мережеві збої, битий JSON → UpstreamUnavailable
"""

import httpx
import pytest

from page_gateway.infrastructure.mangadex import MangaDexClient
from page_gateway.shared.errors import NotFound, UpstreamUnavailable

API = "https://api.test"


def make_client(handler) -> MangaDexClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return MangaDexClient(http, api_base=API + "/")


@pytest.mark.asyncio
async def test_search_sends_title_limit_and_includes():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = request.url.params
        return httpx.Response(200, json={"result": "ok", "data": [{"id": "m1"}]})

    payload = await make_client(handler).search_manga("Berserk", limit=5)

    assert payload["data"][0]["id"] == "m1"
    assert seen["path"] == "/manga"
    assert seen["params"]["title"] == "Berserk"
    assert seen["params"]["limit"] == "5"
    assert seen["params"].get_list("includes[]") == ["cover_art", "author"]


@pytest.mark.asyncio
async def test_chapters_feed_is_ordered_newest_first():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = request.url.params
        return httpx.Response(200, json={"result": "ok", "data": []})

    await make_client(handler).get_chapters("m1", "uk", limit=10, offset=20)

    assert seen["path"] == "/manga/m1/feed"
    assert seen["params"]["translatedLanguage[]"] == "uk"
    assert seen["params"]["offset"] == "20"
    assert seen["params"]["order[volume]"] == "desc"
    assert seen["params"]["order[chapter]"] == "desc"


@pytest.mark.asyncio
async def test_omitted_arguments_use_configured_defaults():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.params)
        return httpx.Response(200, json={"result": "ok", "data": []})

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = MangaDexClient(http, api_base=API, search_limit=3, chapters_limit=5, default_language="uk")

    await client.search_manga("Berserk")
    await client.get_chapters("m1")

    assert seen[0]["limit"] == "3"
    assert seen[1]["limit"] == "5"
    assert seen[1]["translatedLanguage[]"] == "uk"


@pytest.mark.asyncio
async def test_identifier_is_escaped_as_single_segment():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["raw_path"] = request.url.raw_path
        return httpx.Response(200, json={"result": "ok"})

    await make_client(handler).get_at_home_server("../admin")

    assert seen["raw_path"].startswith(b"/at-home/server/..%2Fadmin")


@pytest.mark.asyncio
async def test_404_is_not_found_with_resource_id():
    client = make_client(lambda request: httpx.Response(404, json={"result": "error"}))

    with pytest.raises(NotFound) as exc_info:
        await client.get_at_home_server("missing")

    assert exc_info.value.resource_id == "missing"
    assert exc_info.value.message == "Chapter not found upstream"


@pytest.mark.asyncio
async def test_error_body_with_404_status_is_not_found():
    body = {"result": "error", "errors": [{"status": 404, "title": "Not Found"}]}
    client = make_client(lambda request: httpx.Response(200, json=body))

    with pytest.raises(NotFound):
        await client.get_manga("m404")


@pytest.mark.asyncio
async def test_error_body_without_404_is_upstream_unavailable():
    body = {"result": "error", "errors": [{"status": 400}]}
    client = make_client(lambda request: httpx.Response(200, json=body))

    with pytest.raises(UpstreamUnavailable):
        await client.get_manga("m1")


@pytest.mark.asyncio
async def test_5xx_is_upstream_unavailable_with_status():
    client = make_client(lambda request: httpx.Response(503, text="busy"))

    with pytest.raises(UpstreamUnavailable) as exc_info:
        await client.get_manga("m1")

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_transport_failure_is_upstream_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(UpstreamUnavailable) as exc_info:
        await make_client(handler).get_at_home_server("ch")

    assert not isinstance(exc_info.value, NotFound)
    assert exc_info.value.url is not None


@pytest.mark.asyncio
async def test_undecodable_body_is_upstream_unavailable():
    client = make_client(lambda request: httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(UpstreamUnavailable):
        await client.get_at_home_server("ch")
