"""
🧪 test_error_strategies.py: стратегії конвертації httpx/Playwright винятків
"""

import httpx
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from page_gateway.errors.strategies import HttpxErrorStrategy, PlaywrightErrorStrategy, convert_error
from page_gateway.shared.errors import RenderError, TransportError, UpstreamUnavailable

REQUEST = httpx.Request("GET", "https://cdn.test/data/h/p.png")


def test_httpx_status_error_keeps_status_and_url():
    response = httpx.Response(404, request=REQUEST)
    error = httpx.HTTPStatusError("nope", request=REQUEST, response=response)

    converted = HttpxErrorStrategy(TransportError).handle(error)

    assert isinstance(converted, TransportError)
    assert converted.status_code == 404
    assert converted.url == "https://cdn.test/data/h/p.png"


def test_httpx_transport_error_without_request():
    converted = HttpxErrorStrategy().handle(httpx.ConnectError("refused"))

    assert type(converted) is UpstreamUnavailable
    assert converted.url is None


def test_httpx_strategy_ignores_foreign_errors():
    assert HttpxErrorStrategy().handle(ValueError("x")) is None


def test_playwright_errors_get_stage():
    timeout = PlaywrightErrorStrategy("stable").handle(PlaywrightTimeoutError("Timeout"))
    generic = PlaywrightErrorStrategy("navigate").handle(PlaywrightError("net::ERR_FAILED"))

    assert isinstance(timeout, RenderError) and timeout.stage == "stable"
    assert isinstance(generic, RenderError) and generic.stage == "navigate"


def test_convert_error_passes_domain_errors_through():
    original = RenderError(stage="capture")

    assert convert_error(original, [HttpxErrorStrategy()]) is original
    assert convert_error(KeyError("k"), [HttpxErrorStrategy(), PlaywrightErrorStrategy()]) is None
