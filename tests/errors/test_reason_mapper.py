"""
🧪 test_reason_mapper.py: мапінг винятків на коди причин і HTTP-відповіді
"""

import httpx
import pytest

from page_gateway.errors.reason_codes import ReasonCode, http_status_for
from page_gateway.errors.reason_mapper import build_error_payload, map_error_to_reason
from page_gateway.shared.errors import (
    InvalidPage,
    NotFound,
    QualityTierUnavailable,
    RenderError,
    TransportError,
    UpstreamUnavailable,
)


@pytest.mark.parametrize(
    "error, status, reason",
    [
        (InvalidPage(page_index=9, available=3), 400, "invalid_page"),
        (QualityTierUnavailable(page_index=4, available=3), 400, "quality_tier_unavailable"),
        (NotFound(resource_id="ch"), 502, "not_found"),
        (UpstreamUnavailable(status_code=503), 502, "upstream_unavailable"),
        (TransportError(), 502, "transport_error"),
        (RenderError(stage="capture"), 500, "render_error"),
        (ValueError("???"), 500, "internal"),
    ],
)
def test_status_and_reason(error, status, reason):
    got_status, body = build_error_payload(error)

    assert got_status == status
    assert body["reason"] == reason
    assert body["error"]


def test_invalid_page_context_exposes_page_and_available():
    _, body = build_error_payload(InvalidPage(page_index=9, available=3))

    assert body == {"error": "Invalid page number", "reason": "invalid_page", "page": 9, "available": 3}


def test_internal_details_never_reach_the_body():
    _, body = build_error_payload(RenderError(details="/tmp/secret/path.png", stage="persist"))

    assert "/tmp/secret" not in str(body)


def test_raw_httpx_error_is_recognised():
    request = httpx.Request("GET", "https://api.test/manga")
    reason, _ = map_error_to_reason(httpx.ReadTimeout("slow", request=request))

    assert reason is ReasonCode.UPSTREAM_UNAVAILABLE


def test_unknown_reason_defaults_to_500():
    assert http_status_for(ReasonCode.INTERNAL) == 500
