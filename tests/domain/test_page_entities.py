"""
🧪 test_page_entities.py: доменні DTO сторінок

Перевіряє:
- Розбір рівня якості з аліасами
- Незмінність і JSON-представлення маніфесту
- Видалення тимчасового артефакту
"""

import dataclasses

import pytest

from page_gateway.domain.pages import (
    ChapterPageManifest,
    Failed,
    PageRequest,
    QualityTier,
    TransientArtifact,
)
from page_gateway.errors.reason_codes import ReasonCode
from page_gateway.shared.errors import InvalidPage, RenderError


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, QualityTier.STANDARD),
        ("", QualityTier.STANDARD),
        ("data", QualityTier.STANDARD),
        ("Standard", QualityTier.STANDARD),
        ("data-saver", QualityTier.REDUCED),
        (" reduced ", QualityTier.REDUCED),
    ],
)
def test_quality_tier_parse_aliases(raw, expected):
    assert QualityTier.parse(raw) is expected


def test_quality_tier_parse_unknown_is_invalid_page():
    with pytest.raises(InvalidPage):
        QualityTier.parse("ultra")


def test_path_segments():
    assert QualityTier.STANDARD.path_segment == "data"
    assert QualityTier.REDUCED.path_segment == "data-saver"


def test_manifest_is_frozen_and_normalized(manifest):
    assert manifest.delivery_base_url == "https://cdn.example.org"
    assert isinstance(manifest.standard_refs, tuple)
    assert manifest.page_count == 5
    assert manifest.refs_for(QualityTier.REDUCED) == ("s1.jpg", "s2.jpg", "s3.jpg")

    with pytest.raises(dataclasses.FrozenInstanceError):
        manifest.content_hash = "other"  # type: ignore[misc]


def test_manifest_to_dict_matches_upstream_shape(manifest):
    payload = manifest.to_dict()

    assert payload["baseUrl"] == "https://cdn.example.org"
    assert payload["chapter"]["hash"] == "abc123"
    assert payload["chapter"]["dataSaver"] == ["s1.jpg", "s2.jpg", "s3.jpg"]


def test_page_request_log_extra():
    request = PageRequest(chapter_id="ch-1", page_index=2, tier=QualityTier.REDUCED)

    assert request.log_extra() == {"chapter_id": "ch-1", "page_index": 2, "tier": "reduced"}


def test_transient_artifact_remove_is_idempotent(tmp_path):
    path = tmp_path / "page.png"
    path.write_bytes(b"png")
    artifact = TransientArtifact(path=path, content=b"png")

    assert artifact.remove() is True
    assert not path.exists()
    assert artifact.remove() is False


def test_failed_exposes_reason():
    failed = Failed(error=RenderError(stage="visible"))

    assert failed.reason is ReasonCode.RENDER_ERROR
