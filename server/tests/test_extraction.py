"""Tests for opal.extraction — kind resolution and metadata signal extraction."""

from __future__ import annotations

import asyncio

import pytest

from opal import extraction
from opal.utils import errors


def _extract(kind, metadata):
    return asyncio.run(extraction.MetadataSignalExtractor().extract_signals(kind, metadata))


class TestResolveKind:
    @pytest.mark.parametrize(
        ("file_type", "expected"),
        [
            ("csv", "tabular"),
            ("text/csv", "tabular"),
            ("image/png", "image"),
            ("IMAGE/JPEG", "image"),
            ("document", "textual"),
            ("application/pdf", "textual"),
            ("textual", "textual"),
        ],
    )
    def test_known_types(self, file_type: str, expected: str) -> None:
        assert extraction.resolve_kind(file_type) == expected

    def test_empty_type(self) -> None:
        with pytest.raises(errors.InvalidInput, match="missing"):
            extraction.resolve_kind("  ")

    def test_unsupported_type(self) -> None:
        with pytest.raises(errors.InvalidInput, match="not supported"):
            extraction.resolve_kind("audio/mpeg")


class TestMetadataSignalExtractor:
    def test_column_names(self) -> None:
        result = _extract("tabular", {"detectedColumns": ["ssn", "email"]})
        assert [s.name for s in result] == ["ssn", "email"]
        assert all(s.kind == "field-name" for s in result)

    def test_objects_with_confidence(self) -> None:
        result = _extract("image", {"detectedObjects": [{"type": "face", "confidence": "0.87"}]})
        assert result[0].name == "face"
        assert result[0].kind == "detected-object"
        assert result[0].confidence == pytest.approx(0.87)

    def test_entities(self) -> None:
        result = _extract("textual", {"detectedEntities": [{"name": "PERSON"}, "MONEY"]})
        assert [s.name for s in result] == ["PERSON", "MONEY"]
        assert all(s.kind == "detected-entity" for s in result)

    def test_missing_insights_yield_no_signals(self) -> None:
        assert _extract("image", {}) == []

    def test_reported_error(self) -> None:
        with pytest.raises(errors.ExtractionFailed) as exc_info:
            _extract("image", {"extractionError": "vision service unavailable"})
        assert exc_info.value.reason == "vision service unavailable"

    def test_not_a_list(self) -> None:
        with pytest.raises(errors.ExtractionFailed, match="must be a list"):
            _extract("tabular", {"detectedColumns": "ssn,email"})

    @pytest.mark.parametrize("entry", [42, {"confidence": 0.5}, {"name": "face", "confidence": "high"}, ""])
    def test_unreadable_entry(self, entry) -> None:
        with pytest.raises(errors.ExtractionFailed, match="entry 0"):
            _extract("image", {"detectedObjects": [entry]})
