"""Tests for opal.utils.serialization — camelCase conversion and transport dicts."""

from __future__ import annotations

import pytest

from opal.models import compliance, signals
from opal.utils.serialization import snake_to_camel, to_transport_dict


class TestSnakeToCamel:
    """Tests for snake_to_camel()."""

    @pytest.mark.parametrize(
        ("input_str", "expected"),
        [
            ("overall_score", "overallScore"),
            ("single", "single"),
            ("is_pii", "isPii"),
            ("a_b_c", "aBC"),
            ("pii_fields_detected", "piiFieldsDetected"),
            ("unique_pii_type_count", "uniquePiiTypeCount"),
        ],
    )
    def test_conversion(self, input_str: str, expected: str) -> None:
        assert snake_to_camel(input_str) == expected

    def test_empty_string(self) -> None:
        assert snake_to_camel("") == ""


class TestToTransportDict:
    def test_camel_case_keys(self) -> None:
        analysis = signals.ArtifactAnalysis(kind="tabular", file_name="a.csv", file_size=10)
        data = to_transport_dict(analysis)
        assert data["fileName"] == "a.csv"
        assert data["fileSize"] == 10
        assert "file_name" not in data

    def test_tuples_become_lists(self) -> None:
        analysis = signals.ArtifactAnalysis(
            kind="tabular", signals=(signals.ExtractedSignal(name="ssn", kind="field-name"),)
        )
        assert to_transport_dict(analysis)["signals"] == [{"name": "ssn", "kind": "field-name", "confidence": 1.0}]

    def test_enum_values_verbatim(self) -> None:
        result = compliance.ComplianceResult(framework="GDPR", score=65, status="NON_COMPLIANT")
        data = to_transport_dict(result)
        assert data["framework"] == "GDPR"
        assert data["status"] == "NON_COMPLIANT"

    def test_validates_back(self) -> None:
        analysis = signals.ArtifactAnalysis(
            kind="image", signals=(signals.ExtractedSignal(name="face", kind="detected-object", confidence=0.5),)
        )
        assert signals.ArtifactAnalysis.model_validate(to_transport_dict(analysis)) == analysis
