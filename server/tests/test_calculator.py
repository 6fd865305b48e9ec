"""Tests for opal.analysis.scoring.calculator — overall score and gauges."""

from __future__ import annotations

import pytest

from opal.analysis.scoring import calculator, compliance, sensitivity, techniques
from opal.models import techniques as technique_models


def _rec(technique: technique_models.Technique) -> technique_models.TechniqueRecommendation:
    return technique_models.TechniqueRecommendation(technique=technique, priority="HIGH", reason="r")


class TestMeanEffectiveness:
    def test_empty_is_zero(self, engine_tables) -> None:
        assert calculator.mean_effectiveness([], engine_tables) == 0.0

    def test_average(self, engine_tables) -> None:
        recs = [_rec("HOMOMORPHIC_ENCRYPTION"), _rec("SECURE_MULTIPARTY")]
        assert calculator.mean_effectiveness(recs, engine_tables) == 95.0

    def test_duplicates_count_twice(self, engine_tables) -> None:
        recs = [_rec("DATA_MASKING"), _rec("TOKENIZATION"), _rec("TOKENIZATION")]
        assert calculator.mean_effectiveness(recs, engine_tables) == pytest.approx(200 / 3)


class TestWeightedScore:
    def test_customer_table_rounds_half_up(self) -> None:
        # 0.4 * 68.75 + 0.3 * 25 + 0.3 * 95 = 63.5
        assert calculator.weighted_score(68.75, 75, 95.0) == 64

    def test_bounds(self) -> None:
        assert calculator.weighted_score(0.0, 100, 0.0) == 0
        assert calculator.weighted_score(100.0, 0, 100.0) == 100

    def test_monotonic_in_sensitivity(self) -> None:
        previous = 101
        for sensitivity_score in range(0, 101):
            score = calculator.weighted_score(80.0, sensitivity_score, 80.0)
            assert score <= previous
            previous = score


class TestCalculateOverallScore:
    def test_customer_table(self, engine_tables, customer_table) -> None:
        profile = sensitivity.classify("tabular", customer_table.signals, engine_tables)
        results = compliance.calculate(profile, engine_tables)
        recs = techniques.recommend(profile, "tabular")
        assert calculator.calculate_overall_score(results, profile, recs, engine_tables) == 64

    def test_no_recommendations_contribute_zero(self, engine_tables, customer_table) -> None:
        profile = sensitivity.classify("tabular", customer_table.signals, engine_tables)
        results = compliance.calculate(profile, engine_tables)
        # 0.4 * 68.75 + 0.3 * 25 = 35
        assert calculator.calculate_overall_score(results, profile, [], engine_tables) == 35


class TestBuildMetrics:
    def test_customer_table_gauges(self, engine_tables, customer_table) -> None:
        profile = sensitivity.classify("tabular", customer_table.signals, engine_tables)
        results = compliance.calculate(profile, engine_tables)
        recs = techniques.recommend(profile, "tabular")
        metrics = calculator.build_metrics(64, "HIGH", profile, results, recs)

        assert metrics.privacy_score == 64
        assert metrics.risk_level == "HIGH"
        assert metrics.pii_fields_detected == 2
        assert metrics.pii_fields_protected == 1
        assert metrics.compliance_status == "NON_COMPLIANT"
        assert metrics.techniques_recommended == 2
        assert metrics.encryption_strength == 512
        # (800 + 60 - 75) / 10 = 78.5
        assert metrics.anonymization_level == 79
        assert 75 <= metrics.audit_score <= 95

    def test_standard_encryption_without_high_security_techniques(self, engine_tables) -> None:
        profile = sensitivity.classify("tabular", [], engine_tables)
        results = compliance.calculate(profile, engine_tables)
        recs = techniques.recommend(profile, "tabular")
        metrics = calculator.build_metrics(80, "MEDIUM", profile, results, recs)
        assert metrics.encryption_strength == 256
        assert metrics.pii_fields_protected == 0

    @pytest.mark.parametrize(("count", "sensitivity_score", "expected"), [(0, 100, 70), (4, 0, 92), (4, 10, 91)])
    def test_anonymization_level(self, count, sensitivity_score, expected) -> None:
        assert calculator._anonymization_level(count, sensitivity_score) == expected
