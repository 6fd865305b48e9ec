"""Tests for opal.analysis.scoring.explanations."""

from __future__ import annotations

import pytest

from opal.analysis.scoring import explanations
from opal.models import compliance, techniques


def _result(framework: compliance.Framework, score: int, status: compliance.ComplianceStatus):
    return compliance.ComplianceResult(framework=framework, score=score, status=status)


class TestExplainOverallScore:
    @pytest.mark.parametrize(
        ("score", "prefix"),
        [
            (100, "Excellent"),
            (85, "Excellent"),
            (84, "Good"),
            (70, "Good"),
            (69, "Moderate"),
            (55, "Moderate"),
            (54, "Privacy protection needs"),
            (0, "Privacy protection needs"),
        ],
    )
    def test_bands(self, score, prefix) -> None:
        assert explanations.explain_overall_score(score).startswith(prefix)


class TestExplainRiskLevel:
    def test_every_tier_has_text(self) -> None:
        texts = {explanations.explain_risk_level(level) for level in ("LOW", "MEDIUM", "HIGH", "CRITICAL")}
        assert len(texts) == 4


class TestTopRecommendations:
    def test_first_two_only(self, engine_tables) -> None:
        recs = [
            techniques.TechniqueRecommendation(technique="DIFFERENTIAL_PRIVACY", priority="HIGH", reason="a"),
            techniques.TechniqueRecommendation(technique="FEDERATED_LEARNING", priority="MEDIUM", reason="b"),
            techniques.TechniqueRecommendation(technique="L_DIVERSITY", priority="MEDIUM", reason="c"),
        ]
        top = explanations.explain_top_recommendations(recs, engine_tables)
        assert [t.technique for t in top] == ["DIFFERENTIAL_PRIVACY", "FEDERATED_LEARNING"]
        assert [t.explanation for t in top] == ["a", "b"]
        assert [t.effectiveness for t in top] == [95, 88]
        assert [t.complexity for t in top] == ["High", "High"]
        assert top[0].label == "Differential Privacy"

    def test_empty(self, engine_tables) -> None:
        assert explanations.explain_top_recommendations([], engine_tables) == ()


class TestSummarizeCompliance:
    def test_counts_and_gaps(self) -> None:
        summary = explanations.summarize_compliance(
            [
                _result("GDPR", 65, "NON_COMPLIANT"),
                _result("HIPAA", 85, "COMPLIANT"),
                _result("CCPA", 70, "NEEDS_ATTENTION"),
                _result("SOX", 90, "COMPLIANT"),
            ]
        )
        assert summary.compliant_count == 2
        assert summary.total_frameworks == 4
        assert [g.framework for g in summary.needs_attention] == ["GDPR", "CCPA"]


class TestGenerate:
    def test_depends_only_on_arguments(self, engine_tables) -> None:
        recs = [techniques.TechniqueRecommendation(technique="DATA_MASKING", priority="LOW", reason="r")]
        results = [_result("GDPR", 85, "COMPLIANT")]
        first = explanations.generate(72, "MEDIUM", recs, results, engine_tables)
        second = explanations.generate(72, "MEDIUM", recs, results, engine_tables)
        assert first == second
        assert first.overall_score.startswith("Good")
