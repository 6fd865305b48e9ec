"""Explanation generation.

Fixed template text per score band and risk tier, the rationale of
the top two recommendations, and a compliance rollup.  Output
depends only on its arguments.
"""

from __future__ import annotations

from collections.abc import Sequence

from opal.models import assessment, compliance, tables, techniques

_TOP_RECOMMENDATIONS = 2

_RISK_TEXT: dict[assessment.RiskLevel, str] = {
    "LOW": "Minimal privacy risk with strong protective measures in place",
    "MEDIUM": "Manageable risk level, monitor and consider additional protections",
    "HIGH": "Elevated risk requires immediate attention and enhanced privacy measures",
    "CRITICAL": "Severe privacy risk demanding urgent comprehensive protection",
}


def explain_overall_score(score: int) -> str:
    """Describe the protection level implied by *score*."""
    if score >= 85:
        return "Excellent privacy protection with comprehensive safeguards"
    if score >= 70:
        return "Good privacy protection with room for improvement"
    if score >= 55:
        return "Moderate privacy protection, consider additional measures"
    return "Privacy protection needs significant enhancement"


def explain_risk_level(level: assessment.RiskLevel) -> str:
    """Describe a risk tier."""
    return _RISK_TEXT[level]


def explain_top_recommendations(
    recommendations: Sequence[techniques.TechniqueRecommendation],
    engine_tables: tables.EngineTables,
) -> tuple[assessment.RecommendationExplanation, ...]:
    """Echo technique, reason, effectiveness and complexity for the first two recommendations."""
    explained = []
    for rec in recommendations[:_TOP_RECOMMENDATIONS]:
        profile = engine_tables.techniques[rec.technique]
        explained.append(
            assessment.RecommendationExplanation(
                technique=rec.technique,
                label=profile.label,
                complexity=profile.complexity,
                explanation=rec.reason,
                effectiveness=profile.effectiveness,
            )
        )
    return tuple(explained)


def summarize_compliance(results: Sequence[compliance.ComplianceResult]) -> assessment.ComplianceSummary:
    """Count compliant frameworks and list the rest."""
    gaps = tuple(
        assessment.ComplianceGap(framework=r.framework, score=r.score, status=r.status)
        for r in results
        if r.status != "COMPLIANT"
    )
    return assessment.ComplianceSummary(
        compliant_count=len(results) - len(gaps),
        total_frameworks=len(results),
        needs_attention=gaps,
    )


def generate(
    overall_score: int,
    risk_level: assessment.RiskLevel,
    recommendations: Sequence[techniques.TechniqueRecommendation],
    results: Sequence[compliance.ComplianceResult],
    engine_tables: tables.EngineTables,
) -> assessment.Explanation:
    """Build the full explanation block for an assessment."""
    return assessment.Explanation(
        overall_score=explain_overall_score(overall_score),
        risk_level=explain_risk_level(risk_level),
        top_recommendations=explain_top_recommendations(recommendations, engine_tables),
        compliance_status=summarize_compliance(results),
    )
