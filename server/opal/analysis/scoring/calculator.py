"""Overall privacy score and derived gauges.

Combines compliance, sensitivity and technique effectiveness into
the 0-100 privacy score, then derives the dashboard gauges the UI
shows next to it.
"""

from __future__ import annotations

from collections.abc import Sequence

from opal.models import assessment, compliance, sensitivity, tables, techniques
from opal.utils import logger, risk

log = logger.create_logger("PrivacyScore")

# ── Weights ─────────────────────────────────────────────────
# Expressed in percent so the weighted sum stays exact for the
# common quarter-point compliance means.
_COMPLIANCE_WEIGHT = 40
_SENSITIVITY_WEIGHT = 30
_TECHNIQUE_WEIGHT = 30

_HIGH_SECURITY_TECHNIQUES: frozenset[techniques.Technique] = frozenset(
    {"HOMOMORPHIC_ENCRYPTION", "SECURE_MULTIPARTY"}
)


def mean_effectiveness(
    recommendations: Sequence[techniques.TechniqueRecommendation],
    engine_tables: tables.EngineTables,
) -> float:
    """Average effectiveness over the recommendation list; 0 when empty."""
    if not recommendations:
        return 0.0
    return sum(engine_tables.effectiveness(r.technique) for r in recommendations) / len(recommendations)


def mean_compliance(results: Sequence[compliance.ComplianceResult]) -> float:
    """Average framework score; 0 when there are no results."""
    if not results:
        return 0.0
    return sum(r.score for r in results) / len(results)


def weighted_score(compliance_mean: float, sensitivity_score: int, effectiveness_mean: float) -> int:
    """``round(0.4 * compliance + 0.3 * (100 - sensitivity) + 0.3 * effectiveness)``.

    More sensitive data never yields a higher score.
    """
    total = (
        _COMPLIANCE_WEIGHT * compliance_mean
        + _SENSITIVITY_WEIGHT * (100 - sensitivity_score)
        + _TECHNIQUE_WEIGHT * effectiveness_mean
    )
    return int(risk.clamp(risk.round_half_up(total / 100), 0, 100))


def calculate_overall_score(
    results: Sequence[compliance.ComplianceResult],
    profile: sensitivity.SensitivityProfile,
    recommendations: Sequence[techniques.TechniqueRecommendation],
    engine_tables: tables.EngineTables,
) -> int:
    """Aggregate the three stage outputs into the 0-100 privacy score."""
    compliance_mean = mean_compliance(results)
    effectiveness_mean = mean_effectiveness(recommendations, engine_tables)
    score = weighted_score(compliance_mean, profile.overall_score, effectiveness_mean)

    log.info(
        "Privacy score calculated",
        {
            "complianceMean": compliance_mean,
            "sensitivity": profile.overall_score,
            "effectivenessMean": round(effectiveness_mean, 2),
            "score": score,
        },
    )
    return score


# ── Gauges ──────────────────────────────────────────────────


def _encryption_strength(recommendations: Sequence[techniques.TechniqueRecommendation]) -> int:
    if any(r.technique in _HIGH_SECURITY_TECHNIQUES for r in recommendations):
        return 512
    return 256


def _anonymization_level(technique_count: int, sensitivity_score: int) -> int:
    # 80 + 3 per technique - 10% of sensitivity, held within 70-98.
    level = risk.round_half_up((800 + 30 * technique_count - sensitivity_score) / 10)
    return int(risk.clamp(level, 70, 98))


def _audit_score(results: Sequence[compliance.ComplianceResult]) -> int:
    scores = [check.score for r in results for check in r.requirements]
    if not scores:
        return 0
    return risk.round_half_up(sum(scores) / len(scores))


def build_metrics(
    overall_score: int,
    risk_level: assessment.RiskLevel,
    profile: sensitivity.SensitivityProfile,
    results: Sequence[compliance.ComplianceResult],
    recommendations: Sequence[techniques.TechniqueRecommendation],
) -> assessment.PrivacyMetrics:
    """Derive the dashboard gauges for one assessment."""
    return assessment.PrivacyMetrics(
        privacy_score=overall_score,
        risk_level=risk_level,
        pii_fields_detected=profile.pii_count,
        pii_fields_protected=profile.pii_count * 95 // 100,
        compliance_status=risk.compliance_status(mean_compliance(results)),
        techniques_recommended=len(recommendations),
        encryption_strength=_encryption_strength(recommendations),
        anonymization_level=_anonymization_level(len(recommendations), profile.overall_score),
        audit_score=_audit_score(results),
    )
