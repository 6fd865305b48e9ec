"""Regulatory compliance scoring.

Scores an artifact against GDPR, HIPAA, CCPA and SOX.  Every
framework starts from the same base score and is penalised for the
artifact's sensitivity level, its PII volume, and the finding types
that framework is specifically concerned with.  Each result also
carries an advisory requirement checklist that never feeds back
into the framework score.
"""

from __future__ import annotations

from opal.models import compliance, sensitivity, tables
from opal.utils import logger, risk

log = logger.create_logger("Compliance")

BASE_SCORE = 85
MIN_SCORE = 60
MAX_SCORE = 98

# Requirement sub-checks live in a fixed advisory band.
_REQUIREMENT_MAX = 95
_REQUIREMENT_MIN = 75
_REQUIREMENT_MET_THRESHOLD = 80


def _sensitivity_penalty(level: sensitivity.SensitivityLevel) -> int:
    if level in ("RESTRICTED", "TOP_SECRET"):
        return 15
    if level == "CONFIDENTIAL":
        return 10
    return 0


def _pii_penalty(pii_count: int) -> int:
    if pii_count > 5:
        return 10
    if pii_count > 2:
        return 5
    return 0


def score_framework(
    profile: sensitivity.SensitivityProfile,
    rules: tables.FrameworkRules,
) -> int:
    """Clamped 60-98 score of *profile* against one framework."""
    score = BASE_SCORE - _sensitivity_penalty(profile.level) - _pii_penalty(profile.pii_count)
    if rules.penalty.types and profile.has_type(*rules.penalty.types):
        score -= rules.penalty.points
    return int(risk.clamp(score, MIN_SCORE, MAX_SCORE))


def check_requirements(
    profile: sensitivity.SensitivityProfile,
    rules: tables.FrameworkRules,
) -> tuple[compliance.RequirementCheck, ...]:
    """Advisory pass/partial check of each framework requirement.

    The score drops with the sensitivity level, the PII volume
    (capped at five fields), and when the artifact contains a
    finding type the requirement watches.
    """
    base = _REQUIREMENT_MAX - 4 * profile.level_rank - 2 * min(profile.pii_count, 5)
    checks = []
    for requirement in rules.requirements:
        triggered = bool(requirement.watches) and profile.has_type(*requirement.watches)
        score = int(risk.clamp(base - (5 if triggered else 0), _REQUIREMENT_MIN, _REQUIREMENT_MAX))
        checks.append(
            compliance.RequirementCheck(
                requirement=requirement.name,
                status="MET" if score >= _REQUIREMENT_MET_THRESHOLD else "PARTIAL",
                score=score,
            )
        )
    return tuple(checks)


def calculate(
    profile: sensitivity.SensitivityProfile,
    engine_tables: tables.EngineTables,
) -> tuple[compliance.ComplianceResult, ...]:
    """Score the profile against every framework.

    Args:
        profile: Output of the sensitivity classifier.
        engine_tables: The loaded scoring tables.

    Returns:
        One :class:`ComplianceResult` per framework, in
        GDPR, HIPAA, CCPA, SOX order.
    """
    results = []
    for framework in compliance.FRAMEWORKS:
        rules = engine_tables.frameworks[framework]
        score = score_framework(profile, rules)
        results.append(
            compliance.ComplianceResult(
                framework=framework,
                score=score,
                status=risk.compliance_status(score),
                requirements=check_requirements(profile, rules),
            )
        )

    log.info(
        "Compliance assessed",
        {r.framework: f"{r.score} {r.status}" for r in results},
    )
    return tuple(results)
