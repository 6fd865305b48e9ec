"""Session-level aggregation of per-artifact assessments.

Rolls a batch of assessments into the dashboard summary.  Every
aggregate is a sum, a count, or a set union, so the summary does
not depend on the order the assessments arrive in.
"""

from __future__ import annotations

from collections.abc import Sequence

from opal.models import assessment, compliance, dashboard, sensitivity, techniques
from opal.utils import errors, logger, risk

log = logger.create_logger("Dashboard")


def _insights(
    total_files: int,
    average_score: int,
    technique_count: int,
    total_pii: int,
    risk_distribution: dict[assessment.RiskLevel, int],
) -> tuple[str, ...]:
    lines = [
        f"Analyzed {total_files} file(s) with {average_score}% average privacy score",
        f"Recommended {technique_count} distinct privacy-preserving technique(s)",
        f"Identified {total_pii} sensitive PII field(s)",
    ]
    elevated = risk_distribution["HIGH"] + risk_distribution["CRITICAL"]
    if elevated:
        lines.append(f"{elevated} file(s) at high or critical privacy risk need attention")
    return tuple(lines)


def summarize(assessments: Sequence[assessment.PrivacyAssessment]) -> dashboard.DashboardSummary:
    """Aggregate a batch of assessments into a dashboard summary.

    Args:
        assessments: One assessment per successfully processed
            artifact, in any order.

    Returns:
        A :class:`DashboardSummary`.  Set-valued fields are sorted so
        permuting *assessments* yields an identical summary.

    Raises:
        EmptyBatch: If *assessments* is empty.
    """
    if not assessments:
        raise errors.EmptyBatch()

    total_files = len(assessments)
    average_score = risk.round_half_up(sum(a.overall_score for a in assessments) / total_files)

    risk_distribution: dict[assessment.RiskLevel, int] = dict.fromkeys(assessment.RISK_LEVELS, 0)
    framework_totals: dict[compliance.Framework, int] = dict.fromkeys(compliance.FRAMEWORKS, 0)
    framework_counts: dict[compliance.Framework, int] = dict.fromkeys(compliance.FRAMEWORKS, 0)
    technique_set: set[techniques.Technique] = set()
    pii_types: set[sensitivity.SensitivityType] = set()
    total_pii = 0
    encryption_total = 0
    anonymization_total = 0

    for item in assessments:
        risk_distribution[item.risk_level] += 1
        technique_set.update(r.technique for r in item.recommendations)
        for result in item.compliance:
            framework_totals[result.framework] += result.score
            framework_counts[result.framework] += 1
        pii = item.sensitivity.pii_findings
        total_pii += len(pii)
        pii_types.update(f.type for f in pii)
        encryption_total += item.metrics.encryption_strength
        anonymization_total += item.metrics.anonymization_level

    compliance_scores = {
        framework: risk.round_half_up(framework_totals[framework] / framework_counts[framework])
        for framework in compliance.FRAMEWORKS
        if framework_counts[framework]
    }
    compliance_mean = sum(framework_totals.values()) / max(1, sum(framework_counts.values()))
    privacy_techniques = tuple(sorted(technique_set))
    unique_pii_types = tuple(sorted(pii_types))

    summary = dashboard.DashboardSummary(
        total_files=total_files,
        average_score=average_score,
        overall_risk=risk.dashboard_risk(average_score),
        privacy_techniques=privacy_techniques,
        risk_distribution=risk_distribution,
        compliance_scores=compliance_scores,
        compliance_status=risk.compliance_status(compliance_mean),
        total_pii_fields=total_pii,
        unique_pii_types=unique_pii_types,
        unique_pii_type_count=len(unique_pii_types),
        encryption_strength=risk.round_half_up(encryption_total / total_files),
        anonymization_level=risk.round_half_up(anonymization_total / total_files),
        insights=_insights(total_files, average_score, len(privacy_techniques), total_pii, risk_distribution),
    )

    log.success(
        "Dashboard summarized",
        {
            "files": total_files,
            "averageScore": average_score,
            "overallRisk": summary.overall_risk,
            "techniques": len(privacy_techniques),
            "piiFields": total_pii,
        },
    )
    return summary
