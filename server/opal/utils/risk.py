"""Shared threshold helpers used by the scoring stages and the dashboard.

Each mapping is a pure function of a single score so that a
derived label can never disagree with the score it came from.
"""

from __future__ import annotations

import math

from opal.models import assessment, compliance, sensitivity


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up.

    ``round()`` uses banker's rounding, which would pull 62.5 down
    to 62.  Scores here always round .5 upwards.
    """
    return math.floor(value + 0.5)


def clamp(value: float, low: float, high: float) -> float:
    """Clamp *value* into ``[low, high]``."""
    return max(low, min(high, value))


def sensitivity_level(score: int) -> sensitivity.SensitivityLevel:
    """Map a 0-100 sensitivity score to its level (inclusive lower bounds)."""
    if score >= 85:
        return "TOP_SECRET"
    if score >= 70:
        return "RESTRICTED"
    if score >= 50:
        return "CONFIDENTIAL"
    if score >= 30:
        return "INTERNAL"
    return "PUBLIC"


def compliance_status(score: float) -> compliance.ComplianceStatus:
    """Map a compliance score to a framework status."""
    if score >= 85:
        return "COMPLIANT"
    if score >= 70:
        return "NEEDS_ATTENTION"
    return "NON_COMPLIANT"


def risk_level(score: int) -> assessment.RiskLevel:
    """Map a 0-100 privacy score to a risk tier.

    Higher privacy scores mean better protection and so a lower
    risk tier.
    """
    if score >= 85:
        return "LOW"
    if score >= 70:
        return "MEDIUM"
    if score >= 55:
        return "HIGH"
    return "CRITICAL"


def dashboard_risk(average_score: int) -> assessment.RiskLevel:
    """Map a batch's average privacy score to the dashboard risk tier.

    The dashboard uses three tiers only; a batch is never reported
    as CRITICAL, however low its average.
    """
    if average_score >= 85:
        return "LOW"
    if average_score >= 70:
        return "MEDIUM"
    return "HIGH"
