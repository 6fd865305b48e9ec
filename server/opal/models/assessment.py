"""Pydantic models for the engine's per-artifact privacy assessment."""

from __future__ import annotations

from typing import Literal

import pydantic

from opal.models import compliance as compliance_models
from opal.models import sensitivity as sensitivity_models
from opal.models import signals, techniques
from opal.utils.serialization import snake_to_camel

RiskLevel = Literal["LOW", "MEDIUM", "HIGH", "CRITICAL"]

RISK_LEVELS: tuple[RiskLevel, ...] = ("LOW", "MEDIUM", "HIGH", "CRITICAL")


class RecommendationExplanation(pydantic.BaseModel):
    """Rationale echoed for one of the top recommendations."""

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True, frozen=True)

    technique: techniques.Technique
    label: str
    complexity: techniques.Complexity
    explanation: str
    effectiveness: int


class ComplianceGap(pydantic.BaseModel):
    """A framework that is not fully compliant."""

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True, frozen=True)

    framework: compliance_models.Framework
    score: int
    status: compliance_models.ComplianceStatus


class ComplianceSummary(pydantic.BaseModel):
    """Count of compliant frameworks and the ones needing attention."""

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True, frozen=True)

    compliant_count: int
    total_frameworks: int = len(compliance_models.FRAMEWORKS)
    needs_attention: tuple[ComplianceGap, ...] = ()


class Explanation(pydantic.BaseModel):
    """Human-readable rationale for an assessment."""

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True, frozen=True)

    overall_score: str
    risk_level: str
    top_recommendations: tuple[RecommendationExplanation, ...] = ()
    compliance_status: ComplianceSummary


class PrivacyMetrics(pydantic.BaseModel):
    """Dashboard gauges derived from an assessment."""

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True, frozen=True)

    privacy_score: int
    risk_level: RiskLevel
    pii_fields_detected: int
    pii_fields_protected: int
    compliance_status: compliance_models.ComplianceStatus
    techniques_recommended: int
    encryption_strength: int
    anonymization_level: int
    audit_score: int


class PrivacyAssessment(pydantic.BaseModel):
    """The engine's full, immutable output for one artifact."""

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True, frozen=True)

    file_name: str = ""
    kind: signals.ArtifactKind
    overall_score: int = pydantic.Field(ge=0, le=100)
    risk_level: RiskLevel
    sensitivity: sensitivity_models.SensitivityProfile
    compliance: tuple[compliance_models.ComplianceResult, ...]
    recommendations: tuple[techniques.TechniqueRecommendation, ...] = ()
    explanations: Explanation
    metrics: PrivacyMetrics

    def compliance_for(self, framework: compliance_models.Framework) -> compliance_models.ComplianceResult:
        """Return the result for *framework*."""
        for result in self.compliance:
            if result.framework == framework:
                return result
        raise KeyError(framework)
