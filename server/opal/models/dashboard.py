"""Pydantic models for batch sessions and the multi-file dashboard."""

from __future__ import annotations

from typing import Any, Literal

import pydantic

from opal.models import assessment as assessment_models
from opal.models import compliance, sensitivity, techniques
from opal.utils.serialization import snake_to_camel

SessionStatus = Literal["processing", "completed", "error"]


class DashboardSummary(pydantic.BaseModel):
    """Aggregate view over every successfully assessed artifact in a batch."""

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True, frozen=True)

    total_files: int
    average_score: int
    overall_risk: assessment_models.RiskLevel
    privacy_techniques: tuple[techniques.Technique, ...] = ()
    risk_distribution: dict[assessment_models.RiskLevel, int]
    compliance_scores: dict[compliance.Framework, int]
    compliance_status: compliance.ComplianceStatus
    total_pii_fields: int
    unique_pii_types: tuple[sensitivity.SensitivityType, ...] = ()
    unique_pii_type_count: int
    encryption_strength: int
    anonymization_level: int
    insights: tuple[str, ...] = ()


class ArtifactUpload(pydantic.BaseModel):
    """An uploaded file as described by the upload layer.

    ``insights`` carries the structured output the upload layer's
    extractor attached (``detectedColumns``, ``detectedObjects``,
    ``detectedEntities``); raw bytes never reach this service.
    """

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True)

    file_name: str = pydantic.Field(min_length=1)
    file_type: str
    file_size: int = pydantic.Field(default=0, ge=0)
    insights: dict[str, Any] = pydantic.Field(default_factory=dict)


class BatchRequest(pydantic.BaseModel):
    """Body of a session upload."""

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True)

    artifacts: list[ArtifactUpload] = pydantic.Field(default_factory=list)


class ArtifactResult(pydantic.BaseModel):
    """A successfully assessed artifact within a session."""

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True)

    file_id: str
    file_name: str
    status: Literal["processed"] = "processed"
    assessment: assessment_models.PrivacyAssessment


class ArtifactFailure(pydantic.BaseModel):
    """An artifact that could not be assessed; excluded from the summary."""

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True)

    file_name: str
    error_type: str
    reason: str


class SessionRecord(pydantic.BaseModel):
    """State of one upload session held by the session store."""

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True)

    session_id: str
    status: SessionStatus = "processing"
    files: list[str] = pydantic.Field(default_factory=list)
    progress: int = 0
    started_at: float
    completed_at: float | None = None
    results: list[ArtifactResult] = pydantic.Field(default_factory=list)
    failures: list[ArtifactFailure] = pydantic.Field(default_factory=list)
    summary: DashboardSummary | None = None
    error: str | None = None
