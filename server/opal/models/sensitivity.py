"""Pydantic models for sensitivity findings and profiles."""

from __future__ import annotations

from typing import Literal

import pydantic

from opal.utils.serialization import snake_to_camel

SensitivityType = Literal[
    "EMAIL",
    "PHONE",
    "SSN",
    "CREDIT_CARD",
    "ADDRESS",
    "NAME",
    "BIRTHDATE",
    "FINANCIAL",
    "MEDICAL",
    "ID_NUMBER",
    "PERSON",
    "FACE",
    "TEXT",
    "DOCUMENT",
    "LICENSE_PLATE",
    "VEHICLE",
    "BUILDING",
    "ORGANIZATION",
    "LOCATION",
    "DATE",
    "MONEY",
    "GENERAL",
]

SensitivityLevel = Literal["PUBLIC", "INTERNAL", "CONFIDENTIAL", "RESTRICTED", "TOP_SECRET"]

# Ascending order; a level's index is its rank.
SENSITIVITY_LEVELS: tuple[SensitivityLevel, ...] = (
    "PUBLIC",
    "INTERNAL",
    "CONFIDENTIAL",
    "RESTRICTED",
    "TOP_SECRET",
)


class SensitivityFinding(pydantic.BaseModel):
    """A scored, typed sensitivity classification of one signal."""

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True, frozen=True)

    field: str
    type: SensitivityType
    is_pii: bool
    score: int = pydantic.Field(ge=0, le=100)
    confidence: int = pydantic.Field(ge=0, le=100)


class FieldBreakdownEntry(pydantic.BaseModel):
    """Per-type rollup of the findings in one artifact."""

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True, frozen=True)

    count: int
    avg_sensitivity: int
    is_pii: bool


class SensitivityProfile(pydantic.BaseModel):
    """All findings for an artifact plus the score and level derived from them."""

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True, frozen=True)

    findings: tuple[SensitivityFinding, ...] = ()
    overall_score: int = pydantic.Field(ge=0, le=100)
    level: SensitivityLevel
    field_breakdown: dict[SensitivityType, FieldBreakdownEntry] = pydantic.Field(default_factory=dict)

    @property
    def pii_findings(self) -> tuple[SensitivityFinding, ...]:
        """Findings flagged as personally identifiable."""
        return tuple(f for f in self.findings if f.is_pii)

    @property
    def pii_count(self) -> int:
        """Number of PII findings."""
        return len(self.pii_findings)

    @property
    def level_rank(self) -> int:
        """Position of ``level`` in ascending order (PUBLIC is 0)."""
        return SENSITIVITY_LEVELS.index(self.level)

    def has_type(self, *types: SensitivityType) -> bool:
        """True when any finding has one of *types*."""
        return any(f.type in types for f in self.findings)
