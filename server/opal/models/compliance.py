"""Pydantic models for regulatory compliance results."""

from __future__ import annotations

from typing import Literal

import pydantic

from opal.utils.serialization import snake_to_camel

Framework = Literal["GDPR", "HIPAA", "CCPA", "SOX"]

# Fixed reporting order for compliance results.
FRAMEWORKS: tuple[Framework, ...] = ("GDPR", "HIPAA", "CCPA", "SOX")

ComplianceStatus = Literal["COMPLIANT", "NEEDS_ATTENTION", "NON_COMPLIANT"]

RequirementStatus = Literal["MET", "PARTIAL"]


class RequirementCheck(pydantic.BaseModel):
    """Advisory check of a single framework requirement."""

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True, frozen=True)

    requirement: str
    status: RequirementStatus
    score: int = pydantic.Field(ge=75, le=95)


class ComplianceResult(pydantic.BaseModel):
    """Score and status of an artifact against one framework."""

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True, frozen=True)

    framework: Framework
    score: int = pydantic.Field(ge=60, le=98)
    status: ComplianceStatus
    requirements: tuple[RequirementCheck, ...] = ()
