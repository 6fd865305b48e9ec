"""Pydantic models for the read-only scoring tables."""

from __future__ import annotations

import re

import pydantic
from pydantic import ConfigDict

from opal.models import compliance, sensitivity
from opal.models import techniques as technique_models
from opal.utils.serialization import snake_to_camel


class SensitivityRule(pydantic.BaseModel):
    """Type, PII flag and base score assigned to a matched signal."""

    model_config = ConfigDict(alias_generator=snake_to_camel, populate_by_name=True, frozen=True)

    type: sensitivity.SensitivityType
    is_pii: bool
    score: int = pydantic.Field(ge=0, le=100)


class FieldPattern(pydantic.BaseModel):
    """A field-name rule with its regex compiled once at load time."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    pattern: str
    compiled: re.Pattern[str]
    rule: SensitivityRule


class LookupTable(pydantic.BaseModel):
    """Name-keyed rules (keys stored lower-case) plus the fallback for unknown names."""

    model_config = ConfigDict(frozen=True)

    rules: dict[str, SensitivityRule]
    unmatched: SensitivityRule

    def lookup(self, name: str) -> SensitivityRule | None:
        """Return the rule for *name* (case-insensitive), or ``None``."""
        return self.rules.get(name.strip().lower())


class RequirementRule(pydantic.BaseModel):
    """A named framework requirement and the finding types it watches."""

    model_config = ConfigDict(frozen=True)

    name: str
    watches: tuple[sensitivity.SensitivityType, ...] = ()


class FrameworkPenalty(pydantic.BaseModel):
    """Points removed from a framework score when any listed type is found."""

    model_config = ConfigDict(frozen=True)

    types: tuple[sensitivity.SensitivityType, ...] = ()
    points: int = pydantic.Field(default=0, ge=0)


class FrameworkRules(pydantic.BaseModel):
    """Configuration for one regulatory framework."""

    model_config = ConfigDict(frozen=True)

    penalty: FrameworkPenalty = FrameworkPenalty()
    requirements: tuple[RequirementRule, ...] = ()


class EngineTables(pydantic.BaseModel):
    """Every table the engine reads.  Built once and never mutated."""

    model_config = ConfigDict(frozen=True)

    field_patterns: tuple[FieldPattern, ...]
    unmatched_field: SensitivityRule
    image_objects: LookupTable
    document_entities: LookupTable
    frameworks: dict[compliance.Framework, FrameworkRules]
    techniques: dict[technique_models.Technique, technique_models.TechniqueProfile]

    def effectiveness(self, technique: technique_models.Technique) -> int:
        """Effectiveness score of *technique*."""
        return self.techniques[technique].effectiveness
