"""Pydantic models for privacy-preserving technique recommendations."""

from __future__ import annotations

from typing import Literal

import pydantic

from opal.utils.serialization import snake_to_camel

Technique = Literal[
    "DIFFERENTIAL_PRIVACY",
    "HOMOMORPHIC_ENCRYPTION",
    "SECURE_MULTIPARTY",
    "K_ANONYMITY",
    "L_DIVERSITY",
    "T_CLOSENESS",
    "DATA_MASKING",
    "TOKENIZATION",
    "FEDERATED_LEARNING",
]

TECHNIQUES: tuple[Technique, ...] = (
    "DIFFERENTIAL_PRIVACY",
    "HOMOMORPHIC_ENCRYPTION",
    "SECURE_MULTIPARTY",
    "K_ANONYMITY",
    "L_DIVERSITY",
    "T_CLOSENESS",
    "DATA_MASKING",
    "TOKENIZATION",
    "FEDERATED_LEARNING",
)

Priority = Literal["LOW", "MEDIUM", "HIGH"]

Complexity = Literal["Low", "Medium", "High", "Very High"]


class TechniqueRecommendation(pydantic.BaseModel):
    """A technique proposed for an artifact, with priority and rationale."""

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True, frozen=True)

    technique: Technique
    priority: Priority
    reason: str


class TechniqueProfile(pydantic.BaseModel):
    """Static properties of a technique, loaded from the technique table."""

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True, frozen=True)

    label: str
    effectiveness: int = pydantic.Field(ge=0, le=100)
    complexity: Complexity
