"""Pydantic models for extractor signals and the engine's per-artifact input."""

from __future__ import annotations

from typing import Any, Literal

import pydantic

from opal.utils.serialization import snake_to_camel

ArtifactKind = Literal["tabular", "image", "textual"]

SignalKind = Literal["field-name", "detected-object", "detected-entity"]

# The only signal kind each artifact kind may carry.
SIGNAL_KIND_FOR_ARTIFACT: dict[ArtifactKind, SignalKind] = {
    "tabular": "field-name",
    "image": "detected-object",
    "textual": "detected-entity",
}


class ExtractedSignal(pydantic.BaseModel):
    """One feature detected in an artifact by the feature extractor."""

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True, frozen=True)

    name: str = pydantic.Field(min_length=1)
    kind: SignalKind
    confidence: float = pydantic.Field(default=1.0, ge=0.0, le=1.0)

    @pydantic.field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("signal name must not be blank")
        return stripped


class ArtifactAnalysis(pydantic.BaseModel):
    """Structured extractor output for one artifact, as consumed by the engine."""

    model_config = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True, frozen=True)

    kind: ArtifactKind
    signals: tuple[ExtractedSignal, ...] = ()
    file_name: str = ""
    file_size: int = pydantic.Field(default=0, ge=0)
    metadata: dict[str, Any] = pydantic.Field(default_factory=dict)
