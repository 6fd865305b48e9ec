"""Shared serialization helpers for camelCase conversion.

Provides the ``snake_to_camel`` alias generator used by every
Pydantic model config, and a ``to_transport_dict`` helper for
building JSON payloads that keep enum values verbatim.
"""

from __future__ import annotations

from typing import Any

import pydantic


def snake_to_camel(name: str) -> str:
    """Convert a snake_case string to camelCase.

    Args:
        name: A snake_case identifier such as
            ``"overall_score"``.

    Returns:
        The camelCase equivalent, e.g. ``"overallScore"``.
    """
    parts = name.split("_")
    return parts[0] + "".join(w.capitalize() for w in parts[1:])


def to_transport_dict(obj: pydantic.BaseModel) -> dict[str, Any]:
    """Dump a model to a JSON-safe dict with camelCase keys.

    Tuples become lists and Literal values are emitted exactly as
    declared (``"TOP_SECRET"``, ``"field-name"``), so the payload
    can be fed back through ``model_validate`` unchanged.
    """
    return obj.model_dump(mode="json", by_alias=True)
