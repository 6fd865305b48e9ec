"""
Feature extractor interface.

The engine never reads raw file content.  An extractor turns an
uploaded artifact's metadata into structured signals, or raises
:class:`~opal.utils.errors.ExtractionFailed`.  The bundled
:class:`MetadataSignalExtractor` reads the ``insights`` block the
upload layer attaches to each file (``detectedColumns``,
``detectedObjects``, ``detectedEntities``).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

import pydantic

from opal.models import signals
from opal.utils import errors, logger

log = logger.create_logger("Extractor")

# File types and MIME types accepted from the upload layer.
_KIND_BY_FILE_TYPE: dict[str, signals.ArtifactKind] = {
    "tabular": "tabular",
    "csv": "tabular",
    "text/csv": "tabular",
    "application/csv": "tabular",
    "image": "image",
    "image/jpeg": "image",
    "image/png": "image",
    "image/gif": "image",
    "image/webp": "image",
    "textual": "textual",
    "document": "textual",
    "text/plain": "textual",
    "application/pdf": "textual",
    "application/msword": "textual",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "textual",
}

_INSIGHT_KEY: dict[signals.ArtifactKind, str] = {
    "tabular": "detectedColumns",
    "image": "detectedObjects",
    "textual": "detectedEntities",
}


def resolve_kind(file_type: str) -> signals.ArtifactKind:
    """Map an upload file type or MIME type to an artifact kind.

    Raises:
        InvalidInput: If the type is empty or not supported.
    """
    normalized = file_type.strip().lower()
    if not normalized:
        raise errors.InvalidInput("Artifact kind is missing")
    kind = _KIND_BY_FILE_TYPE.get(normalized)
    if kind is None:
        raise errors.InvalidInput(f"File type not supported: {file_type}")
    return kind


class SignalExtractor(Protocol):
    """Anything that can produce signals for an artifact."""

    async def extract_signals(
        self,
        kind: signals.ArtifactKind,
        metadata: Mapping[str, Any],
    ) -> list[signals.ExtractedSignal]:
        """Return the artifact's signals, possibly none.

        Raises:
            ExtractionFailed: If extraction could not be performed.
        """
        ...


class MetadataSignalExtractor:
    """Reads signals already present in upload metadata."""

    async def extract_signals(
        self,
        kind: signals.ArtifactKind,
        metadata: Mapping[str, Any],
    ) -> list[signals.ExtractedSignal]:
        """Convert the upload layer's insights into typed signals.

        A missing insights list yields no signals.  An explicit
        ``extractionError`` entry, or entries that cannot be read,
        raise :class:`ExtractionFailed`.
        """
        reported_error = metadata.get("extractionError")
        if reported_error:
            raise errors.ExtractionFailed(str(reported_error))

        raw = metadata.get(_INSIGHT_KEY[kind])
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise errors.ExtractionFailed(f"{_INSIGHT_KEY[kind]} must be a list, got {type(raw).__name__}")

        signal_kind = signals.SIGNAL_KIND_FOR_ARTIFACT[kind]
        extracted = []
        for index, entry in enumerate(raw):
            try:
                extracted.append(_to_signal(entry, signal_kind))
            except (pydantic.ValidationError, TypeError, ValueError) as exc:
                raise errors.ExtractionFailed(
                    f"Unreadable {_INSIGHT_KEY[kind]} entry {index}: {errors.get_error_message(exc)}"
                ) from exc

        log.debug("Signals extracted", {"kind": kind, "count": len(extracted)})
        return extracted


def _to_signal(entry: Any, signal_kind: signals.SignalKind) -> signals.ExtractedSignal:
    """Build a signal from a bare name or a ``{type|name, confidence}`` mapping."""
    if isinstance(entry, str):
        return signals.ExtractedSignal(name=entry, kind=signal_kind)
    if not isinstance(entry, Mapping):
        raise TypeError(f"expected a string or object, got {type(entry).__name__}")

    name = entry.get("name") or entry.get("type")
    # Upstream detectors report confidence as a string such as "0.87".
    confidence = float(entry.get("confidence", 1.0))
    return signals.ExtractedSignal(name=name, kind=signal_kind, confidence=confidence)
