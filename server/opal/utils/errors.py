"""
Error types raised by the privacy metrics engine, and a helper
for consistent error message extraction.

Every error here is local and recoverable by the caller.  None
of them terminates the host process.
"""

from __future__ import annotations


class PrivacyEngineError(Exception):
    """Base class for all engine errors."""


class InvalidInput(PrivacyEngineError):
    """An artifact analysis is missing required fields or carries a malformed signal."""


class ExtractionFailed(PrivacyEngineError):
    """The feature extractor could not produce signals for an artifact.

    Propagated unchanged by the engine.  Retry policy, if any,
    belongs to the caller.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class EmptyBatch(PrivacyEngineError):
    """A dashboard summary was requested over zero assessments."""

    def __init__(self, message: str = "Cannot summarize an empty batch of assessments") -> None:
        super().__init__(message)


class ConfigurationError(PrivacyEngineError):
    """The scoring tables could not be loaded or are incomplete."""


class SessionNotFound(PrivacyEngineError):
    """No session exists for the requested id."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


def get_error_message(error: BaseException | object) -> str:
    """
    Safely extract an error message from an unknown error type.

    Exceptions without a message fall back to their class name.
    """
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return "Unknown error"
