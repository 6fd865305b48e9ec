"""
Server-Sent Events formatting helpers for batch streaming.

Pure functions over the session models; each returns one complete
``event:`` / ``data:`` frame.
"""

from __future__ import annotations

import json
from typing import Any

from opal.models import assessment, dashboard
from opal.utils.serialization import to_transport_dict


def format_sse_event(event_type: str, data: dict[str, Any]) -> str:
    """Format a Server-Sent Event string."""
    return f"event: {event_type}\ndata: {json.dumps(data)}\n\n"


def format_progress_event(step: str, message: str, progress: int) -> str:
    """Format a progress SSE event."""
    return format_sse_event(
        "progress",
        {"step": step, "message": message, "progress": progress},
    )


def format_session_event(session_id: str, files: list[str]) -> str:
    """Announce the session id before any work starts."""
    return format_sse_event("session", {"sessionId": session_id, "files": files})


def format_assessment_event(file_name: str, result: assessment.PrivacyAssessment) -> str:
    """Format the assessment of a single artifact."""
    return format_sse_event("assessment", {"fileName": file_name, "assessment": to_transport_dict(result)})


def format_failure_event(failure: dashboard.ArtifactFailure) -> str:
    """Format an artifact that could not be assessed."""
    return format_sse_event("failure", to_transport_dict(failure))


def format_dashboard_event(summary: dashboard.DashboardSummary) -> str:
    """Format the batch dashboard summary."""
    return format_sse_event("dashboard", to_transport_dict(summary))


def format_complete_event(record: dashboard.SessionRecord) -> str:
    """Format the final event of a stream."""
    return format_sse_event(
        "complete",
        {
            "sessionId": record.session_id,
            "status": record.status,
            "assessed": len(record.results),
            "failed": len(record.failures),
        },
    )


def format_error_event(message: str) -> str:
    """Format a stream-level error event."""
    return format_sse_event("error", {"error": message})
