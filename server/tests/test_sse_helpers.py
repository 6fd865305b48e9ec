"""Tests for opal.pipeline.sse_helpers — SSE formatting utilities."""

from __future__ import annotations

import json

from opal.models import dashboard
from opal.pipeline.sse_helpers import (
    format_assessment_event,
    format_complete_event,
    format_failure_event,
    format_progress_event,
    format_sse_event,
)


def _payload(event: str) -> dict:
    return json.loads(event.split("\n")[1][len("data: ") :])


class TestFormatSseEvent:
    def test_basic_event(self) -> None:
        result = format_sse_event("progress", {"step": "init"})
        assert result.startswith("event: progress\n")
        assert result.endswith("\n\n")
        assert _payload(result) == {"step": "init"}


class TestFormatProgressEvent:
    def test_progress_event(self) -> None:
        payload = _payload(format_progress_event("assess-file", "Processed 1 of 2", 50))
        assert payload == {"step": "assess-file", "message": "Processed 1 of 2", "progress": 50}


class TestFormatAssessmentEvent:
    def test_camel_case_payload(self, engine, customer_table) -> None:
        event = format_assessment_event("customers.csv", engine.assess(customer_table))
        assert event.startswith("event: assessment\n")
        payload = _payload(event)
        assert payload["fileName"] == "customers.csv"
        assert payload["assessment"]["overallScore"] == 64
        assert payload["assessment"]["riskLevel"] == "HIGH"


class TestFormatFailureEvent:
    def test_failure_event(self) -> None:
        failure = dashboard.ArtifactFailure(file_name="x.png", error_type="ExtractionFailed", reason="timeout")
        payload = _payload(format_failure_event(failure))
        assert payload == {"fileName": "x.png", "errorType": "ExtractionFailed", "reason": "timeout"}


class TestFormatCompleteEvent:
    def test_counts(self) -> None:
        record = dashboard.SessionRecord(
            session_id="opal_1",
            status="completed",
            started_at=0.0,
            failures=[dashboard.ArtifactFailure(file_name="x", error_type="InvalidInput", reason="r")],
        )
        payload = _payload(format_complete_event(record))
        assert payload == {"sessionId": "opal_1", "status": "completed", "assessed": 0, "failed": 1}
