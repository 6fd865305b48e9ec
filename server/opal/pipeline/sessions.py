"""
Upload session store.

Tracks each batch upload from creation through completion.  One
store instance is created by the server at startup and handed to
the batch pipeline and route handlers; nothing here is global.
Appends from concurrent workers are serialised by a lock but are
not ordered.
"""

from __future__ import annotations

import threading
import time
import uuid

from opal.models import assessment, dashboard
from opal.utils import errors, logger

log = logger.create_logger("Sessions")


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:16]}"


class SessionStore:
    """In-memory store of upload sessions keyed by session id."""

    def __init__(self) -> None:
        self._sessions: dict[str, dashboard.SessionRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, file_names: list[str]) -> dashboard.SessionRecord:
        """Open a new session for *file_names*."""
        record = dashboard.SessionRecord(
            session_id=_new_id("opal"),
            files=list(file_names),
            started_at=time.time(),
        )
        with self._lock:
            self._sessions[record.session_id] = record
        log.info("Session created", {"sessionId": record.session_id, "files": len(file_names)})
        return record

    def get(self, session_id: str) -> dashboard.SessionRecord:
        """Return a snapshot of the session.

        Raises:
            SessionNotFound: If no session has this id.
        """
        with self._lock:
            record = self._sessions.get(session_id)
            if record is None:
                raise errors.SessionNotFound(session_id)
            return record.model_copy(deep=True)

    def _require(self, session_id: str) -> dashboard.SessionRecord:
        record = self._sessions.get(session_id)
        if record is None:
            raise errors.SessionNotFound(session_id)
        return record

    def _refresh_progress(self, record: dashboard.SessionRecord) -> None:
        done = len(record.results) + len(record.failures)
        record.progress = 100 * done // len(record.files) if record.files else 100

    def add_result(
        self,
        session_id: str,
        file_name: str,
        result: assessment.PrivacyAssessment,
    ) -> dashboard.ArtifactResult:
        """Record a successfully assessed artifact."""
        entry = dashboard.ArtifactResult(file_id=_new_id("file"), file_name=file_name, assessment=result)
        with self._lock:
            record = self._require(session_id)
            record.results.append(entry)
            self._refresh_progress(record)
        return entry

    def add_failure(self, session_id: str, failure: dashboard.ArtifactFailure) -> None:
        """Record an artifact that could not be assessed."""
        with self._lock:
            record = self._require(session_id)
            record.failures.append(failure)
            self._refresh_progress(record)

    def complete(self, session_id: str, summary: dashboard.DashboardSummary | None) -> dashboard.SessionRecord:
        """Mark the session completed, attaching the batch summary if there is one."""
        with self._lock:
            record = self._require(session_id)
            record.status = "completed"
            record.summary = summary
            record.progress = 100
            record.completed_at = time.time()
            snapshot = record.model_copy(deep=True)
        log.success(
            "Session completed",
            {"sessionId": session_id, "assessed": len(snapshot.results), "failed": len(snapshot.failures)},
        )
        return snapshot

    def fail(self, session_id: str, error: str) -> None:
        """Mark the session as errored."""
        with self._lock:
            record = self._require(session_id)
            record.status = "error"
            record.error = error
            record.completed_at = time.time()
        log.error("Session failed", {"sessionId": session_id, "error": error})
