"""Tests for opal.pipeline.sessions — the upload session store."""

from __future__ import annotations

import pytest

from opal.models import dashboard
from opal.pipeline import sessions
from opal.utils import errors


@pytest.fixture()
def store() -> sessions.SessionStore:
    return sessions.SessionStore()


class TestSessionStore:
    def test_create(self, store) -> None:
        record = store.create(["a.csv", "b.png"])
        assert record.session_id.startswith("opal_")
        assert record.status == "processing"
        assert record.files == ["a.csv", "b.png"]
        assert len(store) == 1

    def test_ids_are_unique(self, store) -> None:
        assert store.create(["a"]).session_id != store.create(["a"]).session_id

    def test_unknown_session(self, store) -> None:
        with pytest.raises(errors.SessionNotFound):
            store.get("opal_missing")

    def test_get_returns_snapshot(self, store) -> None:
        record = store.create(["a.csv"])
        snapshot = store.get(record.session_id)
        snapshot.files.append("b.csv")
        assert store.get(record.session_id).files == ["a.csv"]

    def test_progress(self, store, engine, customer_table) -> None:
        record = store.create(["a.csv", "b.png"])
        entry = store.add_result(record.session_id, "a.csv", engine.assess(customer_table))
        assert entry.file_id.startswith("file_")
        assert entry.status == "processed"
        assert store.get(record.session_id).progress == 50

        failure = dashboard.ArtifactFailure(file_name="b.png", error_type="ExtractionFailed", reason="r")
        store.add_failure(record.session_id, failure)
        assert store.get(record.session_id).progress == 100

    def test_complete(self, store) -> None:
        record = store.create(["a.csv"])
        completed = store.complete(record.session_id, None)
        assert completed.status == "completed"
        assert completed.completed_at is not None
        assert completed.summary is None

    def test_fail(self, store) -> None:
        record = store.create(["a.csv"])
        store.fail(record.session_id, "boom")
        failed = store.get(record.session_id)
        assert failed.status == "error"
        assert failed.error == "boom"

    def test_add_to_unknown_session(self, store, engine, customer_table) -> None:
        with pytest.raises(errors.SessionNotFound):
            store.add_result("opal_missing", "a.csv", engine.assess(customer_table))
