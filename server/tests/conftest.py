"""Shared fixtures for the test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from opal.analysis import engine as engine_mod
from opal.data import loader
from opal.models import signals, tables

# ── Tables & Engine ─────────────────────────────────────────────


@pytest.fixture(scope="session")
def engine_tables() -> tables.EngineTables:
    """The bundled scoring tables, loaded once."""
    return loader.load_tables()


@pytest.fixture(scope="session")
def engine(engine_tables: tables.EngineTables) -> engine_mod.PrivacyMetricsEngine:
    """An engine over the bundled tables."""
    return engine_mod.PrivacyMetricsEngine(engine_tables)


# ── Signal Factories ────────────────────────────────────────────


@pytest.fixture()
def field() -> Callable[..., signals.ExtractedSignal]:
    """Build a tabular column-name signal."""

    def _make(name: str, confidence: float = 1.0) -> signals.ExtractedSignal:
        return signals.ExtractedSignal(name=name, kind="field-name", confidence=confidence)

    return _make


@pytest.fixture()
def detected_object() -> Callable[..., signals.ExtractedSignal]:
    """Build an image object signal."""

    def _make(name: str, confidence: float = 1.0) -> signals.ExtractedSignal:
        return signals.ExtractedSignal(name=name, kind="detected-object", confidence=confidence)

    return _make


@pytest.fixture()
def detected_entity() -> Callable[..., signals.ExtractedSignal]:
    """Build a document entity signal."""

    def _make(name: str, confidence: float = 1.0) -> signals.ExtractedSignal:
        return signals.ExtractedSignal(name=name, kind="detected-entity", confidence=confidence)

    return _make


@pytest.fixture()
def customer_table() -> signals.ArtifactAnalysis:
    """A CSV with an SSN column, an email column and a free-text column."""
    return signals.ArtifactAnalysis(
        kind="tabular",
        file_name="customers.csv",
        file_size=2048,
        signals=(
            signals.ExtractedSignal(name="ssn", kind="field-name"),
            signals.ExtractedSignal(name="email", kind="field-name"),
            signals.ExtractedSignal(name="notes", kind="field-name"),
        ),
    )


@pytest.fixture()
def empty_table() -> signals.ArtifactAnalysis:
    """A CSV with no detected columns."""
    return signals.ArtifactAnalysis(kind="tabular", file_name="empty.csv")
