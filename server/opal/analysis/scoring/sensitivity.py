"""Sensitivity classification.

Turns the signals extracted from an artifact into typed, scored
findings and derives the artifact's overall sensitivity score and
level.  Field names are matched against the ordered pattern table;
detected image objects and document entities are looked up by name.
"""

from __future__ import annotations

from collections.abc import Sequence

from opal.models import sensitivity, signals, tables
from opal.utils import errors, logger, risk

log = logger.create_logger("Sensitivity")

# Score and level given to an artifact with no detectable signals.
# Absence of signals is not proof of public data.
EMPTY_ARTIFACT_SCORE = 20
EMPTY_ARTIFACT_LEVEL: sensitivity.SensitivityLevel = "INTERNAL"

# Added to the mean finding score for every PII finding.
PII_BONUS = 5


# ── Per-signal classification ──────────────────────────────


def _match_field(name: str, engine_tables: tables.EngineTables) -> tables.SensitivityRule | None:
    """Return the highest-scoring field rule matching *name*.

    Rules are checked in table order and a later rule only wins
    with a strictly higher score.
    """
    best: tables.SensitivityRule | None = None
    for pattern in engine_tables.field_patterns:
        if pattern.compiled.search(name) and (best is None or pattern.rule.score > best.score):
            best = pattern.rule
    return best


def _classify_field(signal: signals.ExtractedSignal, engine_tables: tables.EngineTables) -> sensitivity.SensitivityFinding:
    rule = _match_field(signal.name, engine_tables)
    if rule is None:
        # Unknown columns keep residual risk, at lower confidence.
        fallback = engine_tables.unmatched_field
        return sensitivity.SensitivityFinding(
            field=signal.name,
            type=fallback.type,
            is_pii=fallback.is_pii,
            score=fallback.score,
            confidence=risk.round_half_up(40 + 30 * signal.confidence),
        )
    return sensitivity.SensitivityFinding(
        field=signal.name,
        type=rule.type,
        is_pii=rule.is_pii,
        score=rule.score,
        confidence=risk.round_half_up(80 + 15 * signal.confidence),
    )


def _classify_lookup(
    signal: signals.ExtractedSignal,
    table: tables.LookupTable,
    prefix: str,
) -> sensitivity.SensitivityFinding:
    rule = table.lookup(signal.name) or table.unmatched
    return sensitivity.SensitivityFinding(
        field=f"{prefix}_{signal.name}",
        type=rule.type,
        is_pii=rule.is_pii,
        score=rule.score,
        confidence=risk.round_half_up(100 * signal.confidence),
    )


def classify_signal(
    signal: signals.ExtractedSignal,
    engine_tables: tables.EngineTables,
) -> sensitivity.SensitivityFinding:
    """Classify a single extracted signal."""
    if signal.kind == "field-name":
        return _classify_field(signal, engine_tables)
    if signal.kind == "detected-object":
        return _classify_lookup(signal, engine_tables.image_objects, "Image")
    return _classify_lookup(signal, engine_tables.document_entities, "Doc")


# ── Aggregation ────────────────────────────────────────────


def calculate_overall_score(findings: Sequence[sensitivity.SensitivityFinding]) -> int:
    """Mean finding score plus the PII bonus, clamped to 0-100.

    A set of fields that are individually PII never scores lower
    than the same set without PII.
    """
    if not findings:
        return EMPTY_ARTIFACT_SCORE
    mean = sum(f.score for f in findings) / len(findings)
    pii_bonus = PII_BONUS * sum(1 for f in findings if f.is_pii)
    return int(risk.clamp(risk.round_half_up(mean + pii_bonus), 0, 100))


def build_field_breakdown(
    findings: Sequence[sensitivity.SensitivityFinding],
) -> dict[sensitivity.SensitivityType, sensitivity.FieldBreakdownEntry]:
    """Roll findings up by type: count, mean score, PII flag."""
    grouped: dict[sensitivity.SensitivityType, list[sensitivity.SensitivityFinding]] = {}
    for finding in findings:
        grouped.setdefault(finding.type, []).append(finding)

    return {
        finding_type: sensitivity.FieldBreakdownEntry(
            count=len(group),
            avg_sensitivity=risk.round_half_up(sum(f.score for f in group) / len(group)),
            is_pii=group[0].is_pii,
        )
        for finding_type, group in grouped.items()
    }


# ── Public API ─────────────────────────────────────────────


def classify(
    kind: signals.ArtifactKind,
    artifact_signals: Sequence[signals.ExtractedSignal],
    engine_tables: tables.EngineTables,
) -> sensitivity.SensitivityProfile:
    """Build the sensitivity profile of one artifact.

    Args:
        kind: The artifact kind.
        artifact_signals: Signals in extractor emission order.
        engine_tables: The loaded scoring tables.

    Returns:
        A :class:`SensitivityProfile` whose findings keep the
        order of *artifact_signals*.

    Raises:
        InvalidInput: If a signal's kind does not belong to *kind*.
    """
    expected = signals.SIGNAL_KIND_FOR_ARTIFACT[kind]
    for signal in artifact_signals:
        if signal.kind != expected:
            raise errors.InvalidInput(
                f"Signal '{signal.name}' has kind '{signal.kind}' but {kind} artifacts carry '{expected}' signals"
            )

    findings = tuple(classify_signal(s, engine_tables) for s in artifact_signals)
    overall_score = calculate_overall_score(findings)
    profile = sensitivity.SensitivityProfile(
        findings=findings,
        overall_score=overall_score,
        level=risk.sensitivity_level(overall_score) if findings else EMPTY_ARTIFACT_LEVEL,
        field_breakdown=build_field_breakdown(findings),
    )

    log.info(
        "Sensitivity classified",
        {
            "kind": kind,
            "signals": len(findings),
            "pii": profile.pii_count,
            "score": profile.overall_score,
            "level": profile.level,
        },
    )
    return profile
