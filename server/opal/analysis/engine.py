"""Privacy Metrics Engine — orchestrator.

A stateless service constructed once with its read-only scoring
tables and passed explicitly to whatever needs to assess artifacts.
Per artifact it runs the sensitivity classifier, then compliance
and technique recommendation (both depend only on the classifier),
then the score aggregator, risk classifier and explanations.
"""

from __future__ import annotations

import pathlib
from collections.abc import Mapping
from typing import Any

import pydantic

from opal.analysis.scoring import calculator, compliance, explanations, sensitivity, techniques
from opal.data import loader
from opal.models import assessment, signals, tables
from opal.utils import errors, logger, risk

log = logger.create_logger("Engine")


class PrivacyMetricsEngine:
    """Scores artifacts against fixed sensitivity, compliance and technique tables.

    The engine holds no mutable state, so a single instance can
    assess any number of artifacts concurrently.
    """

    def __init__(self, engine_tables: tables.EngineTables) -> None:
        self._tables = engine_tables

    @classmethod
    def from_data_dir(cls, data_dir: pathlib.Path | None = None) -> PrivacyMetricsEngine:
        """Load the scoring tables and build an engine.

        Raises:
            ConfigurationError: If the tables cannot be loaded.
        """
        return cls(loader.load_tables(data_dir))

    @property
    def tables(self) -> tables.EngineTables:
        """The read-only scoring tables."""
        return self._tables

    def assess(self, artifact_analysis: signals.ArtifactAnalysis | Mapping[str, Any]) -> assessment.PrivacyAssessment:
        """Produce the full privacy assessment for one artifact.

        Args:
            artifact_analysis: The extractor's structured output, as a
                model or as a camelCase/snake_case mapping.  An empty
                signal list is valid input.

        Returns:
            An immutable :class:`PrivacyAssessment`.

        Raises:
            InvalidInput: If the artifact kind is missing or unknown,
                or a signal is malformed.
        """
        analysis = _coerce(artifact_analysis)

        profile = sensitivity.classify(analysis.kind, analysis.signals, self._tables)
        results = compliance.calculate(profile, self._tables)
        recommendations = techniques.recommend(profile, analysis.kind)

        overall_score = calculator.calculate_overall_score(results, profile, recommendations, self._tables)
        risk_level = risk.risk_level(overall_score)

        result = assessment.PrivacyAssessment(
            file_name=analysis.file_name,
            kind=analysis.kind,
            overall_score=overall_score,
            risk_level=risk_level,
            sensitivity=profile,
            compliance=results,
            recommendations=recommendations,
            explanations=explanations.generate(overall_score, risk_level, recommendations, results, self._tables),
            metrics=calculator.build_metrics(overall_score, risk_level, profile, results, recommendations),
        )

        log.success(
            "Artifact assessed",
            {
                "file": analysis.file_name or "(unnamed)",
                "score": overall_score,
                "risk": risk_level,
                "sensitivity": profile.level,
            },
        )
        return result


def _coerce(artifact_analysis: signals.ArtifactAnalysis | Mapping[str, Any]) -> signals.ArtifactAnalysis:
    """Validate raw input into an :class:`ArtifactAnalysis`."""
    if isinstance(artifact_analysis, signals.ArtifactAnalysis):
        return artifact_analysis
    if not isinstance(artifact_analysis, Mapping):
        raise errors.InvalidInput(f"Expected an artifact analysis mapping, got {type(artifact_analysis).__name__}")
    try:
        return signals.ArtifactAnalysis.model_validate(artifact_analysis)
    except pydantic.ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'input'}: {err['msg']}" for err in exc.errors()
        )
        raise errors.InvalidInput(f"Malformed artifact analysis: {problems}") from exc
