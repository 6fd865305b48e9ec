"""Privacy scoring package.

Decomposes a privacy assessment into focused modules, one per
stage: sensitivity classification, compliance, technique
recommendation, score aggregation, and explanations.  The
stages are wired together by :class:`opal.analysis.engine.PrivacyMetricsEngine`.
"""

from __future__ import annotations

from opal.analysis.scoring import calculator, compliance, explanations, sensitivity, techniques

__all__ = ["calculator", "compliance", "explanations", "sensitivity", "techniques"]
