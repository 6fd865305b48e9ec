"""Privacy-preserving technique recommendation.

Builds the recommendation list in two passes: one driven by the
artifact's sensitivity level, then one driven by its kind.  The
list keeps insertion order and is truncated to the first four
entries.  Duplicates across the passes are kept.
"""

from __future__ import annotations

from opal.models import sensitivity, signals, techniques
from opal.utils import logger

log = logger.create_logger("Techniques")

MAX_RECOMMENDATIONS = 4

# Tabular artifacts with more PII fields than this also get l-diversity.
_TABULAR_PII_THRESHOLD = 3


def _rec(
    technique: techniques.Technique,
    priority: techniques.Priority,
    reason: str,
) -> techniques.TechniqueRecommendation:
    return techniques.TechniqueRecommendation(technique=technique, priority=priority, reason=reason)


_BY_LEVEL: dict[sensitivity.SensitivityLevel, tuple[techniques.TechniqueRecommendation, ...]] = {
    "TOP_SECRET": (
        _rec("HOMOMORPHIC_ENCRYPTION", "HIGH", "Maximum privacy protection for highly sensitive data"),
        _rec("SECURE_MULTIPARTY", "HIGH", "Secure computation without revealing individual data points"),
    ),
    "RESTRICTED": (
        _rec("HOMOMORPHIC_ENCRYPTION", "HIGH", "Maximum privacy protection for highly sensitive data"),
        _rec("SECURE_MULTIPARTY", "HIGH", "Secure computation without revealing individual data points"),
    ),
    "CONFIDENTIAL": (
        _rec("DIFFERENTIAL_PRIVACY", "HIGH", "Strong privacy guarantees with statistical utility"),
        _rec("FEDERATED_LEARNING", "MEDIUM", "Distributed processing without data centralization"),
    ),
    "INTERNAL": (
        _rec("K_ANONYMITY", "MEDIUM", "Effective anonymization for internal use"),
        _rec("TOKENIZATION", "MEDIUM", "Replace sensitive values with non-sensitive tokens"),
    ),
    "PUBLIC": (_rec("DATA_MASKING", "LOW", "Basic protection for non-sensitive data"),),
}

_L_DIVERSITY = _rec("L_DIVERSITY", "MEDIUM", "Enhance k-anonymity for tabular PII data")
_IMAGE_FEDERATED = _rec("FEDERATED_LEARNING", "HIGH", "Process images without sharing raw visual data")
_TEXT_TOKENIZATION = _rec("TOKENIZATION", "HIGH", "Replace document entities with privacy-safe tokens")


def _by_kind(
    profile: sensitivity.SensitivityProfile,
    kind: signals.ArtifactKind,
) -> tuple[techniques.TechniqueRecommendation, ...]:
    if kind == "tabular":
        return (_L_DIVERSITY,) if profile.pii_count > _TABULAR_PII_THRESHOLD else ()
    if kind == "image":
        return (_IMAGE_FEDERATED,)
    return (_TEXT_TOKENIZATION,)


def recommend(
    profile: sensitivity.SensitivityProfile,
    kind: signals.ArtifactKind,
) -> tuple[techniques.TechniqueRecommendation, ...]:
    """Recommend up to four techniques for an artifact.

    Args:
        profile: Output of the sensitivity classifier.
        kind: The artifact kind.

    Returns:
        Level-driven recommendations followed by kind-driven ones,
        in insertion order, never re-sorted by priority.
    """
    recommendations = (_BY_LEVEL[profile.level] + _by_kind(profile, kind))[:MAX_RECOMMENDATIONS]

    log.info(
        "Techniques recommended",
        {
            "level": profile.level,
            "kind": kind,
            "techniques": [r.technique for r in recommendations],
        },
    )
    return recommendations
