"""
Data loader for the sensitivity, compliance, and technique tables.
Loads JSON files and compiles field-name patterns into regex objects.

The JSON data files live alongside this module in sensitivity/,
compliance/, and techniques/ subdirectories.  A replacement
directory with the same layout can be supplied instead.
"""

from __future__ import annotations

import json
import pathlib
import re
from typing import Any

import pydantic

from opal.models import compliance, tables, techniques
from opal.utils import errors, logger

log = logger.create_logger("Tables")

# Resolve path to the data directory (same directory as this module)
_DATA_DIR = pathlib.Path(__file__).resolve().parent

# ============================================================================
# JSON File Loading
# ============================================================================


def _load_json(data_dir: pathlib.Path, relative_path: str) -> Any:
    """Load and parse a JSON file relative to *data_dir*.

    Raises:
        ConfigurationError: If the file is missing or not valid JSON.
    """
    full_path = data_dir / relative_path
    if not full_path.exists():
        raise errors.ConfigurationError(f"Data file not found: {relative_path}")
    with open(full_path, encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as exc:
            raise errors.ConfigurationError(f"Invalid JSON in {relative_path}: {exc.msg}") from exc


# ============================================================================
# Sensitivity Tables
# ============================================================================


def _load_field_patterns(
    data_dir: pathlib.Path,
) -> tuple[tuple[tables.FieldPattern, ...], tables.SensitivityRule]:
    """Load the ordered field-name rules and the unmatched-field fallback.

    Compiles each regex once at load time so that
    matching is fast on every subsequent call.
    """
    raw: dict[str, Any] = _load_json(data_dir, "sensitivity/field_patterns.json")
    patterns = tuple(
        tables.FieldPattern(
            pattern=entry["pattern"],
            compiled=re.compile(entry["pattern"], re.IGNORECASE),
            rule=tables.SensitivityRule.model_validate(entry),
        )
        for entry in raw["patterns"]
    )
    return patterns, tables.SensitivityRule.model_validate(raw["unmatched"])


def _load_lookup_table(data_dir: pathlib.Path, filename: str, key: str) -> tables.LookupTable:
    """Load a name-keyed rule table such as the image object table."""
    raw: dict[str, Any] = _load_json(data_dir, f"sensitivity/{filename}")
    return tables.LookupTable(
        rules={name.lower(): tables.SensitivityRule.model_validate(rule) for name, rule in raw[key].items()},
        unmatched=tables.SensitivityRule.model_validate(raw["unmatched"]),
    )


# ============================================================================
# Public API
# ============================================================================


def _validate_coverage(engine_tables: tables.EngineTables) -> None:
    """Every framework and technique must have a table entry."""
    missing_frameworks = [f for f in compliance.FRAMEWORKS if f not in engine_tables.frameworks]
    if missing_frameworks:
        raise errors.ConfigurationError(f"Framework table is missing: {', '.join(missing_frameworks)}")

    missing_techniques = [t for t in techniques.TECHNIQUES if t not in engine_tables.techniques]
    if missing_techniques:
        raise errors.ConfigurationError(f"Technique table is missing: {', '.join(missing_techniques)}")


def load_tables(data_dir: pathlib.Path | None = None) -> tables.EngineTables:
    """Load and validate every scoring table.

    Args:
        data_dir: Directory holding the JSON tables.  Defaults to
            the data bundled with the package.

    Returns:
        The frozen :class:`EngineTables`.

    Raises:
        ConfigurationError: If any table is missing, malformed, or
            does not cover every framework and technique.
    """
    data_dir = data_dir or _DATA_DIR
    try:
        field_patterns, unmatched_field = _load_field_patterns(data_dir)
        engine_tables = tables.EngineTables(
            field_patterns=field_patterns,
            unmatched_field=unmatched_field,
            image_objects=_load_lookup_table(data_dir, "image_objects.json", "objects"),
            document_entities=_load_lookup_table(data_dir, "document_entities.json", "entities"),
            frameworks=_load_json(data_dir, "compliance/frameworks.json"),
            techniques=_load_json(data_dir, "techniques/techniques.json"),
        )
    except (KeyError, TypeError, AttributeError, re.error, pydantic.ValidationError) as exc:
        raise errors.ConfigurationError(f"Malformed scoring table: {errors.get_error_message(exc)}") from exc

    _validate_coverage(engine_tables)

    log.info(
        "Scoring tables loaded",
        {
            "dir": str(data_dir),
            "fieldPatterns": len(engine_tables.field_patterns),
            "imageObjects": len(engine_tables.image_objects.rules),
            "documentEntities": len(engine_tables.document_entities.rules),
            "frameworks": len(engine_tables.frameworks),
            "techniques": len(engine_tables.techniques),
        },
    )
    return engine_tables
