"""JSON Schema for the JSON export document."""

from __future__ import annotations

from typing import Any

import jsonschema  # type: ignore[import-untyped]

from ..core.validation import ValidationResult
from ..timeline.segments import SegmentCoverage, SegmentSource

__all__ = [
    "EXPORT_JSON_SCHEMA",
    "validate_export_document",
]

_TIMESTAMP = {"type": "string", "pattern": r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$"}

_SEGMENT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": [
        "start_ts_us",
        "end_ts_us",
        "start_utc",
        "end_utc",
        "duration_seconds",
        "source",
        "app_bundle_id",
        "app_name",
        "window_title",
        "tags",
        "coverage",
        "supporting_ids",
    ],
    "properties": {
        "start_ts_us": {"type": "integer"},
        "end_ts_us": {"type": "integer"},
        "start_utc": _TIMESTAMP,
        "end_utc": _TIMESTAMP,
        "duration_seconds": {"type": "number", "minimum": 0},
        "source": {"enum": [source.value for source in SegmentSource]},
        "app_bundle_id": {"type": "string"},
        "app_name": {"type": "string"},
        "window_title": {"type": ["string", "null"]},
        "tags": {"type": "array", "items": {"type": "string"}},
        "coverage": {"enum": [coverage.value for coverage in SegmentCoverage]},
        "supporting_ids": {"type": "array", "items": {"type": "integer"}},
    },
    "additionalProperties": False,
}

EXPORT_JSON_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "wwk segment export",
    "type": "object",
    "required": ["identity", "exported_at_utc", "range", "segments"],
    "properties": {
        "identity": {
            "type": "object",
            "required": ["machine_id", "username", "uid"],
            "properties": {
                "machine_id": {"type": "string"},
                "username": {"type": "string"},
                "uid": {"type": "integer", "minimum": 0},
            },
            "additionalProperties": False,
        },
        "exported_at_utc": _TIMESTAMP,
        "range": {
            "type": "object",
            "required": ["start_utc", "end_utc"],
            "properties": {"start_utc": _TIMESTAMP, "end_utc": _TIMESTAMP},
            "additionalProperties": False,
        },
        "segments": {"type": "array", "items": _SEGMENT_SCHEMA},
    },
    "additionalProperties": False,
}

_validator = jsonschema.Draft7Validator(EXPORT_JSON_SCHEMA)


def validate_export_document(data: Any) -> ValidationResult:
    """Validate a parsed JSON export against :data:`EXPORT_JSON_SCHEMA`.

    Parameters
    ----------
    data
        Parsed document (e.g. ``json.loads(export_json(...))``)

    Returns
    -------
    ValidationResult
        Validation result with one message per schema violation
    """
    result = ValidationResult(valid=True)

    for error in _validator.iter_errors(data):
        error_path = " -> ".join(str(p) for p in error.absolute_path) if error.absolute_path else "root"
        result.add_error(f"[{error_path}] {error.message}")

    return result
