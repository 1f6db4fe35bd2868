"""JSON export of effective segments.

Document layout::

    {
      "identity": {"machine_id", "username", "uid"},
      "exported_at_utc": "...Z",
      "range": {"start_utc", "end_utc"},
      "segments": [...]
    }

Segments are ordered like the CSV export. Enumerations serialize as their
snake_case values (``unobserved_gap``).
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from ..core.time import format_timestamp_us, format_utc_iso8601, get_current_utc
from ..core.validation import validate_segments
from ..observability.loguru_config import timing_context
from ..timeline.segments import EffectiveSegment, ExportRange, ReportIdentity
from .csv_export import sort_for_export

__all__ = [
    "build_export_document",
    "export_json",
    "segment_to_dict",
]


def segment_to_dict(segment: EffectiveSegment, include_titles: bool) -> dict[str, Any]:
    """Serialize one segment. ``window_title`` is null when absent or excluded."""
    return {
        "start_ts_us": segment.start_ts_us,
        "end_ts_us": segment.end_ts_us,
        "start_utc": format_timestamp_us(segment.start_ts_us),
        "end_utc": format_timestamp_us(segment.end_ts_us),
        "duration_seconds": segment.duration_seconds,
        "source": segment.source.value,
        "app_bundle_id": segment.app_bundle_id,
        "app_name": segment.app_name,
        "window_title": segment.window_title if include_titles else None,
        "tags": list(segment.tags),
        "coverage": segment.coverage.value,
        "supporting_ids": list(segment.supporting_ids),
    }


def build_export_document(
    segments: Iterable[EffectiveSegment],
    identity: ReportIdentity,
    export_range: ExportRange,
    include_titles: bool,
    exported_at: datetime | None = None,
) -> dict[str, Any]:
    """Build the export document as plain dicts/lists."""
    ordered = sort_for_export(validate_segments(segments))
    return {
        "identity": {
            "machine_id": identity.machine_id,
            "username": identity.username,
            "uid": identity.uid,
        },
        "exported_at_utc": format_utc_iso8601(exported_at or get_current_utc()),
        "range": {
            "start_utc": format_timestamp_us(export_range.start_ts_us),
            "end_utc": format_timestamp_us(export_range.end_ts_us),
        },
        "segments": [segment_to_dict(segment, include_titles) for segment in ordered],
    }


def export_json(
    segments: Iterable[EffectiveSegment],
    identity: ReportIdentity,
    export_range: ExportRange,
    include_titles: bool,
    exported_at: datetime | None = None,
) -> str:
    """Export segments to pretty-printed JSON text.

    Parameters
    ----------
    segments
        Effective segments (un-split), in any order
    identity
        Machine/user identity block
    export_range
        Reported range
    include_titles
        When False every ``window_title`` is null
    exported_at
        Export instant; defaults to now (UTC)

    Returns
    -------
    str
        JSON text with sorted keys
    """
    materialized = validate_segments(segments)
    with timing_context("export_json", component="export", segments=len(materialized)):
        document = build_export_document(
            materialized, identity, export_range, include_titles, exported_at
        )
        return json.dumps(document, indent=2, sort_keys=True, ensure_ascii=False)
