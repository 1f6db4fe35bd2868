"""CSV export of effective segments.

Fixed 13-column schema, one header row, one row per segment, rows in
ascending start order. Tags are ``;``-joined inside a single column.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable

from ..core.time import format_timestamp_us
from ..core.validation import validate_segments
from ..observability.loguru_config import timing_context
from ..timeline.segments import EffectiveSegment, ReportIdentity

__all__ = [
    "CSV_COLUMNS",
    "TAG_SEPARATOR",
    "export_csv",
    "segment_row",
    "sort_for_export",
]

CSV_COLUMNS: tuple[str, ...] = (
    "machine_id",
    "username",
    "segment_start_local",
    "segment_end_local",
    "segment_start_utc",
    "segment_end_utc",
    "duration_seconds",
    "source",
    "app_bundle_id",
    "app_name",
    "window_title",
    "tags",
    "coverage",
)

TAG_SEPARATOR = ";"


def sort_for_export(segments: Iterable[EffectiveSegment]) -> list[EffectiveSegment]:
    """Stable sort by start; segments with equal starts keep input order."""
    return sorted(segments, key=lambda segment: segment.start_ts_us)


def segment_row(
    segment: EffectiveSegment,
    identity: ReportIdentity,
    include_titles: bool,
    tz_offset_seconds: int,
) -> list[str]:
    """Render one segment as the 13 CSV fields."""
    title = (segment.window_title or "") if include_titles else ""
    return [
        identity.machine_id,
        identity.username,
        format_timestamp_us(segment.start_ts_us, tz_offset_seconds),
        format_timestamp_us(segment.end_ts_us, tz_offset_seconds),
        format_timestamp_us(segment.start_ts_us),
        format_timestamp_us(segment.end_ts_us),
        f"{segment.duration_seconds:.3f}",
        segment.source.value,
        segment.app_bundle_id,
        segment.app_name,
        title,
        TAG_SEPARATOR.join(segment.tags),
        segment.coverage.value,
    ]


def export_csv(
    segments: Iterable[EffectiveSegment],
    identity: ReportIdentity,
    include_titles: bool,
    tz_offset_seconds: int = 0,
) -> str:
    """Export segments to CSV text.

    Parameters
    ----------
    segments
        Effective segments (un-split), in any order
    identity
        Fills the machine_id and username columns
    include_titles
        When False the window_title column is emitted but left blank
    tz_offset_seconds
        UTC offset used for the *_local columns

    Returns
    -------
    str
        Header plus one line per segment, ``\\n``-separated, no trailing newline
    """
    ordered = sort_for_export(validate_segments(segments))

    with timing_context("export_csv", component="export", segments=len(ordered)):
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_COLUMNS)
        for segment in ordered:
            writer.writerow(segment_row(segment, identity, include_titles, tz_offset_seconds))

    return buffer.getvalue().removesuffix("\n")
