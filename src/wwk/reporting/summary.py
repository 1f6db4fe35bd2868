"""Summary report combining every aggregate for one report period."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import tzinfo
from typing import Any

from ..core.time import format_timestamp_us, resolve_timezone
from ..core.validation import validate_segments
from ..observability.loguru_config import timing_context
from ..timeline.segments import EffectiveSegment, ExportRange
from .aggregator import (
    total_unobserved_gaps,
    total_working_time,
    totals_by_application,
    totals_by_day,
    totals_by_tag,
    totals_by_window_title,
)

__all__ = [
    "SummaryReport",
    "compute_summary",
    "format_duration",
]


class SummaryReport:
    """Aggregated totals for a report period.

    Attributes
    ----------
    start_utc : str
        Range start (ISO-8601 UTC)
    end_utc : str
        Range end (ISO-8601 UTC)
    timezone : str
        Timezone used for day totals
    total_seconds : float
        Observed working time
    gap_seconds : float
        Unobserved gap time
    by_app, by_tag, by_title, by_day : dict[str, float]
        Grouped observed totals
    segment_count : int
        Number of input segments
    observed_count : int
        Number of observed input segments
    """

    def __init__(self, start_utc: str, end_utc: str, timezone: str) -> None:
        self.start_utc = start_utc
        self.end_utc = end_utc
        self.timezone = timezone

        self.total_seconds = 0.0
        self.gap_seconds = 0.0
        self.by_app: dict[str, float] = {}
        self.by_tag: dict[str, float] = {}
        self.by_title: dict[str, float] = {}
        self.by_day: dict[str, float] = {}
        self.segment_count = 0
        self.observed_count = 0

    def top_apps(self, limit: int = 5) -> list[tuple[str, float]]:
        """Applications with the most observed time."""
        return sorted(self.by_app.items(), key=lambda item: (-item[1], item[0]))[:limit]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "start_utc": self.start_utc,
            "end_utc": self.end_utc,
            "timezone": self.timezone,
            "total_seconds": self.total_seconds,
            "gap_seconds": self.gap_seconds,
            "by_app": dict(self.by_app),
            "by_tag": dict(self.by_tag),
            "by_title": dict(self.by_title),
            "by_day": dict(self.by_day),
            "segment_count": self.segment_count,
            "observed_count": self.observed_count,
        }


def compute_summary(
    segments: Iterable[EffectiveSegment],
    tz: str | tzinfo,
    export_range: ExportRange | None = None,
) -> SummaryReport:
    """Compute every aggregate for one report period.

    Parameters
    ----------
    segments
        Effective segments for the period
    tz
        Timezone for local day totals
    export_range
        Reported range; defaults to the span of the segments

    Returns
    -------
    SummaryReport
        Aggregated summary
    """
    tz_obj = resolve_timezone(tz)
    materialized = validate_segments(segments)
    export_range = export_range or ExportRange.covering(materialized)

    with timing_context("compute_summary", component="summary", segments=len(materialized)):
        summary = SummaryReport(
            start_utc=format_timestamp_us(export_range.start_ts_us),
            end_utc=format_timestamp_us(export_range.end_ts_us),
            timezone=str(tz_obj),
        )
        summary.total_seconds = total_working_time(materialized)
        summary.gap_seconds = total_unobserved_gaps(materialized)
        summary.by_app = totals_by_application(materialized)
        summary.by_tag = totals_by_tag(materialized)
        summary.by_title = totals_by_window_title(materialized)
        summary.by_day = totals_by_day(materialized, tz_obj)
        summary.segment_count = len(materialized)
        summary.observed_count = sum(1 for segment in materialized if segment.is_observed)

    return summary


def format_duration(seconds: float) -> str:
    """Render seconds as HH:MM:SS (hours may exceed 24)."""
    total_seconds = int(round(seconds))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
