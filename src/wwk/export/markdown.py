"""Markdown invoice of observed time per application.

Durations only: no rates or amounts are computed.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

from ..core.time import get_current_utc, us_to_utc_datetime
from ..core.validation import validate_segments
from ..observability.loguru_config import timing_context
from ..reporting.aggregator import NO_TITLE, UNKNOWN_APP
from ..timeline.segments import EffectiveSegment, ExportRange, ReportIdentity

__all__ = [
    "export_invoice_markdown",
    "format_invoice_duration",
]


def format_invoice_duration(seconds: float) -> str:
    """Short duration: ``2h 05m``, ``4m 07s`` or ``9s``."""
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}h {minutes:02d}m"
    if minutes > 0:
        return f"{minutes}m {secs:02d}s"
    return f"{secs}s"


def _format_local(dt: datetime, tz_offset_seconds: int) -> str:
    return dt.astimezone(timezone(timedelta(seconds=tz_offset_seconds))).strftime("%Y-%m-%d %H:%M")


def _percent(seconds: float, total: float) -> str:
    pct = seconds / total * 100 if total > 0 else 0.0
    return f"{pct:.1f}%"


def export_invoice_markdown(
    segments: Iterable[EffectiveSegment],
    identity: ReportIdentity,
    export_range: ExportRange,
    include_titles: bool = True,
    tz_offset_seconds: int = 0,
    generated_at: datetime | None = None,
) -> str:
    """Render observed time as a Markdown invoice.

    Parameters
    ----------
    segments
        Effective segments for the invoice period
    identity
        Machine/user identity shown in the header table
    export_range
        Invoice period
    include_titles
        Break each application down by window title
    tz_offset_seconds
        UTC offset used to display dates
    generated_at
        Generation instant; defaults to now (UTC)

    Returns
    -------
    str
        Markdown document
    """
    observed = [segment for segment in validate_segments(segments) if segment.is_observed]

    with timing_context("export_invoice_markdown", component="export", segments=len(observed)):
        by_app: defaultdict[str, int] = defaultdict(int)
        by_app_window: defaultdict[str, defaultdict[str, int]] = defaultdict(lambda: defaultdict(int))
        for segment in observed:
            app = segment.app_name or UNKNOWN_APP
            by_app[app] += segment.duration_us
            if include_titles:
                title = segment.window_title if segment.window_title is not None else NO_TITLE
                by_app_window[app][title] += segment.duration_us

        total_seconds = sum(by_app.values()) / 1_000_000
        sorted_apps = sorted(by_app.items(), key=lambda item: (-item[1], item[0]))

        range_start = _format_local(us_to_utc_datetime(export_range.start_ts_us), tz_offset_seconds)
        range_end = _format_local(us_to_utc_datetime(export_range.end_ts_us), tz_offset_seconds)
        generated = _format_local(generated_at or get_current_utc(), tz_offset_seconds)

        lines = [
            "# Invoice",
            "",
            "| Field | Value |",
            "|-------|-------|",
            f"| **Date Range** | {range_start} — {range_end} |",
            f"| **Machine** | {identity.machine_id} |",
            f"| **User** | {identity.username} |",
            f"| **Generated** | {generated} |",
            "",
            "## Tasks",
            "",
        ]

        if include_titles:
            lines.append("| Application | Window / Task | Duration | % of Total |")
            lines.append("|-------------|---------------|----------|------------|")
            for app, _ in sorted_apps:
                windows = sorted(by_app_window[app].items(), key=lambda item: (-item[1], item[0]))
                for title, us in windows:
                    secs = us / 1_000_000
                    lines.append(
                        f"| {app} | {title} | {format_invoice_duration(secs)} | {_percent(secs, total_seconds)} |"
                    )
        else:
            lines.append("| Application | Duration | % of Total |")
            lines.append("|-------------|----------|------------|")
            for app, us in sorted_apps:
                secs = us / 1_000_000
                lines.append(f"| {app} | {format_invoice_duration(secs)} | {_percent(secs, total_seconds)} |")

        lines += [
            "",
            "## Summary",
            "",
            "| Metric | Value |",
            "|--------|-------|",
            f"| **Total Tracked Time** | {format_invoice_duration(total_seconds)} |",
            f"| **Total Hours** | {total_seconds / 3600:.2f} |",
            f"| **Unique Applications** | {len(by_app)} |",
            f"| **Segments** | {len(observed)} |",
        ]

    return "\n".join(lines) + "\n"
