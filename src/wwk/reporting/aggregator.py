"""Pure aggregation functions over effective segments.

Every function consumes a finite segment list, makes a single pass (plus
tag fan-out), and returns freshly built totals. Unobserved gaps never
contribute to working time or to any ``totals_by_*`` result.

Durations are accumulated as integer microseconds per key and converted
to float seconds once, at the end.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import tzinfo
from enum import Enum
from typing import Literal

from ..core.time import local_date_key, local_hour, resolve_timezone, us_to_utc_datetime
from ..core.validation import validate_segments
from ..observability.loguru_config import get_logger
from ..timeline.segments import EffectiveSegment
from .splitter import split_segments

__all__ = [
    "NO_BUNDLE_ID",
    "NO_TITLE",
    "UNKNOWN_APP",
    "UNTAGGED",
    "AppWindowTotal",
    "GroupBy",
    "HourBucketEntry",
    "Period",
    "PeriodBucketEntry",
    "labels_for_segment",
    "merge_totals",
    "total_unobserved_gaps",
    "total_working_time",
    "totals_by_app_name",
    "totals_by_app_name_and_window",
    "totals_by_application",
    "totals_by_day",
    "totals_by_hour",
    "totals_by_period",
    "totals_by_tag",
    "totals_by_window_title",
]

log = get_logger("aggregator")

NO_BUNDLE_ID = "(no bundle id)"
NO_TITLE = "(no title)"
UNTAGGED = "(untagged)"
UNKNOWN_APP = "(unknown)"

Period = Literal["day", "week", "month"]


class GroupBy(str, Enum):
    """How time-bucketed totals are labelled."""

    APP = "app"
    APP_WINDOW = "app_window"
    TAG = "tag"


@dataclass(frozen=True)
class HourBucketEntry:
    """Seconds spent under one label during one local hour of day (0-23)."""

    hour: int
    label: str
    seconds: float


@dataclass(frozen=True)
class PeriodBucketEntry:
    """Seconds spent under one label during one local day, ISO week or month."""

    period: str
    label: str
    seconds: float


@dataclass(frozen=True)
class AppWindowTotal:
    app_name: str
    window_title: str
    seconds: float


def _to_seconds(totals_us: Mapping[str, int]) -> dict[str, float]:
    return {key: value / 1_000_000 for key, value in totals_us.items()}


def _observed(segments: Iterable[EffectiveSegment]) -> list[EffectiveSegment]:
    return [segment for segment in validate_segments(segments) if segment.is_observed]


def _app_label(segment: EffectiveSegment) -> str:
    return segment.app_name or UNKNOWN_APP


def labels_for_segment(segment: EffectiveSegment, group_by: GroupBy) -> list[str]:
    """Labels a segment contributes to; more than one only for tag fan-out."""
    group_by = GroupBy(group_by)
    if group_by is GroupBy.APP:
        return [_app_label(segment)]
    if group_by is GroupBy.APP_WINDOW:
        title = segment.window_title if segment.window_title is not None else NO_TITLE
        return [f"{_app_label(segment)} — {title}"]
    if not segment.tags:
        return [UNTAGGED]
    return list(segment.tags)


# Totals


def total_working_time(segments: Iterable[EffectiveSegment]) -> float:
    """Total seconds of observed time. Each segment counts once regardless of tags."""
    return sum(segment.duration_us for segment in _observed(segments)) / 1_000_000


def total_unobserved_gaps(segments: Iterable[EffectiveSegment]) -> float:
    """Total seconds of unobserved gaps."""
    materialized = validate_segments(segments)
    return sum(segment.duration_us for segment in materialized if segment.is_gap) / 1_000_000


# Totals by attribute


def totals_by_application(segments: Iterable[EffectiveSegment]) -> dict[str, float]:
    """Observed seconds keyed by bundle id; an empty bundle id maps to "(no bundle id)"."""
    totals: defaultdict[str, int] = defaultdict(int)
    for segment in _observed(segments):
        totals[segment.app_bundle_id or NO_BUNDLE_ID] += segment.duration_us
    return _to_seconds(totals)


def totals_by_window_title(segments: Iterable[EffectiveSegment]) -> dict[str, float]:
    """Observed seconds keyed by window title; an absent title maps to "(no title)".

    An empty-string title is a real title and keeps its own key.
    """
    totals: defaultdict[str, int] = defaultdict(int)
    for segment in _observed(segments):
        key = segment.window_title if segment.window_title is not None else NO_TITLE
        totals[key] += segment.duration_us
    return _to_seconds(totals)


def totals_by_tag(segments: Iterable[EffectiveSegment]) -> dict[str, float]:
    """Observed seconds keyed by tag.

    A segment with n tags adds its full duration to each of the n tags, so
    the values may sum to more than :func:`total_working_time`. Untagged
    segments go to "(untagged)". A tag repeated on one segment is counted
    once per occurrence.
    """
    totals: defaultdict[str, int] = defaultdict(int)
    for segment in _observed(segments):
        for label in labels_for_segment(segment, GroupBy.TAG):
            totals[label] += segment.duration_us
    return _to_seconds(totals)


def totals_by_app_name(segments: Iterable[EffectiveSegment]) -> dict[str, float]:
    """Observed seconds keyed by application display name."""
    totals: defaultdict[str, int] = defaultdict(int)
    for segment in _observed(segments):
        totals[_app_label(segment)] += segment.duration_us
    return _to_seconds(totals)


def totals_by_app_name_and_window(segments: Iterable[EffectiveSegment]) -> list[AppWindowTotal]:
    """Observed seconds per (app name, window title), largest first."""
    totals: defaultdict[tuple[str, str], int] = defaultdict(int)
    for segment in _observed(segments):
        title = segment.window_title if segment.window_title is not None else NO_TITLE
        totals[(_app_label(segment), title)] += segment.duration_us

    entries = [AppWindowTotal(app, title, us / 1_000_000) for (app, title), us in totals.items()]
    return sorted(entries, key=lambda entry: (-entry.seconds, entry.app_name, entry.window_title))


# Time-bucketed totals


def totals_by_day(segments: Iterable[EffectiveSegment], tz: str | tzinfo) -> dict[str, float]:
    """Observed seconds keyed by local calendar date (YYYY-MM-DD).

    Segments are split at local midnight first, so a segment crossing
    midnight contributes only its in-day share to each date.
    """
    tz_obj = resolve_timezone(tz)
    totals: defaultdict[str, int] = defaultdict(int)
    for part in split_segments(_observed(segments), tz_obj, "day"):
        totals[local_date_key(part.start_ts_us, tz_obj)] += part.duration_us
    return _to_seconds(totals)


def totals_by_hour(
    segments: Iterable[EffectiveSegment],
    tz: str | tzinfo,
    group_by: GroupBy = GroupBy.APP,
) -> list[HourBucketEntry]:
    """Observed seconds per (local hour of day, label).

    Segments are split at local hour boundaries first. Hours repeated by a
    DST fall-back land in the same hour bucket. Entries are unique per
    ``(hour, label)`` and sorted by hour then label, but consumers should
    match on the pair rather than on position.

    Parameters
    ----------
    segments
        Effective segments
    tz
        Timezone name or tzinfo for the local hour of day
    group_by
        APP (display name), APP_WINDOW ("app — title") or TAG (fan-out)
    """
    tz_obj = resolve_timezone(tz)
    group_by = GroupBy(group_by)
    buckets: defaultdict[tuple[int, str], int] = defaultdict(int)

    for part in split_segments(_observed(segments), tz_obj, "hour"):
        if part.duration_us <= 0:
            continue
        hour = local_hour(part.start_ts_us, tz_obj)
        for label in labels_for_segment(part, group_by):
            buckets[(hour, label)] += part.duration_us

    log.debug("Hour buckets computed", group_by=group_by.value, buckets=len(buckets))
    return [
        HourBucketEntry(hour=hour, label=label, seconds=us / 1_000_000)
        for (hour, label), us in sorted(buckets.items())
    ]


def _period_key(ts_us: int, tz: tzinfo, period: Period) -> str:
    local = us_to_utc_datetime(ts_us).astimezone(tz)
    if period == "day":
        return local.strftime("%Y-%m-%d")
    if period == "week":
        iso_year, iso_week, _ = local.isocalendar()
        return f"{iso_year:04d}-W{iso_week:02d}"
    if period == "month":
        return local.strftime("%Y-%m")
    raise ValueError(f"Unknown period: {period}")


def totals_by_period(
    segments: Iterable[EffectiveSegment],
    tz: str | tzinfo,
    period: Period,
    group_by: GroupBy = GroupBy.APP,
) -> list[PeriodBucketEntry]:
    """Observed seconds per (local period, label).

    Segments are split at local midnight, then each part is assigned to its
    day (YYYY-MM-DD), ISO week (YYYY-Www) or month (YYYY-MM).
    """
    if period not in ("day", "week", "month"):
        raise ValueError(f"Unknown period: {period}")
    tz_obj = resolve_timezone(tz)
    group_by = GroupBy(group_by)
    buckets: defaultdict[tuple[str, str], int] = defaultdict(int)

    for part in split_segments(_observed(segments), tz_obj, "day"):
        if part.duration_us <= 0:
            continue
        key = _period_key(part.start_ts_us, tz_obj, period)
        for label in labels_for_segment(part, group_by):
            buckets[(key, label)] += part.duration_us

    return [
        PeriodBucketEntry(period=key, label=label, seconds=us / 1_000_000)
        for (key, label), us in sorted(buckets.items())
    ]


def merge_totals(*partials: Mapping[str, float]) -> dict[str, float]:
    """Merge partial totals (e.g. from sharded input) by per-key summation."""
    merged: defaultdict[str, float] = defaultdict(float)
    for partial in partials:
        for key, seconds in partial.items():
            merged[key] += seconds
    return dict(merged)
