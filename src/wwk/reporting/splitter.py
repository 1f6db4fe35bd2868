"""Split effective segments at local day or hour boundaries.

A segment crossing k local boundaries becomes k+1 parts. The parts keep
every field of the original except the bounds, and their durations sum to
the original duration to the microsecond.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import tzinfo

from ..core.time import resolve_timezone, us_to_utc_datetime, utc_datetime_to_us
from ..core.validation import validate_segments
from ..observability.loguru_config import get_logger
from ..timeline.segments import EffectiveSegment
from .time_windows import Granularity, next_boundary_utc

__all__ = [
    "split_by_day",
    "split_by_hour",
    "split_segment",
    "split_segments",
]

log = get_logger("splitter")


def split_segment(
    segment: EffectiveSegment,
    tz: tzinfo,
    granularity: Granularity,
) -> list[EffectiveSegment]:
    """Split one segment at every local boundary it crosses.

    A zero-duration segment, or one that fits inside a single local
    interval, comes back as a one-element list holding the segment itself.
    """
    if segment.end_ts_us <= segment.start_ts_us:
        return [segment]

    parts: list[EffectiveSegment] = []
    current_start = segment.start_ts_us

    while True:
        boundary = next_boundary_utc(us_to_utc_datetime(current_start), tz, granularity)
        part_end = min(segment.end_ts_us, utc_datetime_to_us(boundary))
        if not parts and part_end == segment.end_ts_us:
            return [segment]

        parts.append(segment.with_bounds(current_start, part_end))
        if part_end >= segment.end_ts_us:
            return parts
        current_start = part_end


def split_segments(
    segments: Iterable[EffectiveSegment],
    tz: str | tzinfo,
    granularity: Granularity,
) -> list[EffectiveSegment]:
    """Split segments so that none crosses a local boundary.

    Parameters
    ----------
    segments
        Effective segments, in the order the caller wants preserved
    tz
        Timezone name or tzinfo used to place local boundaries
    granularity
        "day" or "hour"

    Returns
    -------
    list[EffectiveSegment]
        Bounded parts. Parts of one segment are contiguous and chronological;
        segments keep their relative input order.

    Raises
    ------
    InvalidTimezoneError
        If ``tz`` is an unknown zone name
    SegmentValidationError
        If any segment ends before it starts
    """
    if granularity not in ("day", "hour"):
        raise ValueError(f"Unknown granularity: {granularity}")
    tz_obj = resolve_timezone(tz)
    materialized = validate_segments(segments)

    result: list[EffectiveSegment] = []
    for segment in materialized:
        result.extend(split_segment(segment, tz_obj, granularity))

    log.debug(
        "Split segments",
        granularity=granularity,
        timezone=str(tz_obj),
        segments_in=len(materialized),
        parts_out=len(result),
    )
    return result


def split_by_day(segments: Iterable[EffectiveSegment], tz: str | tzinfo) -> list[EffectiveSegment]:
    """Split segments at local midnight."""
    return split_segments(segments, tz, "day")


def split_by_hour(segments: Iterable[EffectiveSegment], tz: str | tzinfo) -> list[EffectiveSegment]:
    """Split segments at the local top of each hour."""
    return split_segments(segments, tz, "hour")
