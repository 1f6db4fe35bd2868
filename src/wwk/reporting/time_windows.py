"""Local boundary calculations with DST awareness.

Compute the UTC instants at which the local calendar day or clock hour
changes. A local "day" may be 23, 24 or 25 hours long in UTC; splitting
is driven by these instants, never by wall-clock durations.

A boundary is an instant where the local wall-clock date (day) or
date-and-hour (hour) changes. Wall times repeated by a backward shift
that stays inside the same hour, such as 01:00-01:59 on a US fall-back
night or 01:30-01:59 on a Lord Howe fall-back night, do not start a new
interval.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Literal

import pytz

from ..core.time import resolve_timezone

__all__ = [
    "Granularity",
    "compute_interval_utc",
    "next_boundary_utc",
    "wall_time_candidates",
]

Granularity = Literal["day", "hour"]

_ONE_US = timedelta(microseconds=1)

_STEPS: dict[str, timedelta] = {
    "day": timedelta(days=1),
    "hour": timedelta(hours=1),
}


def wall_time_candidates(naive: datetime, tz: tzinfo) -> list[datetime]:
    """UTC instants a naive wall-clock time can denote, ascending.

    An ordinary wall time has one reading. A wall time repeated by a
    backward shift has two (both occurrences). A wall time skipped by a
    forward jump also has two: read with the offset before the jump, and
    with the offset after it.

    Parameters
    ----------
    naive
        Naive local datetime
    tz
        pytz timezone or PEP 495 tzinfo

    Returns
    -------
    list[datetime]
        Aware datetimes in UTC
    """
    if isinstance(tz, pytz.BaseTzInfo):
        readings = {tz.localize(naive, is_dst=flag).astimezone(timezone.utc) for flag in (True, False)}
    else:
        readings = {naive.replace(tzinfo=tz, fold=fold).astimezone(timezone.utc) for fold in (0, 1)}
    return sorted(readings)


def _step(granularity: str) -> timedelta:
    try:
        return _STEPS[granularity]
    except KeyError:
        raise ValueError(f"Unknown granularity: {granularity}") from None


def _wall_floor(local: datetime, granularity: str) -> datetime:
    """Naive wall time at the start of the local day or hour of ``local``."""
    if granularity == "day":
        return datetime.combine(local.date(), datetime.min.time())
    return local.replace(minute=0, second=0, microsecond=0, tzinfo=None)


def _offset_change(after: datetime, until: datetime, tz: tzinfo) -> datetime | None:
    """First instant in ``(after, until]`` whose UTC offset differs from the one at ``after``."""
    offset = after.astimezone(tz).utcoffset()
    if until.astimezone(tz).utcoffset() == offset:
        return None

    lo, hi = after, until
    while hi - lo > _ONE_US:
        mid = lo + (hi - lo) // 2
        if mid.astimezone(tz).utcoffset() == offset:
            lo = mid
        else:
            hi = mid
    return hi


def next_boundary_utc(
    instant: datetime,
    tz: str | tzinfo,
    granularity: Granularity,
) -> datetime:
    """UTC instant of the first local boundary strictly after ``instant``.

    Walks the local wall-clock grid (next midnight, next top of the hour)
    and returns the earliest reading, or offset change before it, at which
    the local day or hour differs from that of ``instant``.

    Parameters
    ----------
    instant
        Aware datetime
    tz
        Timezone name or tzinfo
    granularity
        "day" (local midnight) or "hour" (local top of the hour)

    Returns
    -------
    datetime
        Boundary instant in UTC

    Examples
    --------
    >>> # 2025-03-09 is 23 hours long in New York (spring forward)
    >>> start = datetime(2025, 3, 9, 5, 0, tzinfo=timezone.utc)
    >>> next_boundary_utc(start, "America/New_York", "day").isoformat()
    '2025-03-10T04:00:00+00:00'
    """
    step = _step(granularity)
    tz_obj = resolve_timezone(tz)
    instant = instant.astimezone(timezone.utc)
    floor = _wall_floor(instant.astimezone(tz_obj), granularity)

    wall = floor
    while True:
        wall += step
        for candidate in wall_time_candidates(wall, tz_obj):
            if candidate <= instant:
                continue
            shift = _offset_change(instant, candidate - _ONE_US, tz_obj)
            if shift is not None and _wall_floor(shift.astimezone(tz_obj), granularity) != floor:
                return shift
            if _wall_floor(candidate.astimezone(tz_obj), granularity) != floor:
                return candidate


def _interval_start_utc(instant: datetime, tz: tzinfo, granularity: str) -> datetime:
    while True:
        local = instant.astimezone(tz)
        floor = _wall_floor(local, granularity)
        start = instant - (local.replace(tzinfo=None) - floor)
        shift = _offset_change(start, instant, tz)
        if shift is not None:
            start = shift

        before = start - _ONE_US
        if _wall_floor(before.astimezone(tz), granularity) != floor:
            return start
        instant = before


def compute_interval_utc(
    instant: datetime,
    tz: str | tzinfo,
    granularity: Granularity,
) -> tuple[datetime, datetime]:
    """Compute the local day/hour interval containing ``instant``.

    Returns
    -------
    tuple[datetime, datetime]
        (start_utc, end_utc); start inclusive, end exclusive
    """
    _step(granularity)
    tz_obj = resolve_timezone(tz)
    instant = instant.astimezone(timezone.utc)

    start = _interval_start_utc(instant, tz_obj, granularity)
    return start, next_boundary_utc(instant, tz_obj, granularity)
