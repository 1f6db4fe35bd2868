"""Time and timezone utilities for wwk reporting.

Provides consistent timestamp handling across the reporting core with:
- UTC discipline: segments carry integer UTC microseconds
- Exact conversion between microseconds and aware datetimes
- Timezone resolution that fails early for unknown zone names
- ISO-8601 rendering with millisecond precision for exports
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone, tzinfo

import pytz

__all__ = [
    "EPOCH_UTC",
    "MAX_TS_US",
    "MIN_TS_US",
    "InvalidTimezoneError",
    "format_timestamp_us",
    "format_utc_iso8601",
    "get_current_utc",
    "local_date_key",
    "local_hour",
    "localize_utc_to_tz",
    "resolve_timezone",
    "us_to_utc_datetime",
    "utc_datetime_to_us",
]

EPOCH_UTC = datetime(1970, 1, 1, tzinfo=timezone.utc)

_ONE_US = timedelta(microseconds=1)

# Two days inside datetime's range: local calendar arithmetic in any zone
# (pytz probes +/- one day around a wall time) must stay representable.
MIN_TS_US = (datetime(1, 1, 3, tzinfo=timezone.utc) - EPOCH_UTC) // _ONE_US
MAX_TS_US = (datetime(9999, 12, 29, tzinfo=timezone.utc) - EPOCH_UTC) // _ONE_US


class InvalidTimezoneError(ValueError):
    """Raised when a timezone identifier cannot be resolved."""


def resolve_timezone(tz: str | tzinfo) -> tzinfo:
    """Resolve a timezone name or object to a tzinfo.

    Parameters
    ----------
    tz
        IANA timezone name (e.g., "Europe/Brussels") or a tzinfo instance

    Returns
    -------
    tzinfo
        pytz timezone for names, the given object otherwise

    Raises
    ------
    InvalidTimezoneError
        If the name is not a known IANA zone
    """
    if isinstance(tz, tzinfo):
        return tz
    if not isinstance(tz, str) or not tz:
        raise InvalidTimezoneError(f"Invalid timezone: {tz!r}")
    try:
        return pytz.timezone(tz)
    except pytz.UnknownTimeZoneError as exc:
        raise InvalidTimezoneError(f"Invalid timezone: {tz}") from exc


def get_current_utc() -> datetime:
    """Get current time in UTC.

    Returns
    -------
    datetime
        Current time in UTC with timezone info
    """
    return datetime.now(timezone.utc)


def us_to_utc_datetime(ts_us: int) -> datetime:
    """Convert microseconds since the UNIX epoch to an aware UTC datetime.

    Integer arithmetic only, so the round trip through
    :func:`utc_datetime_to_us` is exact.
    """
    return EPOCH_UTC + timedelta(microseconds=ts_us)


def utc_datetime_to_us(dt: datetime) -> int:
    """Convert an aware datetime to microseconds since the UNIX epoch."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (dt - EPOCH_UTC) // _ONE_US


def localize_utc_to_tz(utc_dt: datetime, tz: str | tzinfo) -> datetime:
    """Convert a UTC datetime to a specific timezone for display.

    Example
    -------
    >>> utc_dt = datetime(2025, 10, 8, 12, 0, 0, tzinfo=timezone.utc)
    >>> localize_utc_to_tz(utc_dt, "Europe/Brussels").hour
    14
    """
    return utc_dt.astimezone(resolve_timezone(tz))


def local_date_key(ts_us: int, tz: str | tzinfo) -> str:
    """Local calendar date (YYYY-MM-DD) of an instant."""
    return localize_utc_to_tz(us_to_utc_datetime(ts_us), tz).strftime("%Y-%m-%d")


def local_hour(ts_us: int, tz: str | tzinfo) -> int:
    """Local wall-clock hour (0-23) of an instant."""
    return localize_utc_to_tz(us_to_utc_datetime(ts_us), tz).hour


def format_utc_iso8601(dt: datetime) -> str:
    """Format datetime as ISO-8601 UTC string with milliseconds.

    Example
    -------
    >>> format_utc_iso8601(datetime(2025, 2, 6, 0, 0, tzinfo=timezone.utc))
    '2025-02-06T00:00:00.000Z'
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    return dt.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"


def format_timestamp_us(ts_us: int, offset_seconds: int = 0) -> str:
    """Format a microsecond timestamp as ISO-8601 at a fixed UTC offset.

    Parameters
    ----------
    ts_us
        Microseconds since the UNIX epoch
    offset_seconds
        Offset from UTC in seconds; 0 renders with a ``Z`` suffix

    Returns
    -------
    str
        e.g. ``2025-02-06T01:00:00.000+01:00``
    """
    utc_dt = us_to_utc_datetime(ts_us)
    if offset_seconds == 0:
        return format_utc_iso8601(utc_dt)

    local_dt = utc_dt.astimezone(timezone(timedelta(seconds=offset_seconds)))
    return local_dt.isoformat(timespec="milliseconds")
