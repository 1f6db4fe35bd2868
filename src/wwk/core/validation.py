"""Input validation for effective segments.

Malformed segments are rejected before any report output is built;
there is no partial-success mode.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .time import MAX_TS_US, MIN_TS_US

__all__ = [
    "SegmentValidationError",
    "ValidationResult",
    "check_bounds",
    "validate_segments",
]


class SegmentValidationError(ValueError):
    """Raised when a segment (or segment list) is malformed."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class ValidationResult:
    """Result of a validation pass."""

    def __init__(self, valid: bool, errors: list[str] | None = None) -> None:
        self.valid = valid
        self.errors = errors or []

    def __bool__(self) -> bool:
        """Boolean conversion."""
        return self.valid

    def __str__(self) -> str:
        """String representation."""
        if self.valid:
            return "Valid"
        return f"Invalid: {'; '.join(self.errors)}"

    def add_error(self, error: str) -> None:
        """Add validation error."""
        self.errors.append(error)
        self.valid = False


def check_bounds(start_ts_us: Any, end_ts_us: Any) -> str | None:
    """Return an error message if the bounds are not a valid half-open interval."""
    if isinstance(start_ts_us, bool) or not isinstance(start_ts_us, int):
        return f"start_ts_us must be an integer, got {type(start_ts_us).__name__}"
    if isinstance(end_ts_us, bool) or not isinstance(end_ts_us, int):
        return f"end_ts_us must be an integer, got {type(end_ts_us).__name__}"
    for name, value in (("start_ts_us", start_ts_us), ("end_ts_us", end_ts_us)):
        if not MIN_TS_US <= value <= MAX_TS_US:
            return f"{name} ({value}) is outside the supported range [{MIN_TS_US}, {MAX_TS_US}]"
    if end_ts_us < start_ts_us:
        return f"end_ts_us ({end_ts_us}) is before start_ts_us ({start_ts_us})"
    return None


def validate_segments(segments: Iterable[Any]) -> list[Any]:
    """Validate a segment list and return it materialized.

    Parameters
    ----------
    segments
        Effective segments (anything exposing ``start_ts_us``/``end_ts_us``)

    Returns
    -------
    list
        The segments, in input order

    Raises
    ------
    SegmentValidationError
        If any segment has ``end_ts_us < start_ts_us`` or a bound outside
        ``[MIN_TS_US, MAX_TS_US]``
    """
    materialized = list(segments)
    result = ValidationResult(valid=True)

    for index, segment in enumerate(materialized):
        error = check_bounds(
            getattr(segment, "start_ts_us", None),
            getattr(segment, "end_ts_us", None),
        )
        if error:
            result.add_error(f"segment[{index}]: {error}")

    if not result:
        raise SegmentValidationError(
            f"{len(result.errors)} malformed segment(s)",
            errors=result.errors,
        )

    return materialized
