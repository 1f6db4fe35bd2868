"""Effective segment data shapes.

Segments are produced upstream by timeline reconciliation and are treated
as immutable values here. Display sentinels such as "(no title)" are never
stored on a segment; they are applied by aggregators and exporters.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum

from ..core.validation import SegmentValidationError, check_bounds

__all__ = [
    "EffectiveSegment",
    "ExportRange",
    "ReportIdentity",
    "SegmentCoverage",
    "SegmentSource",
]


class SegmentSource(str, Enum):
    """Provenance of a segment."""

    RAW = "raw"
    MANUAL = "manual"


class SegmentCoverage(str, Enum):
    """Whether the time was observed or is an unobserved gap."""

    OBSERVED = "observed"
    UNOBSERVED_GAP = "unobserved_gap"


@dataclass(frozen=True)
class EffectiveSegment:
    """Half-open UTC interval [start_ts_us, end_ts_us) with classification.

    Attributes
    ----------
    start_ts_us : int
        Start, microseconds since the UNIX epoch (inclusive)
    end_ts_us : int
        End, microseconds since the UNIX epoch (exclusive)
    source : SegmentSource
        Raw observation or manual entry
    app_bundle_id : str
        Application bundle identifier; empty string is a valid category
    app_name : str
        Application display name
    window_title : str | None
        Window title, None when unavailable
    tags : tuple[str, ...]
        Tags in application order, duplicates preserved
    coverage : SegmentCoverage
        Observed activity or unobserved gap
    supporting_ids : tuple[int, ...]
        Opaque upstream event ids
    """

    start_ts_us: int
    end_ts_us: int
    source: SegmentSource
    app_bundle_id: str
    app_name: str
    window_title: str | None = None
    tags: tuple[str, ...] = ()
    coverage: SegmentCoverage = SegmentCoverage.OBSERVED
    supporting_ids: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        error = check_bounds(self.start_ts_us, self.end_ts_us)
        if error:
            raise SegmentValidationError(f"Malformed segment: {error}", errors=[error])

        if not isinstance(self.tags, tuple):
            object.__setattr__(self, "tags", tuple(self.tags))
        if not isinstance(self.supporting_ids, tuple):
            object.__setattr__(self, "supporting_ids", tuple(self.supporting_ids))
        object.__setattr__(self, "source", SegmentSource(self.source))
        object.__setattr__(self, "coverage", SegmentCoverage(self.coverage))

    @property
    def duration_us(self) -> int:
        return self.end_ts_us - self.start_ts_us

    @property
    def duration_seconds(self) -> float:
        return self.duration_us / 1_000_000

    @property
    def is_observed(self) -> bool:
        return self.coverage is SegmentCoverage.OBSERVED

    @property
    def is_gap(self) -> bool:
        return self.coverage is SegmentCoverage.UNOBSERVED_GAP

    def with_bounds(self, start_ts_us: int, end_ts_us: int) -> EffectiveSegment:
        """Copy of this segment with new bounds and every other field unchanged."""
        return replace(self, start_ts_us=start_ts_us, end_ts_us=end_ts_us)


@dataclass(frozen=True)
class ReportIdentity:
    """Machine/user a report was generated for. Passed through opaquely."""

    machine_id: str
    username: str
    uid: int

    def __post_init__(self) -> None:
        if isinstance(self.uid, bool) or not isinstance(self.uid, int) or self.uid < 0:
            raise SegmentValidationError(f"uid must be a non-negative integer, got {self.uid!r}")


@dataclass(frozen=True)
class ExportRange:
    """Requested report range, UTC microseconds [start_ts_us, end_ts_us)."""

    start_ts_us: int
    end_ts_us: int

    def __post_init__(self) -> None:
        error = check_bounds(self.start_ts_us, self.end_ts_us)
        if error:
            raise SegmentValidationError(f"Malformed export range: {error}", errors=[error])

    @classmethod
    def covering(cls, segments: Iterable[EffectiveSegment]) -> ExportRange:
        """Smallest range containing every segment (empty range at 0 if none)."""
        materialized = list(segments)
        if not materialized:
            return cls(0, 0)
        return cls(
            min(s.start_ts_us for s in materialized),
            max(s.end_ts_us for s in materialized),
        )
