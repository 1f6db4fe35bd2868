"""Effective segment model consumed by the reporting core."""

from .segments import (
    EffectiveSegment,
    ExportRange,
    ReportIdentity,
    SegmentCoverage,
    SegmentSource,
)

__all__ = [
    "EffectiveSegment",
    "ExportRange",
    "ReportIdentity",
    "SegmentCoverage",
    "SegmentSource",
]
