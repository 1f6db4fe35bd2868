"""Boundary splitting, aggregation and summaries over effective segments."""

from .aggregator import (
    AppWindowTotal,
    GroupBy,
    HourBucketEntry,
    PeriodBucketEntry,
    merge_totals,
    total_unobserved_gaps,
    total_working_time,
    totals_by_app_name,
    totals_by_app_name_and_window,
    totals_by_application,
    totals_by_day,
    totals_by_hour,
    totals_by_period,
    totals_by_tag,
    totals_by_window_title,
)
from .splitter import split_by_day, split_by_hour, split_segments
from .summary import SummaryReport, compute_summary, format_duration
from .time_windows import Granularity, compute_interval_utc, next_boundary_utc

__all__ = [
    # Boundaries
    "Granularity",
    "compute_interval_utc",
    "next_boundary_utc",
    # Splitting
    "split_by_day",
    "split_by_hour",
    "split_segments",
    # Aggregation
    "AppWindowTotal",
    "GroupBy",
    "HourBucketEntry",
    "PeriodBucketEntry",
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
    # Summary
    "SummaryReport",
    "compute_summary",
    "format_duration",
]
