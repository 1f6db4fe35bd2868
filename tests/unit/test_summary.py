"""Tests for summary reports."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from wwk.core.time import InvalidTimezoneError, utc_datetime_to_us
from wwk.reporting import compute_summary, format_duration
from wwk.timeline.segments import ExportRange, SegmentCoverage


def utc_us(year, month, day, hour=0, minute=0, second=0):
    return utc_datetime_to_us(datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc))


@pytest.fixture
def day_segments(make_segment):
    return [
        make_segment(utc_us(2025, 6, 1, 23), utc_us(2025, 6, 2, 1), bundle_id="safari", title="GitHub", tags=["client"]),
        make_segment(utc_us(2025, 6, 2, 9), utc_us(2025, 6, 2, 9, 30), bundle_id="xcode", title=None),
        make_segment(
            utc_us(2025, 6, 2, 10),
            utc_us(2025, 6, 2, 12),
            bundle_id="safari",
            coverage=SegmentCoverage.UNOBSERVED_GAP,
        ),
    ]


def test_compute_summary(day_segments):
    summary = compute_summary(day_segments, "UTC")

    assert summary.total_seconds == pytest.approx(9000.0)
    assert summary.gap_seconds == pytest.approx(7200.0)
    assert summary.by_app == pytest.approx({"safari": 7200.0, "xcode": 1800.0})
    assert summary.by_tag == pytest.approx({"client": 7200.0, "(untagged)": 1800.0})
    assert summary.by_title == pytest.approx({"GitHub": 7200.0, "(no title)": 1800.0})
    assert summary.by_day == pytest.approx({"2025-06-01": 3600.0, "2025-06-02": 5400.0})
    assert summary.segment_count == 3
    assert summary.observed_count == 2


def test_summary_range_defaults_to_segment_span(day_segments):
    summary = compute_summary(day_segments, "UTC")

    assert summary.start_utc == "2025-06-01T23:00:00.000Z"
    assert summary.end_utc == "2025-06-02T12:00:00.000Z"


def test_summary_with_explicit_range(day_segments):
    summary = compute_summary(day_segments, "Europe/Berlin", ExportRange(utc_us(2025, 6, 1), utc_us(2025, 6, 3)))

    assert summary.start_utc == "2025-06-01T00:00:00.000Z"
    assert summary.timezone == "Europe/Berlin"
    # 23:00 UTC is already 2025-06-02 in Berlin
    assert summary.by_day == pytest.approx({"2025-06-02": 9000.0})


def test_top_apps(day_segments):
    summary = compute_summary(day_segments, "UTC")

    assert summary.top_apps(1) == [("safari", 7200.0)]


def test_to_dict(day_segments):
    data = compute_summary(day_segments, "UTC").to_dict()

    assert data["total_seconds"] == pytest.approx(9000.0)
    assert data["timezone"] == "UTC"
    assert set(data) == {
        "start_utc",
        "end_utc",
        "timezone",
        "total_seconds",
        "gap_seconds",
        "by_app",
        "by_tag",
        "by_title",
        "by_day",
        "segment_count",
        "observed_count",
    }


def test_empty_summary():
    summary = compute_summary([], "UTC")

    assert summary.total_seconds == 0.0
    assert summary.by_app == {}
    assert summary.start_utc == "1970-01-01T00:00:00.000Z"


def test_invalid_timezone(day_segments):
    with pytest.raises(InvalidTimezoneError):
        compute_summary(day_segments, "Atlantis/Capital")


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(0, "00:00:00"), (59.6, "00:01:00"), (3725, "01:02:05"), (90000, "25:00:00")],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected
