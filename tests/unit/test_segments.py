"""Tests for the segment model and input validation."""

from __future__ import annotations

import dataclasses
from types import SimpleNamespace

import pytest

from wwk.core.validation import SegmentValidationError, ValidationResult, check_bounds, validate_segments
from wwk.timeline.segments import (
    EffectiveSegment,
    ExportRange,
    ReportIdentity,
    SegmentCoverage,
    SegmentSource,
)


def _segment(start: int = 0, end: int = 1_000_000, **kwargs) -> EffectiveSegment:
    fields = {"source": SegmentSource.RAW, "app_bundle_id": "com.test.app", "app_name": "Test App"}
    fields.update(kwargs)
    return EffectiveSegment(start_ts_us=start, end_ts_us=end, **fields)


class TestEffectiveSegment:
    def test_defaults(self):
        segment = _segment()

        assert segment.window_title is None
        assert segment.tags == ()
        assert segment.coverage is SegmentCoverage.OBSERVED
        assert segment.supporting_ids == ()

    def test_duration(self):
        segment = _segment(1_000_000, 3_500_000)

        assert segment.duration_us == 2_500_000
        assert segment.duration_seconds == 2.5

    def test_zero_duration_is_valid(self):
        assert _segment(5, 5).duration_us == 0

    def test_end_before_start_is_rejected(self):
        with pytest.raises(SegmentValidationError) as exc_info:
            _segment(10, 5)

        assert exc_info.value.errors == ["end_ts_us (5) is before start_ts_us (10)"]

    def test_non_integer_bounds_are_rejected(self):
        with pytest.raises(SegmentValidationError):
            _segment(1.5, 2)  # type: ignore[arg-type]

    def test_tags_and_ids_become_tuples(self):
        segment = _segment(tags=["billable", "billable"], supporting_ids=[3, 4])

        assert segment.tags == ("billable", "billable")
        assert segment.supporting_ids == (3, 4)

    def test_enum_values_are_coerced(self):
        segment = _segment(source="manual", coverage="unobserved_gap")

        assert segment.source is SegmentSource.MANUAL
        assert segment.coverage is SegmentCoverage.UNOBSERVED_GAP
        assert segment.is_gap
        assert not segment.is_observed

    def test_unknown_coverage_is_rejected(self):
        with pytest.raises(ValueError):
            _segment(coverage="partially_observed")

    def test_is_frozen(self):
        segment = _segment()

        with pytest.raises(dataclasses.FrozenInstanceError):
            segment.start_ts_us = 7  # type: ignore[misc]

    def test_with_bounds_keeps_other_fields(self):
        segment = _segment(window_title="Inbox", tags=("a",), supporting_ids=(1,))

        moved = segment.with_bounds(100, 200)

        assert (moved.start_ts_us, moved.end_ts_us) == (100, 200)
        assert moved.window_title == "Inbox"
        assert moved.tags == ("a",)
        assert moved.supporting_ids == (1,)
        assert segment.start_ts_us == 0

    def test_with_bounds_validates(self):
        with pytest.raises(SegmentValidationError):
            _segment().with_bounds(200, 100)


class TestReportIdentity:
    def test_valid_identity(self):
        identity = ReportIdentity(machine_id="mac-1", username="alice", uid=501)

        assert identity.uid == 501

    @pytest.mark.parametrize("uid", [-1, "501", True, 1.0])
    def test_invalid_uid(self, uid):
        with pytest.raises(SegmentValidationError):
            ReportIdentity(machine_id="mac-1", username="alice", uid=uid)


class TestExportRange:
    def test_rejects_inverted_range(self):
        with pytest.raises(SegmentValidationError):
            ExportRange(10, 5)

    def test_covering(self):
        segments = [_segment(50, 60), _segment(10, 20), _segment(30, 90)]

        assert ExportRange.covering(segments) == ExportRange(10, 90)

    def test_covering_empty(self):
        assert ExportRange.covering([]) == ExportRange(0, 0)


class TestValidation:
    def test_check_bounds_ok(self):
        assert check_bounds(0, 0) is None
        assert check_bounds(-5, 5) is None

    def test_check_bounds_rejects_bool(self):
        assert check_bounds(True, 5) == "start_ts_us must be an integer, got bool"

    def test_check_bounds_missing(self):
        assert check_bounds(0, None) == "end_ts_us must be an integer, got NoneType"

    def test_validate_segments_returns_list(self):
        segments = (s for s in [_segment(), _segment(2, 3)])

        result = validate_segments(segments)

        assert isinstance(result, list)
        assert len(result) == 2

    def test_validate_segments_collects_every_error(self):
        bogus = [
            SimpleNamespace(start_ts_us=0, end_ts_us=1),
            SimpleNamespace(start_ts_us=10, end_ts_us=5),
            SimpleNamespace(start_ts_us=7),
        ]

        with pytest.raises(SegmentValidationError) as exc_info:
            validate_segments(bogus)

        assert exc_info.value.errors == [
            "segment[1]: end_ts_us (5) is before start_ts_us (10)",
            "segment[2]: end_ts_us must be an integer, got NoneType",
        ]
        assert "2 malformed segment(s)" in str(exc_info.value)

    def test_validation_error_is_value_error(self):
        assert issubclass(SegmentValidationError, ValueError)

    def test_validation_result(self):
        result = ValidationResult(valid=True)
        assert result
        assert str(result) == "Valid"

        result.add_error("first")
        result.add_error("second")

        assert not result
        assert str(result) == "Invalid: first; second"
