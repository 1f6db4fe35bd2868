"""Shared fixtures for reporting tests."""

from __future__ import annotations

import pytest

from wwk.timeline.segments import EffectiveSegment, SegmentCoverage, SegmentSource


@pytest.fixture
def make_segment():
    """Factory for effective segments with sensible defaults."""

    def _make(
        start_ts_us: int,
        end_ts_us: int,
        *,
        bundle_id: str = "com.test.app",
        app_name: str = "Test App",
        title: str | None = "Window",
        tags: tuple[str, ...] | list[str] = (),
        coverage: SegmentCoverage = SegmentCoverage.OBSERVED,
        source: SegmentSource = SegmentSource.RAW,
        supporting_ids: tuple[int, ...] = (),
    ) -> EffectiveSegment:
        return EffectiveSegment(
            start_ts_us=start_ts_us,
            end_ts_us=end_ts_us,
            source=source,
            app_bundle_id=bundle_id,
            app_name=app_name,
            window_title=title,
            tags=tuple(tags),
            coverage=coverage,
            supporting_ids=supporting_ids,
        )

    return _make
