"""Tests for loguru configuration and timing instrumentation."""

from __future__ import annotations

import json
import sys

import pytest
from loguru import logger

from wwk.export import export_csv
from wwk.observability import configure_loguru, get_logger, timing_context
from wwk.timeline.segments import ReportIdentity


@pytest.fixture
def captured():
    """Collect wwk log records into a list."""
    records = []
    logger.enable("wwk")
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")

    yield records

    logger.remove(handler_id)
    logger.disable("wwk")


@pytest.fixture
def restore_loguru():
    """Put loguru back to its import-time state after configure_loguru()."""
    yield
    logger.remove()
    logger.add(sys.stderr)
    logger.disable("wwk")


def test_library_is_silent_by_default(make_segment):
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    try:
        export_csv([make_segment(0, 1)], ReportIdentity("mac-1", "alice", 501), include_titles=True)
    finally:
        logger.remove(handler_id)

    assert [r for r in records if r["name"].startswith("wwk")] == []


def test_get_logger_binds_component(captured):
    get_logger("splitter").info("hello")

    assert captured[-1]["extra"]["component"] == "splitter"
    assert captured[-1]["message"] == "hello"


def test_timing_context_logs_start_and_end(captured):
    with timing_context("export_csv", component="export", segments=3) as ctx:
        ctx["rows"] = 4

    start, end = [r for r in captured if r["extra"].get("operation") == "export_csv"]

    assert start["message"] == "START: export_csv"
    assert start["extra"]["phase"] == "start"
    assert start["extra"]["segments"] == 3
    assert end["message"] == "END: export_csv"
    assert end["extra"]["component"] == "export"
    assert end["extra"]["rows"] == 4
    assert end["extra"]["duration_ns"] >= 0


def test_timing_context_logs_end_on_error(captured):
    with pytest.raises(RuntimeError):
        with timing_context("compute_summary", component="summary"):
            raise RuntimeError("boom")

    assert captured[-1]["message"] == "END: compute_summary"


def test_exports_are_timed(captured, make_segment):
    export_csv([make_segment(0, 1)], ReportIdentity("mac-1", "alice", 501), include_titles=True)

    messages = [r["message"] for r in captured]

    assert "START: export_csv" in messages
    assert "END: export_csv" in messages


def test_configure_loguru_writes_jsonl(tmp_path, restore_loguru):
    log_file = tmp_path / "logs" / "wwk.jsonl"

    configure_loguru(log_file=log_file, level="DEBUG", enable_console=False)
    get_logger("aggregator").info("Totals computed")
    logger.remove()

    lines = [json.loads(line) for line in log_file.read_text().splitlines()]
    last = lines[-1]["record"]

    assert last["message"] == "Totals computed"
    assert last["extra"]["component"] == "aggregator"
    assert last["level"]["name"] == "INFO"


def test_configure_loguru_respects_level(tmp_path, restore_loguru):
    log_file = tmp_path / "wwk.jsonl"

    configure_loguru(log_file=log_file, level="WARNING", enable_console=False)
    get_logger("aggregator").info("quiet")
    get_logger("aggregator").warning("loud")
    logger.remove()

    messages = [json.loads(line)["record"]["message"] for line in log_file.read_text().splitlines()]

    assert messages == ["loud"]
