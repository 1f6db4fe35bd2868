"""Loguru configuration for the reporting core.

This module provides centralized loguru configuration with:
- Component-bound loggers (splitter, aggregator, export, summary)
- Optional structured JSON log file
- Context manager for timing report operations

The package disables its own log records on import; hosts opt in by
calling :func:`configure_loguru`.
"""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = [
    "configure_loguru",
    "get_logger",
    "timing_context",
]


def configure_loguru(
    *,
    log_file: Path | None = None,
    level: str = "INFO",
    rotation: str = "10 MB",
    retention: str = "10 days",
    enable_console: bool = True,
) -> None:
    """Configure loguru sinks and enable wwk log records.

    Parameters
    ----------
    log_file
        Optional JSONL log file (serialized records)
    level
        Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    rotation
        Log rotation policy (e.g., "10 MB", "1 day")
    retention
        Log retention policy (e.g., "10 days", "1 week")
    enable_console
        Enable console output on stderr

    Example
    -------
    >>> from wwk.observability import configure_loguru
    >>> configure_loguru(level="DEBUG")
    """
    logger.remove()

    if enable_console:
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>",
            level=level,
            colorize=True,
        )

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format="{message}",
            level=level,
            rotation=rotation,
            retention=retention,
            serialize=True,
            backtrace=True,
            diagnose=False,
        )

    logger.enable("wwk")
    get_logger("observability").debug("Loguru configured", level=level, log_file=str(log_file))


def get_logger(component: str = "wwk") -> Any:
    """Get logger instance bound to a specific component.

    Parameters
    ----------
    component
        Component name (splitter, aggregator, export, summary)

    Returns
    -------
    Logger
        Loguru logger bound to component
    """
    return logger.bind(component=component)


@contextmanager
def timing_context(
    operation: str,
    *,
    component: str = "wwk",
    **metadata: Any,
) -> Generator[dict[str, Any], None, None]:
    """Context manager for timing operations.

    Parameters
    ----------
    operation
        Name of the operation being timed
    component
        Component name for filtering logs
    **metadata
        Additional metadata to log

    Yields
    ------
    dict
        Context dictionary that can be updated with additional data

    Example
    -------
    >>> with timing_context("export_csv", component="export") as ctx:
    ...     text = render(segments)
    ...     ctx["rows"] = len(segments)
    """
    start_ns = time.perf_counter_ns()
    context: dict[str, Any] = {"operation": operation, "component": component, **metadata}
    bound = logger.bind(component=component, timing=True, operation=operation)

    bound.debug(f"START: {operation}", phase="start", **metadata)

    try:
        yield context
    finally:
        duration_ns = time.perf_counter_ns() - start_ns
        bound.debug(
            f"END: {operation}",
            phase="end",
            duration_ms=duration_ns / 1_000_000,
            duration_ns=duration_ns,
            **{k: v for k, v in context.items() if k not in ("operation", "component")},
        )
