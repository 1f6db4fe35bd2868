"""Reporting core for the wwk time tracker.

Turns reconciled effective segments into totals, day/hour-bounded parts
and CSV/JSON exports.
"""

from loguru import logger

__version__ = "0.3.0"

# Library logging stays silent until the host calls configure_loguru().
logger.disable("wwk")
