"""Utilities package for seqguard.

Currently this is the logging layer shared by the guard, the runner and the
CLI.
"""

from __future__ import annotations

from .logger_manager import (
    LoggerConfig,
    LoggerManager,
    MetricType,
    get_default_logger_manager,
)

__all__ = [
    "LoggerConfig",
    "LoggerManager",
    "MetricType",
    "get_default_logger_manager",
]
