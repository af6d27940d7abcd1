"""Helpers for asserting on what a LoggerManager wrote to disk."""

from __future__ import annotations

from seqguard.utilities.logger_manager import LoggerManager


def read_log(manager: LoggerManager) -> str:
    manager.flush()
    assert manager.config.log_dir is not None
    log_file = manager.config.log_dir / manager.config.log_file_name
    return log_file.read_text(encoding="utf-8")
