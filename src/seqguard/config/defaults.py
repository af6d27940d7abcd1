"""Explicit default settings for sequence configuration."""

from __future__ import annotations

from typing import Any

SEQUENCE_DEFAULTS: dict[str, Any] = {
    "step_count": 3,
    "step_delay": 1.0,
    "fatal_action": "raise",
    "log_level": "INFO",
}
