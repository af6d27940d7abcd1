"""Pydantic models for sequence settings and step traces."""

from __future__ import annotations

from pydantic import Field, field_validator

from seqguard.config.defaults import SEQUENCE_DEFAULTS
from seqguard.enums import FatalAction, StepPhase
from seqguard.schema.base import FrozenModel

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class SequenceSettings(FrozenModel):
    """Validated runtime settings for a step sequence."""

    step_count: int = Field(
        SEQUENCE_DEFAULTS["step_count"],
        ge=1,
        description="Number of ordered steps the guard expects to complete",
    )
    step_delay: float = Field(
        SEQUENCE_DEFAULTS["step_delay"],
        ge=0.0,
        description="Seconds each step suspends for in place of real work",
    )
    fatal_action: FatalAction = Field(
        FatalAction(SEQUENCE_DEFAULTS["fatal_action"]),
        description="Raise the fatal signal or abort the process",
    )
    log_level: str = Field(SEQUENCE_DEFAULTS["log_level"])

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level


class StepRecord(FrozenModel):
    """One ordering checkpoint written by the runner."""

    step: int = Field(..., ge=1)
    phase: StepPhase
    count: int = Field(..., ge=0, description="Counter value when recorded")
