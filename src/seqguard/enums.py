"""Centralized semantic enums for seqguard."""

from __future__ import annotations

from enum import Enum


class FatalAction(str, Enum):
    """What a guard does when it observes an incomplete sequence."""

    RAISE = "raise"
    ABORT = "abort"


class StepPhase(str, Enum):
    """Checkpoints recorded for each step of a sequence."""

    SUSPENDED = "suspended"
    COMPLETED = "completed"


class RunMode(str, Enum):
    """How the CLI schedules a sequence."""

    INLINE = "inline"
    DETACHED = "detached"
