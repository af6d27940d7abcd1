"""seqguard: all-or-nothing completion for sequences of suspending steps."""

from __future__ import annotations

from seqguard.constants import EXPECTED_STEP_COUNT
from seqguard.enums import FatalAction
from seqguard.guard import CompletionCounter, CompletionGuard, IncompleteSequenceError
from seqguard.runner import (
    DetachedHandle,
    RaceResult,
    StepSequenceRunner,
    detach,
    race,
    run_important_operation_sequence,
)

__version__ = "0.1.0"

__all__ = [
    "EXPECTED_STEP_COUNT",
    "CompletionCounter",
    "CompletionGuard",
    "DetachedHandle",
    "FatalAction",
    "IncompleteSequenceError",
    "RaceResult",
    "StepSequenceRunner",
    "detach",
    "race",
    "run_important_operation_sequence",
]
