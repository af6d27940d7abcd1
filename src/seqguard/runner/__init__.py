"""Step sequence runner and the scheduling helpers used to drive it."""

from __future__ import annotations

from .scheduling import DetachedHandle, RaceResult, detach, race
from .sequence import StepSequenceRunner, run_important_operation_sequence

__all__ = [
    "DetachedHandle",
    "RaceResult",
    "StepSequenceRunner",
    "detach",
    "race",
    "run_important_operation_sequence",
]
