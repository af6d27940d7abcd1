"""Completion guard and the shared counter it checks."""

from __future__ import annotations

from .completion import CompletionGuard
from .counter import CompletionCounter
from .errors import IncompleteSequenceError

__all__ = ["CompletionCounter", "CompletionGuard", "IncompleteSequenceError"]
