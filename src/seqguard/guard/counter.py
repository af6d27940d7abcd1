"""Shared completion counter written by the runner and read by the guard."""

from __future__ import annotations

import threading


class CompletionCounter:
    """Monotonic step counter bounded by ``limit``.

    Only ``increment`` mutates the value, always by exactly one.
    """

    def __init__(self, limit: int) -> None:
        if limit < 1:
            raise ValueError("Counter limit must be at least 1")
        self._limit = limit
        self._value = 0
        self._lock = threading.Lock()

    @property
    def limit(self) -> int:
        return self._limit

    def load(self) -> int:
        return self._value

    def increment(self) -> int:
        """Add one and return the new value."""
        with self._lock:
            if self._value >= self._limit:
                raise RuntimeError(
                    f"Counter invariant violation: cannot exceed {self._limit}"
                )
            self._value += 1
            return self._value

    def is_complete(self) -> bool:
        return self._value == self._limit

    def __repr__(self) -> str:
        return f"CompletionCounter(value={self._value}, limit={self._limit})"
