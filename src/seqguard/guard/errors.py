"""The fatal signal raised when a guarded sequence exits incomplete."""

from __future__ import annotations

from seqguard.constants import INCOMPLETE_SEQUENCE_MESSAGE


class IncompleteSequenceError(BaseException):
    """A guarded operation sequence was dropped before all steps completed.

    Derives from ``BaseException`` so ``except Exception`` blocks inside the
    guarded code cannot swallow it.
    """

    def __init__(self, observed: int, expected: int) -> None:
        self.observed = observed
        self.expected = expected
        super().__init__(f"{INCOMPLETE_SEQUENCE_MESSAGE}: {observed}")

    def __reduce__(self) -> tuple[type[IncompleteSequenceError], tuple[int, int]]:
        return (type(self), (self.observed, self.expected))
