"""Scope guard that turns an incomplete step sequence into a fatal signal."""

from __future__ import annotations

import os
from types import TracebackType

from seqguard.enums import FatalAction
from seqguard.guard.counter import CompletionCounter
from seqguard.guard.errors import IncompleteSequenceError
from seqguard.utilities.logger_manager import (
    LoggerManager,
    MetricType,
    get_default_logger_manager,
)


class CompletionGuard:
    """Checks on every scope exit that the counter reached ``expected``.

    Use it as a context manager around the whole sequence. ``__exit__`` runs
    on normal completion, early return, raised exceptions and on the
    ``CancelledError`` asyncio delivers at a suspension point. If the counter
    is short at that moment the guard fires ``IncompleteSequenceError`` (or
    aborts the process), and any exception already in flight becomes the
    context of the fatal signal. The guard never suppresses exceptions.
    """

    def __init__(
        self,
        counter: CompletionCounter,
        expected: int,
        *,
        fatal_action: FatalAction = FatalAction.RAISE,
        logger_manager: LoggerManager | None = None,
    ) -> None:
        self._counter = counter
        self._expected = expected
        self._fatal_action = FatalAction(fatal_action)
        self._logger_manager = logger_manager or get_default_logger_manager()
        self._logger = self._logger_manager.get_logger()
        self._entered = False

    @property
    def expected(self) -> int:
        return self._expected

    def __enter__(self) -> CompletionGuard:
        if self._entered:
            raise RuntimeError("CompletionGuard cannot be entered more than once")
        self._entered = True
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        observed = self._counter.load()
        if observed == self._expected:
            self._logger.debug(
                "Guarded sequence completed",
                extra={"context": {"observed": observed, "expected": self._expected}},
            )
            return False
        self._fire(observed, exc_type)
        return False

    def _fire(self, observed: int, exc_type: type[BaseException] | None) -> None:
        error = IncompleteSequenceError(observed, self._expected)
        self._logger.critical(
            str(error),
            extra={
                "context": {
                    "observed": observed,
                    "expected": self._expected,
                    "exit_cause": exc_type.__name__ if exc_type else None,
                    "fatal_action": self._fatal_action.value,
                }
            },
        )
        self._logger_manager.log_metric(
            "guard_fired",
            1,
            MetricType.COUNTER,
            tags={"fatal_action": self._fatal_action.value},
        )
        if self._fatal_action is FatalAction.ABORT:
            self._logger_manager.flush()
            os.abort()
        raise error
