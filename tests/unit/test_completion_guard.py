from __future__ import annotations

import pickle

import pytest

from seqguard.enums import FatalAction
from seqguard.guard import CompletionCounter, CompletionGuard, IncompleteSequenceError
from tests.utils.log_helpers import read_log


def _completed_counter(limit: int = 3) -> CompletionCounter:
    counter = CompletionCounter(limit)
    for _ in range(limit):
        counter.increment()
    return counter


def test_guard_is_silent_when_sequence_completes(logger_manager) -> None:
    counter = _completed_counter()
    with CompletionGuard(counter, 3, logger_manager=logger_manager):
        pass
    assert logger_manager.metric_value("guard_fired") == 0


def test_guard_fires_with_observed_count(logger_manager) -> None:
    counter = CompletionCounter(3)
    with pytest.raises(
        IncompleteSequenceError, match="Transaction dropped before completion: 2"
    ) as exc_info:
        with CompletionGuard(counter, 3, logger_manager=logger_manager):
            counter.increment()
            counter.increment()
    assert exc_info.value.observed == 2
    assert exc_info.value.expected == 3
    assert logger_manager.metric_value("guard_fired") == 1
    assert "Transaction dropped before completion: 2" in read_log(logger_manager)


def test_guard_fires_on_early_return(logger_manager) -> None:
    counter = CompletionCounter(3)

    def leave_early() -> str:
        with CompletionGuard(counter, 3, logger_manager=logger_manager):
            counter.increment()
            return "left early"

    with pytest.raises(IncompleteSequenceError, match=": 1"):
        leave_early()


def test_guard_is_not_swallowed_by_except_exception(logger_manager) -> None:
    counter = CompletionCounter(3)

    def swallow_everything() -> str:
        try:
            with CompletionGuard(counter, 3, logger_manager=logger_manager):
                pass
        except Exception:
            return "swallowed"
        return "completed"

    with pytest.raises(IncompleteSequenceError):
        swallow_everything()


def test_guard_chains_in_flight_exception(logger_manager) -> None:
    counter = CompletionCounter(3)
    with pytest.raises(IncompleteSequenceError) as exc_info:
        with CompletionGuard(counter, 3, logger_manager=logger_manager):
            counter.increment()
            raise ValueError("step failed")
    assert isinstance(exc_info.value.__context__, ValueError)


def test_guard_does_not_mask_errors_after_completion(logger_manager) -> None:
    counter = _completed_counter()
    with pytest.raises(ValueError, match="late failure"):
        with CompletionGuard(counter, 3, logger_manager=logger_manager):
            raise ValueError("late failure")


def test_guard_cannot_be_entered_twice(logger_manager) -> None:
    guard = CompletionGuard(_completed_counter(), 3, logger_manager=logger_manager)
    with guard:
        pass
    with pytest.raises(RuntimeError, match="more than once"):
        with guard:
            pass


def test_abort_action_terminates_process(logger_manager, monkeypatch) -> None:
    calls: list[str] = []
    monkeypatch.setattr(
        "seqguard.guard.completion.os.abort", lambda: calls.append("abort")
    )
    counter = CompletionCounter(3)
    with pytest.raises(IncompleteSequenceError):
        with CompletionGuard(
            counter,
            3,
            fatal_action=FatalAction.ABORT,
            logger_manager=logger_manager,
        ):
            pass
    assert calls == ["abort"]
    assert "CRITICAL" in read_log(logger_manager)


def test_fatal_signal_survives_pickling() -> None:
    restored = pickle.loads(pickle.dumps(IncompleteSequenceError(1, 3)))
    assert isinstance(restored, IncompleteSequenceError)
    assert (restored.observed, restored.expected) == (1, 3)
    assert str(restored) == "Transaction dropped before completion: 1"
