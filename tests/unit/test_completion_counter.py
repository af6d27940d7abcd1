from __future__ import annotations

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
import pytest

from seqguard.guard import CompletionCounter


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(limit=st.integers(min_value=1, max_value=50))
def test_counter_increments_by_one_up_to_limit(limit: int) -> None:
    counter = CompletionCounter(limit)
    observed = [counter.load()]
    for _ in range(limit):
        observed.append(counter.increment())
    assert observed == list(range(limit + 1))
    assert counter.is_complete()
    with pytest.raises(RuntimeError, match="cannot exceed"):
        counter.increment()
    assert counter.load() == limit


def test_counter_rejects_non_positive_limit() -> None:
    with pytest.raises(ValueError):
        CompletionCounter(0)


def test_counter_load_matches_last_increment() -> None:
    counter = CompletionCounter(3)
    assert counter.increment() == counter.load() == 1
    assert not counter.is_complete()
    assert repr(counter) == "CompletionCounter(value=1, limit=3)"
