"""Racing awaitables inline and detaching work into background tasks.

``race`` cancels the losing branches, which cancels the scope running them.
``detach`` returns a handle whose cancellation never reaches the task behind
it. Guarded sequences behave differently under the two, and callers pick the
one they want.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Coroutine, Generator
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from seqguard.guard.errors import IncompleteSequenceError
from seqguard.utilities.logger_manager import LoggerManager, get_default_logger_manager

T = TypeVar("T")

# Strong references to detached tasks; the event loop only keeps weak ones.
_BACKGROUND_TASKS: set[asyncio.Task[Any]] = set()


@dataclass(frozen=True)
class RaceResult(Generic[T]):
    """Outcome of ``race``: which branch finished first and its value."""

    index: int
    value: T


async def _cancel_and_drain(tasks: list[asyncio.Future[Any]]) -> None:
    """Cancel ``tasks``, wait for all of them, re-raise any real failure."""
    for task in tasks:
        task.cancel()
    results = await asyncio.gather(*tasks, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException) and not isinstance(
            result, asyncio.CancelledError
        ):
            raise result


async def race(*awaitables: Awaitable[Any]) -> RaceResult[Any]:
    """Run ``awaitables`` concurrently and keep only the first to finish.

    The remaining branches are cancelled and awaited before returning, so a
    guarded sequence among the losers has already fired by the time ``race``
    raises. When several branches finish together the lowest index wins.
    """
    if len(awaitables) < 2:
        raise ValueError("race requires at least two awaitables")
    tasks = [asyncio.ensure_future(aw) for aw in awaitables]
    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        await _cancel_and_drain(tasks)
        raise
    index = next(i for i, task in enumerate(tasks) if task in done)
    winner = tasks[index]
    await _cancel_and_drain([task for task in tasks if task is not winner])
    return RaceResult(index=index, value=winner.result())


class DetachedHandle(Generic[T]):
    """Handle to a task scheduled by ``detach``.

    Awaiting the handle waits through ``asyncio.shield``: cancelling that wait
    drops the handle's interest but leaves the task running. ``abort`` is the
    only way to cancel the task itself. If the task fails while nobody is
    waiting on it, the failure is logged from its done-callback.
    """

    def __init__(self, task: asyncio.Task[T], logger_manager: LoggerManager) -> None:
        self._task = task
        self._waiters = 0
        self._logger = logger_manager.get_logger()
        task.add_done_callback(self._report_unobserved)

    @property
    def task(self) -> asyncio.Task[T]:
        return self._task

    @property
    def name(self) -> str:
        return self._task.get_name()

    def done(self) -> bool:
        return self._task.done()

    def __await__(self) -> Generator[Any, None, T]:
        return self._wait_shielded().__await__()

    async def _wait_shielded(self) -> T:
        self._waiters += 1
        try:
            return await asyncio.shield(self._task)
        finally:
            self._waiters -= 1

    async def join(self) -> T:
        """Wait for the task itself and return its result or raise its error."""
        self._waiters += 1
        try:
            return await self._task
        finally:
            self._waiters -= 1

    def abort(self) -> bool:
        """Cancel the detached task, not just this handle."""
        self._logger.warning(
            "Aborting detached task",
            extra={"context": {"task": self.name}},
        )
        return self._task.cancel()

    def _report_unobserved(self, task: asyncio.Task[T]) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is None or self._waiters:
            return
        if isinstance(error, IncompleteSequenceError):
            self._logger.critical(
                f"Detached task {task.get_name()} ended incomplete: {error}",
                extra={
                    "context": {
                        "task": task.get_name(),
                        "observed": error.observed,
                        "expected": error.expected,
                    }
                },
            )
        else:
            self._logger.error(
                f"Detached task {task.get_name()} failed: {error!r}",
                extra={"context": {"task": task.get_name()}},
            )

    def __repr__(self) -> str:
        state = "done" if self._task.done() else "pending"
        return f"DetachedHandle(name={self.name!r}, state={state})"


def detach(
    coro: Coroutine[Any, Any, T],
    *,
    name: str | None = None,
    logger_manager: LoggerManager | None = None,
) -> DetachedHandle[T]:
    """Schedule ``coro`` as an independent task and return a handle to it."""
    task = asyncio.create_task(coro, name=name)
    _BACKGROUND_TASKS.add(task)
    task.add_done_callback(_BACKGROUND_TASKS.discard)
    manager = logger_manager or get_default_logger_manager()
    manager.get_logger().debug(
        "Detached task scheduled",
        extra={"context": {"task": task.get_name()}},
    )
    return DetachedHandle(task, manager)


def background_task_count() -> int:
    """Number of detached tasks still running."""
    return len(_BACKGROUND_TASKS)
