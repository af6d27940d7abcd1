"""Ordered step sequence guarded by a ``CompletionGuard``."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from seqguard.config.loader import load_settings
from seqguard.constants import EXPECTED_STEP_COUNT
from seqguard.enums import FatalAction, StepPhase
from seqguard.guard import CompletionCounter, CompletionGuard
from seqguard.schema.models import SequenceSettings, StepRecord
from seqguard.utilities.logger_manager import (
    LoggerManager,
    MetricType,
    get_default_logger_manager,
)

StepWork = Callable[[int], Awaitable[object]]


class StepSequenceRunner:
    """Runs ``step_count`` steps in order under a single completion guard.

    Each step suspends on its work (``asyncio.sleep(step_delay)`` unless
    ``step_work`` is given) and then increments the counter. The only
    suspension points are those awaits, so cancelling the task that runs
    ``run()`` always lands before some step's increment and the guard fires.
    """

    def __init__(
        self,
        step_count: int = EXPECTED_STEP_COUNT,
        step_delay: float = 1.0,
        *,
        step_work: StepWork | None = None,
        fatal_action: FatalAction = FatalAction.RAISE,
        logger_manager: LoggerManager | None = None,
    ) -> None:
        if step_count < 1:
            raise ValueError("step_count must be at least 1")
        if step_delay < 0:
            raise ValueError("step_delay must not be negative")
        self.step_count = step_count
        self.step_delay = step_delay
        self.fatal_action = FatalAction(fatal_action)
        self._step_work = step_work
        self.logger_manager = logger_manager or get_default_logger_manager()
        self.logger = self.logger_manager.get_logger()
        self.trace: list[StepRecord] = []
        self._counter: CompletionCounter | None = None
        self._running = False

    @classmethod
    def from_settings(
        cls,
        settings: SequenceSettings,
        *,
        step_work: StepWork | None = None,
        logger_manager: LoggerManager | None = None,
    ) -> StepSequenceRunner:
        return cls(
            settings.step_count,
            settings.step_delay,
            step_work=step_work,
            fatal_action=settings.fatal_action,
            logger_manager=logger_manager,
        )

    @property
    def counter(self) -> CompletionCounter | None:
        """Counter of the current or most recent run."""
        return self._counter

    async def run(self) -> int:
        """Run every step once and return the completed-step count."""
        if self._running:
            raise RuntimeError("Sequence is already running on this runner")
        self._running = True
        counter = CompletionCounter(self.step_count)
        self._counter = counter
        self.trace = []
        self.logger.info(
            "Starting step sequence",
            extra={
                "context": {
                    "step_count": self.step_count,
                    "step_delay": self.step_delay,
                }
            },
        )
        try:
            with CompletionGuard(
                counter,
                self.step_count,
                fatal_action=self.fatal_action,
                logger_manager=self.logger_manager,
            ):
                for step in range(1, self.step_count + 1):
                    await self._run_step(step, counter)
                completed = counter.load()
        finally:
            self._running = False
        self.logger.info(
            "Step sequence completed",
            extra={"context": {"completed": completed}},
        )
        self.logger_manager.log_metric("sequences_completed", 1, MetricType.COUNTER)
        return completed

    async def _run_step(self, step: int, counter: CompletionCounter) -> None:
        self.trace.append(
            StepRecord(step=step, phase=StepPhase.SUSPENDED, count=counter.load())
        )
        if self._step_work is not None:
            await self._step_work(step)
        else:
            await asyncio.sleep(self.step_delay)
        count = counter.increment()
        self.trace.append(StepRecord(step=step, phase=StepPhase.COMPLETED, count=count))
        self.logger.debug(
            f"Step {step}/{self.step_count} completed",
            extra={"context": {"step": step, "count": count}},
        )
        self.logger_manager.log_metric("steps_completed", 1, MetricType.COUNTER)


async def run_important_operation_sequence() -> int:
    """Run the three important steps; returns 3 when all of them completed.

    If the task running this coroutine is cancelled before the last step
    finishes, ``IncompleteSequenceError`` is raised from the guard instead of
    ``CancelledError``. Run it through ``detach`` when the caller may stop
    waiting but the work must still finish.
    """
    settings = load_settings(step_count=EXPECTED_STEP_COUNT)
    runner = StepSequenceRunner.from_settings(
        settings,
        logger_manager=get_default_logger_manager(settings.log_level),
    )
    return await runner.run()
