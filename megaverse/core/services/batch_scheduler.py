"""Runs tasks in fixed-size concurrent batches with a cooldown in between.

A batch is a join barrier: the next batch starts only after every task of
the current one has settled and the cooldown has elapsed. A failing task
never stops its siblings or later batches.
"""

import asyncio
import enum
import logging
from typing import Any, Awaitable, Callable, List, Optional, Sequence, TypeVar

from megaverse.domain.events.api_events import BatchSettled
from megaverse.domain.models.common import BatchPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[Any]]


class SchedulerState(enum.Enum):
    PENDING = "pending"
    BATCH_RUNNING = "batch_running"
    BATCH_COOLDOWN = "batch_cooldown"
    DONE = "done"


class BatchScheduler:
    """Dispatches tasks batch by batch to an async handler."""

    def __init__(self, policy: Optional[BatchPolicy] = None, sleep: SleepFunc = asyncio.sleep):
        """Initializes the BatchScheduler.

        Args:
            policy: Batch size and cooldown. Defaults to 3 tasks / 3 seconds.
            sleep: Coroutine used for the cooldown (injectable for tests).
        """
        self.policy = policy or BatchPolicy()
        self._sleep = sleep
        self.state = SchedulerState.PENDING
        logger.info(
            f"BatchScheduler initialized: batch_size={self.policy.batch_size}, "
            f"cooldown={self.policy.cooldown_s}s"
        )

    def _transition(self, state: SchedulerState) -> None:
        logger.debug(f"Scheduler state: {self.state.value} -> {state.value}")
        self.state = state

    def partition(self, tasks: Sequence[T]) -> List[List[T]]:
        """Splits tasks into consecutive batches of at most `batch_size`."""
        size = self.policy.batch_size
        return [list(tasks[i:i + size]) for i in range(0, len(tasks), size)]

    async def run(self, tasks: Sequence[T], handler: Callable[[T], Awaitable[None]]) -> int:
        """Runs `handler` over every task, one batch at a time.

        Args:
            tasks: Tasks in dispatch order.
            handler: Async callable invoked once per task.

        Returns:
            The number of batches dispatched.
        """
        self._transition(SchedulerState.PENDING)
        batches = self.partition(tasks)
        total = len(batches)

        for index, batch in enumerate(batches, start=1):
            self._transition(SchedulerState.BATCH_RUNNING)
            results = await asyncio.gather(*(handler(task) for task in batch), return_exceptions=True)
            for task, result in zip(batch, results):
                if isinstance(result, BaseException):
                    logger.error(f"Task {task} failed: {result!r}", exc_info=result)

            logger.debug(f"EVENT: {BatchSettled(batch_number=index, total_batches=total, size=len(batch))}")
            logger.info(f"Batch {index}/{total} processed")

            if index < total:
                self._transition(SchedulerState.BATCH_COOLDOWN)
                await self._sleep(self.policy.cooldown_s)

        self._transition(SchedulerState.DONE)
        return total
