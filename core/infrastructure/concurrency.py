"""
Bounded task runner.

Runs a batch of independent coroutines with a concurrency ceiling and
collects one outcome per task. A failing task never aborts the batch.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Sequence

logger = logging.getLogger(__name__)

Task = Callable[[], Awaitable[Any]]


@dataclass
class TaskOutcome:
    """Result of one task in a bounded batch."""

    success: bool
    result: Any = None
    error: Optional[BaseException] = None


async def run_bounded(
    tasks: Sequence[Task],
    limit: int,
    timeout: Optional[float] = None,
) -> List[TaskOutcome]:
    """
    Run zero-argument async callables with at most ``limit`` in flight.

    Args:
        tasks: Callables returning awaitables
        limit: Maximum number of tasks running at once
        timeout: Wall-clock budget in seconds for the whole batch

    Returns:
        One TaskOutcome per task, in input order. Tasks still running
        when the budget runs out are cancelled and reported as failed
        with an asyncio.TimeoutError.
    """
    if limit < 1:
        raise ValueError("Concurrency limit must be at least 1")
    if not tasks:
        return []

    semaphore = asyncio.Semaphore(limit)

    async def run_one(index: int, task: Task) -> TaskOutcome:
        async with semaphore:
            try:
                return TaskOutcome(success=True, result=await task())
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.warning("Task %s failed: %s", index, e, exc_info=True)
                return TaskOutcome(success=False, error=e)

    futures = [asyncio.ensure_future(run_one(i, task)) for i, task in enumerate(tasks)]
    _, pending = await asyncio.wait(futures, timeout=timeout)

    if pending:
        logger.warning(
            "Batch deadline of %ss reached; cancelling %s task(s)", timeout, len(pending)
        )
        for future in pending:
            future.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    outcomes = []
    for future in futures:
        if future in pending:
            outcomes.append(
                TaskOutcome(
                    success=False,
                    error=asyncio.TimeoutError("Task cancelled at batch deadline"),
                )
            )
        else:
            outcomes.append(future.result())
    return outcomes


def count_successes(outcomes: Sequence[TaskOutcome]) -> int:
    """Count outcomes that succeeded with a truthy result."""
    return sum(1 for outcome in outcomes if outcome.success and outcome.result)
