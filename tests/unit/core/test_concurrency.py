"""
Unit tests for the bounded task runner and job locks.
"""
import asyncio
import threading

import pytest

from core.domain.exceptions import JobAlreadyRunningError
from core.infrastructure.concurrency import TaskOutcome, count_successes, run_bounded
from core.infrastructure.locks import is_running, single_flight


@pytest.mark.asyncio
class TestRunBounded:
    """Tests for run_bounded."""

    async def test_empty_batch(self):
        assert await run_bounded([], limit=3) == []

    async def test_invalid_limit(self):
        with pytest.raises(ValueError):
            await run_bounded([lambda: asyncio.sleep(0)], limit=0)

    async def test_results_in_input_order(self):
        """Test outcomes line up with tasks even when they finish out of order."""

        async def work(value, delay):
            await asyncio.sleep(delay)
            return value

        tasks = [
            lambda: work("slow", 0.05),
            lambda: work("fast", 0),
            lambda: work("medium", 0.01),
        ]
        outcomes = await run_bounded(tasks, limit=3)

        assert [outcome.result for outcome in outcomes] == ["slow", "fast", "medium"]
        assert all(outcome.success for outcome in outcomes)

    async def test_concurrency_ceiling(self):
        """Test no more than ``limit`` tasks run at once."""
        running = {"now": 0, "peak": 0}

        async def work():
            running["now"] += 1
            running["peak"] = max(running["peak"], running["now"])
            await asyncio.sleep(0.01)
            running["now"] -= 1
            return True

        outcomes = await run_bounded([work for _ in range(10)], limit=3)

        assert running["peak"] == 3
        assert count_successes(outcomes) == 10

    async def test_failure_does_not_abort_batch(self):
        async def boom():
            raise RuntimeError("boom")

        async def ok():
            return True

        outcomes = await run_bounded([boom, ok], limit=1)

        assert outcomes[0].success is False
        assert isinstance(outcomes[0].error, RuntimeError)
        assert outcomes[1].success is True

    async def test_timeout_cancels_pending(self):
        """Test tasks still running at the deadline are reported as timed out."""

        async def quick():
            return True

        async def stuck():
            await asyncio.sleep(10)
            return True

        outcomes = await run_bounded([quick, stuck], limit=2, timeout=0.05)

        assert outcomes[0].success is True
        assert outcomes[1].success is False
        assert isinstance(outcomes[1].error, asyncio.TimeoutError)


class TestCountSuccesses:
    """Tests for count_successes."""

    def test_falsy_results_are_not_successes(self):
        outcomes = [
            TaskOutcome(success=True, result=True),
            TaskOutcome(success=True, result=False),
            TaskOutcome(success=False, error=RuntimeError()),
        ]
        assert count_successes(outcomes) == 1


class TestSingleFlight:
    """Tests for single_flight job locks."""

    def test_second_entry_is_rejected(self):
        with single_flight("test-job"):
            assert is_running("test-job")
            with pytest.raises(JobAlreadyRunningError):
                with single_flight("test-job"):
                    pass
        assert not is_running("test-job")

    def test_different_jobs_do_not_block(self):
        with single_flight("job-a"):
            with single_flight("job-b"):
                assert is_running("job-a") and is_running("job-b")

    def test_released_on_error(self):
        with pytest.raises(RuntimeError):
            with single_flight("failing-job"):
                raise RuntimeError("boom")
        assert not is_running("failing-job")

    @pytest.mark.asyncio
    async def test_held_by_other_thread_rejects_without_waiting(self):
        """Test a coroutine hitting a lock held by a worker thread fails at once."""
        held = threading.Event()
        release = threading.Event()

        def hold():
            with single_flight("threaded-job"):
                held.set()
                release.wait(5)

        worker = threading.Thread(target=hold)
        worker.start()
        assert held.wait(5)

        async def enter():
            with single_flight("threaded-job"):
                pass

        try:
            with pytest.raises(JobAlreadyRunningError):
                await asyncio.wait_for(enter(), timeout=1)
        finally:
            release.set()
            worker.join(5)
        assert not is_running("threaded-job")
