"""
Celery tasks for background processing.

Tasks for the scheduled expiration and notification sweeps.
"""
import asyncio
import logging
from typing import Callable, Dict, List, Optional

from PosLicenseService.celery import app

from core.domain.exceptions import JobAlreadyRunningError

logger = logging.getLogger(__name__)


def _run_sweep(job: str, run: Callable) -> Optional[Dict]:
    """Run one sweep coroutine; an overlapping run is logged and skipped."""
    from PosLicenseService.services import build_services

    sweeper = build_services().sweeper
    try:
        report = asyncio.run(run(sweeper))
    except JobAlreadyRunningError as e:
        logger.warning("Skipping %s: %s", job, e.message)
        return None
    return {"job": report.job, "processed": report.processed, "notified": report.notified}


@app.task
def expire_subscriptions_task() -> Optional[Dict]:
    """Expire lapsed subscriptions and converge license status."""
    return _run_sweep("subscriptions", lambda sweeper: sweeper.run_subscription_sweep())


@app.task
def expire_trials_task() -> Optional[Dict]:
    """Expire unpaid free trials past their end date."""
    return _run_sweep("trials", lambda sweeper: sweeper.run_trial_sweep())


@app.task
def send_expiration_warnings_task() -> Optional[Dict]:
    """Warn owners whose subscription ends in 3 or 1 day(s)."""
    return _run_sweep("warnings", lambda sweeper: sweeper.run_warning_sweep())


@app.task
def run_startup_sweeps_task() -> List[Optional[Dict]]:
    """
    Catch-up run of every sweep in schedule order.

    A failing sweep does not stop the ones after it.
    """
    results = []
    for task in (expire_subscriptions_task, expire_trials_task, send_expiration_warnings_task):
        try:
            results.append(task())
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Startup sweep %s failed: %s", task.name, e, exc_info=True)
            results.append(None)
    return results
