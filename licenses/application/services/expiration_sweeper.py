"""
Expiration and notification sweeper.

Scheduled jobs that converge subscription and license status and warn
owners before their subscription ends. Each job runs under its own
single-flight lock so overlapping schedules skip instead of doubling up.
"""
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from django.conf import settings
from django.utils import timezone

from core.domain.time_windows import days_remaining, end_of_day
from core.infrastructure.concurrency import count_successes, run_bounded
from core.infrastructure.locks import single_flight
from core.metrics import sweep_duration_seconds
from licenses.domain.license import License
from licenses.domain.services import LicenseLifecycleManager
from licenses.ports.license_repository import LicenseRepository
from subscriptions.domain.services import SubscriptionManager
from subscriptions.domain.subscription import Subscription
from subscriptions.ports.subscription_repository import SubscriptionRepository

logger = logging.getLogger(__name__)

SUBSCRIPTION_JOB = "expire_subscriptions"
TRIAL_JOB = "expire_trials"
WARNING_JOB = "expiration_warnings"


@dataclass
class SweepReport:
    """What one sweep run found and changed."""

    job: str
    processed: int = 0
    notified: int = 0
    dry_run: bool = False


class ExpirationSweeper:
    """
    Runs the three scheduled sweeps.

    Order matters on the daily schedule: subscriptions first, then trials,
    then warnings, so warnings never go to licenses that just expired.
    """

    def __init__(
        self,
        subscription_manager: SubscriptionManager,
        lifecycle_manager: LicenseLifecycleManager,
        license_repository: LicenseRepository,
        subscription_repository: SubscriptionRepository,
        notifier=None,
        warning_days: Optional[Sequence[int]] = None,
        concurrency: Optional[int] = None,
        batch_timeout: Optional[float] = None,
    ):
        """
        Initialize the sweeper.

        Args:
            subscription_manager: Expires lapsed subscriptions
            lifecycle_manager: Expires licenses and trials
            license_repository: Used for dry-run candidate counts
            subscription_repository: Source of expiring subscriptions
            notifier: LicenseNotifier; warnings are skipped without one
            warning_days: Days-remaining values that trigger a warning
            concurrency: Maximum notifications in flight
            batch_timeout: Wall-clock budget per notification batch
        """
        self.subscription_manager = subscription_manager
        self.lifecycle_manager = lifecycle_manager
        self.license_repository = license_repository
        self.subscription_repository = subscription_repository
        self.notifier = notifier
        self.warning_days = tuple(
            warning_days or getattr(settings, "EXPIRATION_WARNING_DAYS", (3, 1))
        )
        self.concurrency = concurrency or getattr(settings, "NOTIFICATION_CONCURRENCY", 5)
        self.batch_timeout = batch_timeout or getattr(settings, "NOTIFICATION_BATCH_TIMEOUT", 300)

    async def run_subscription_sweep(
        self, now: Optional[datetime] = None, dry_run: bool = False
    ) -> SweepReport:
        """
        Expire lapsed subscriptions, notify owners and converge license status.

        Raises:
            JobAlreadyRunningError: If this sweep is already running
        """
        now = now or timezone.now()
        with single_flight(SUBSCRIPTION_JOB):
            started = time.monotonic()
            if dry_run:
                lapsed = await self.subscription_repository.find_lapsed(now)
                report = SweepReport(SUBSCRIPTION_JOB, processed=len(lapsed), dry_run=True)
            else:
                expired = await self.subscription_manager.update_expired_subscriptions(
                    now, limit=self.concurrency, timeout=self.batch_timeout
                )
                report = SweepReport(SUBSCRIPTION_JOB, processed=expired)
            sweep_duration_seconds.labels(job=SUBSCRIPTION_JOB).observe(time.monotonic() - started)
        logger.info("Subscription sweep finished: %s", report)
        return report

    async def run_trial_sweep(
        self, now: Optional[datetime] = None, dry_run: bool = False
    ) -> SweepReport:
        """
        Expire unpaid trials past their end date.

        Raises:
            JobAlreadyRunningError: If this sweep is already running
        """
        now = now or timezone.now()
        with single_flight(TRIAL_JOB):
            started = time.monotonic()
            if dry_run:
                trials = await self.license_repository.find_trials_to_expire(now)
                report = SweepReport(TRIAL_JOB, processed=len(trials), dry_run=True)
            else:
                expired = await self.lifecycle_manager.expire_free_trial_licenses(
                    now, limit=self.concurrency, timeout=self.batch_timeout
                )
                report = SweepReport(TRIAL_JOB, processed=expired)
            sweep_duration_seconds.labels(job=TRIAL_JOB).observe(time.monotonic() - started)
        logger.info("Trial sweep finished: %s", report)
        return report

    async def find_warning_candidates(
        self, now: Optional[datetime] = None
    ) -> List[Tuple[License, Subscription, int]]:
        """Active subscriptions ending in exactly one of the warning day counts."""
        now = now or timezone.now()
        horizon = end_of_day(now + timedelta(days=max(self.warning_days)))
        candidates = []
        for license, subscription in await self.subscription_repository.find_expiring(now, horizon):
            remaining = days_remaining(subscription.end_date, now)
            if remaining in self.warning_days:
                candidates.append((license, subscription, remaining))
        return candidates

    async def run_warning_sweep(
        self, now: Optional[datetime] = None, dry_run: bool = False
    ) -> SweepReport:
        """
        Warn owners whose subscription ends in 3 or 1 day(s).

        Delivery is best-effort: failures are logged and picked up again
        by the next day's run if still in range.

        Raises:
            JobAlreadyRunningError: If this sweep is already running
        """
        now = now or timezone.now()
        with single_flight(WARNING_JOB):
            started = time.monotonic()
            candidates = await self.find_warning_candidates(now)
            report = SweepReport(WARNING_JOB, processed=len(candidates), dry_run=dry_run)

            if candidates and not dry_run:
                if self.notifier is None:
                    logger.warning("No notifier configured; skipping %s warning(s)", len(candidates))
                else:
                    tasks = [
                        (lambda lic=lic, sub=sub, days=days: self.notifier.send_expiration_warning(
                            lic, sub.end_date, days
                        ))
                        for lic, sub, days in candidates
                    ]
                    outcomes = await run_bounded(tasks, self.concurrency, self.batch_timeout)
                    report.notified = count_successes(outcomes)
                    for (lic, _, _), outcome in zip(candidates, outcomes):
                        if outcome.error is not None:
                            logger.error(
                                "Expiration warning for %s failed: %s",
                                lic.license_key,
                                outcome.error,
                            )
            sweep_duration_seconds.labels(job=WARNING_JOB).observe(time.monotonic() - started)
        logger.info("Warning sweep finished: %s", report)
        return report

    async def run_all(
        self, now: Optional[datetime] = None, dry_run: bool = False
    ) -> List[SweepReport]:
        """Run the three sweeps in schedule order."""
        return [
            await self.run_subscription_sweep(now, dry_run),
            await self.run_trial_sweep(now, dry_run),
            await self.run_warning_sweep(now, dry_run),
        ]
