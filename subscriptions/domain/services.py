"""
Subscription domain services.

Renewal always works on the license's most recent subscription row,
extending it in place. New rows are only created when a license has no
subscription at all or when an administrator replaces the active one.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from django.conf import settings
from django.utils import timezone

from core.domain.exceptions import (
    LicenseNotFoundError,
    LicenseRevokedError,
    SubscriptionNotFoundError,
)
from core.domain.time_windows import end_of_day, paid_window, renewal_window
from core.domain.value_objects import LicenseStatus
from core.infrastructure.concurrency import count_successes, run_bounded
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository
from subscriptions.domain.subscription import Subscription
from subscriptions.ports.subscription_repository import SubscriptionRepository

logger = logging.getLogger(__name__)


def annual_fee_default() -> Decimal:
    return Decimal(str(getattr(settings, "LICENSE_ANNUAL_PRICE", 50)))


class SubscriptionManager:
    """Domain service for subscription creation, renewal and expiry."""

    def __init__(
        self,
        subscription_repository: SubscriptionRepository,
        license_repository: LicenseRepository,
        lifecycle_manager=None,
        notifier=None,
    ):
        """
        Initialize the manager.

        Args:
            subscription_repository: Subscription store
            license_repository: License store used for cache invalidation
            lifecycle_manager: LicenseLifecycleManager run after the expiry sweep
            notifier: Optional LicenseNotifier for expiration notices
        """
        self.subscription_repository = subscription_repository
        self.license_repository = license_repository
        self.lifecycle_manager = lifecycle_manager
        self.notifier = notifier

    async def _load_license(self, license_id: int) -> License:
        license = await self.license_repository.find_by_id(license_id)
        if license is None:
            raise LicenseNotFoundError(f"License {license_id} not found")
        return license

    async def _reopen_license(self, license: License) -> None:
        """An expired license becomes usable again once a window is active."""
        await self.license_repository.invalidate(license)
        if license.status == LicenseStatus.EXPIRED:
            # Reload: saving the subscription refreshed the license's window copy.
            current = await self._load_license(license.id)
            await self.license_repository.save(current.with_changes(status=LicenseStatus.ACTIVE))
            await self.license_repository.invalidate(current)

    async def find_for_license(self, license_id: int) -> List[Subscription]:
        """All subscriptions of a license, newest first."""
        return await self.subscription_repository.list_for_license(license_id)

    async def renew(
        self,
        subscription_id: int,
        extend_from_now: bool = False,
        as_of: Optional[datetime] = None,
        annual_fee: Optional[Decimal] = None,
    ) -> Subscription:
        """
        Extend a subscription by one year.

        Args:
            subscription_id: Subscription to extend
            extend_from_now: Start the new year now instead of at the current end date
            as_of: Instant treated as now
            annual_fee: Fee for the new year (defaults to the configured annual price)

        Returns:
            Renewed Subscription entity

        Raises:
            SubscriptionNotFoundError: If the subscription does not exist
            LicenseRevokedError: If the owning license has been revoked
            InvalidSubscriptionStatusError: If the subscription was cancelled
        """
        subscription = await self.subscription_repository.find_by_id(subscription_id)
        if subscription is None:
            raise SubscriptionNotFoundError(f"Subscription {subscription_id} not found")

        license = await self._load_license(subscription.license_id)
        if license.status == LicenseStatus.REVOKED:
            raise LicenseRevokedError("Cannot renew a subscription of a revoked license")

        start = (as_of or timezone.now()) if extend_from_now else subscription.end_date
        renewed = subscription.renew(
            start_date=start,
            end_date=renewal_window(start),
            annual_fee=annual_fee if annual_fee is not None else annual_fee_default(),
        )
        saved = await self.subscription_repository.save(renewed)
        await self._reopen_license(license)

        logger.info(
            "Subscription renewed: %s until %s",
            saved.id,
            saved.end_date.isoformat(),
            extra={"license_id": saved.license_id, "extend_from_now": extend_from_now},
        )
        return saved

    async def create(
        self,
        license_id: int,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        annual_fee: Optional[Decimal] = None,
    ) -> Subscription:
        """
        Create a subscription, cancelling any currently active one.

        Defaults to a fresh paid window starting now.

        Raises:
            LicenseNotFoundError: If the license does not exist
            LicenseRevokedError: If the license has been revoked
        """
        license = await self._load_license(license_id)
        if license.status == LicenseStatus.REVOKED:
            raise LicenseRevokedError("Cannot add a subscription to a revoked license")

        now = timezone.now()
        start = start_date or now
        end = end_of_day(end_date) if end_date is not None else paid_window(start)
        subscription = Subscription.create(
            license_id=license_id,
            start_date=start,
            end_date=end,
            annual_fee=annual_fee if annual_fee is not None else annual_fee_default(),
        )
        saved = await self.subscription_repository.replace_active(subscription, cancelled_at=now)
        await self._reopen_license(license)
        logger.info("Subscription created: %s for license %s", saved.id, license_id)
        return saved

    async def update_expired_subscriptions(
        self,
        now: Optional[datetime] = None,
        limit: int = 5,
        timeout: Optional[float] = None,
    ) -> int:
        """
        Expire subscriptions whose end date has passed.

        Owners with a phone get a best-effort expiration notice, then the
        license sweep runs so license status converges in the same cycle.

        Returns:
            Number of subscriptions expired
        """
        now = now or timezone.now()
        lapsed = await self.subscription_repository.find_lapsed(now)
        expired = await self.subscription_repository.expire([sub.id for _, sub in lapsed])
        logger.info("Expired %s subscription(s)", expired)

        if expired and self.notifier is not None:
            tasks = [
                (lambda lic=lic, sub=sub: self.notifier.send_expiration_notice(lic, sub.end_date))
                for lic, sub in lapsed
                if lic.customer_phone
            ]
            outcomes = await run_bounded(tasks, limit, timeout)
            logger.info(
                "Sent %s of %s subscription expiration notice(s)",
                count_successes(outcomes),
                len(tasks),
            )

        # Licenses can also lapse through paths that skip this sweep.
        if self.lifecycle_manager is not None:
            await self.lifecycle_manager.update_expired_licenses(now)
        elif expired:
            await self.license_repository.invalidate_all()
        return expired
