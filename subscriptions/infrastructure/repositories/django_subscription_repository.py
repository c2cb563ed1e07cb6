"""
Django implementation of SubscriptionRepository port.
"""
from datetime import datetime
from typing import List, Optional, Tuple

from asgiref.sync import sync_to_async
from django.db import transaction

from core.domain.exceptions import SubscriptionNotFoundError
from core.domain.value_objects import LicenseStatus, SubscriptionStatus
from core.infrastructure.database import atomic_async
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from licenses.infrastructure.repositories.django_license_repository import license_to_domain
from subscriptions.domain.subscription import Subscription
from subscriptions.infrastructure.models import Subscription as SubscriptionModel
from subscriptions.ports.subscription_repository import SubscriptionRepository

OPEN_STATUSES = [SubscriptionStatus.ACTIVE.value, SubscriptionStatus.GRACE_PERIOD.value]


def subscription_to_domain(model: SubscriptionModel) -> Subscription:
    """
    Convert Django model to domain entity.

    Args:
        model: Django Subscription model

    Returns:
        Subscription domain entity
    """
    return Subscription(
        id=model.id,
        license_id=model.license_id,
        start_date=model.start_date,
        end_date=model.end_date,
        annual_fee=model.annual_fee,
        status=SubscriptionStatus(model.status),
        grace_period_end=model.grace_period_end,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def save_subscription(subscription: Subscription) -> SubscriptionModel:
    """
    Insert or update a subscription row.

    Must be called from synchronous code, typically inside a transaction.
    Active subscriptions also refresh the license's window copy.
    """
    if subscription.id is None:
        model = SubscriptionModel(license_id=subscription.license_id)
        model.created_at = subscription.created_at
    else:
        try:
            model = SubscriptionModel.objects.get(id=subscription.id)
        except SubscriptionModel.DoesNotExist as e:
            raise SubscriptionNotFoundError() from e

    model.start_date = subscription.start_date
    model.end_date = subscription.end_date
    model.annual_fee = subscription.annual_fee
    model.status = subscription.status.value
    model.grace_period_end = subscription.grace_period_end
    model.updated_at = subscription.updated_at
    model.save()

    if subscription.is_active:
        LicenseModel.objects.filter(id=subscription.license_id).update(
            start_date=subscription.start_date,
            end_date=subscription.end_date,
            updated_at=subscription.updated_at,
        )
    return model


class DjangoSubscriptionRepository(SubscriptionRepository):
    """Django ORM implementation of SubscriptionRepository."""

    def _to_domain(self, model: SubscriptionModel) -> Subscription:
        return subscription_to_domain(model)

    @sync_to_async
    def find_by_id(self, subscription_id: int) -> Optional[Subscription]:
        try:
            return self._to_domain(SubscriptionModel.objects.get(id=subscription_id))
        except SubscriptionModel.DoesNotExist:
            return None

    @sync_to_async
    def find_active_for_license(self, license_id: int) -> Optional[Subscription]:
        model = (
            SubscriptionModel.objects.filter(
                license_id=license_id, status=SubscriptionStatus.ACTIVE.value
            )
            .order_by("-end_date", "-id")
            .first()
        )
        return self._to_domain(model) if model else None

    @sync_to_async
    def find_latest_for_license(self, license_id: int) -> Optional[Subscription]:
        model = (
            SubscriptionModel.objects.filter(license_id=license_id)
            .order_by("-end_date", "-id")
            .first()
        )
        return self._to_domain(model) if model else None

    @sync_to_async
    def list_for_license(self, license_id: int) -> List[Subscription]:
        models = SubscriptionModel.objects.filter(license_id=license_id).order_by(
            "-end_date", "-id"
        )
        return [self._to_domain(model) for model in models]

    @atomic_async
    def save(self, subscription: Subscription) -> Subscription:
        """
        Save a subscription entity.

        Args:
            subscription: Subscription entity to save

        Returns:
            Saved subscription entity
        """
        return self._to_domain(save_subscription(subscription))

    @atomic_async
    def replace_active(
        self, subscription: Subscription, cancelled_at: datetime
    ) -> Subscription:
        SubscriptionModel.objects.filter(
            license_id=subscription.license_id, status=SubscriptionStatus.ACTIVE.value
        ).update(
            status=SubscriptionStatus.CANCELLED.value,
            end_date=cancelled_at,
            grace_period_end=cancelled_at,
            updated_at=cancelled_at,
        )
        return self._to_domain(save_subscription(subscription))

    @sync_to_async
    def find_lapsed(self, now: datetime) -> List[Tuple[License, Subscription]]:
        models = SubscriptionModel.objects.select_related("license").filter(
            status__in=OPEN_STATUSES, end_date__lt=now
        )
        return [(license_to_domain(model.license), self._to_domain(model)) for model in models]

    @sync_to_async
    def expire(self, subscription_ids: List[int]) -> int:
        if not subscription_ids:
            return 0
        with transaction.atomic():
            return SubscriptionModel.objects.filter(
                id__in=subscription_ids, status__in=OPEN_STATUSES
            ).update(status=SubscriptionStatus.EXPIRED.value)

    @sync_to_async
    def find_expiring(
        self, window_start: datetime, window_end: datetime
    ) -> List[Tuple[License, Subscription]]:
        models = (
            SubscriptionModel.objects.select_related("license")
            .filter(
                status=SubscriptionStatus.ACTIVE.value,
                end_date__gte=window_start,
                end_date__lte=window_end,
                license__status=LicenseStatus.ACTIVE.value,
                license__customer_phone__isnull=False,
            )
            .exclude(license__customer_phone="")
            .order_by("end_date")
        )
        return [(license_to_domain(model.license), self._to_domain(model)) for model in models]
