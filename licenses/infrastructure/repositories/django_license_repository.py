"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
"""
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from asgiref.sync import sync_to_async
from django.db import IntegrityError
from django.db.models import Count, Exists, F, OuterRef, Q
from django.utils import timezone

from activations.infrastructure.models import Activation as ActivationModel
from core.domain.exceptions import ConflictError, LicenseNotFoundError
from core.domain.value_objects import LicenseStatus, SubscriptionStatus
from core.infrastructure.database import atomic_async
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from licenses.ports.license_repository import LicenseRepository
from payments.infrastructure.models import Payment as PaymentModel
from subscriptions.infrastructure.models import Subscription as SubscriptionModel

OPEN_SUBSCRIPTION_STATUSES = [
    SubscriptionStatus.ACTIVE.value,
    SubscriptionStatus.GRACE_PERIOD.value,
]
CLOSED_LICENSE_STATUSES = [LicenseStatus.EXPIRED.value, LicenseStatus.REVOKED.value]

# Columns an admin edit may touch; seat_count only moves through the
# dedicated atomic seat operations.
EDITABLE_FIELDS = [
    "customer_name",
    "customer_phone",
    "contact_key",
    "status",
    "is_free_trial",
    "free_trial_end_date",
    "start_date",
    "end_date",
    "seat_limit",
    "location_name",
    "location_key",
    "location_address",
    "initial_price",
    "price_per_seat",
    "product_tag",
    "updated_at",
]


def license_to_domain(model: LicenseModel) -> License:
    """
    Convert Django model to domain entity.

    Args:
        model: Django License model

    Returns:
        License domain entity
    """
    return License(
        id=model.id,
        license_key=model.license_key,
        customer_name=model.customer_name,
        customer_phone=model.customer_phone,
        status=LicenseStatus(model.status),
        is_free_trial=model.is_free_trial,
        free_trial_end_date=model.free_trial_end_date,
        start_date=model.start_date,
        end_date=model.end_date,
        seat_count=model.seat_count,
        seat_limit=model.seat_limit,
        location_name=model.location_name,
        location_address=model.location_address,
        initial_price=model.initial_price,
        price_per_seat=model.price_per_seat,
        product_tag=model.product_tag,
        purchase_date=model.purchase_date,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def apply_license_fields(model: LicenseModel, license: License) -> LicenseModel:
    """Copy the mutable entity fields onto a model instance."""
    model.customer_name = license.customer_name
    model.customer_phone = license.customer_phone
    model.status = license.status.value
    model.is_free_trial = license.is_free_trial
    model.free_trial_end_date = license.free_trial_end_date
    model.start_date = license.start_date
    model.end_date = license.end_date
    model.seat_limit = license.seat_limit
    model.location_name = license.location_name
    model.location_address = license.location_address
    model.initial_price = license.initial_price
    model.price_per_seat = license.price_per_seat
    model.product_tag = license.product_tag
    model.updated_at = license.updated_at
    return model


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Runs multi-row writes inside one database transaction
    3. Implements the sweep predicates as set-based queries
    """

    def _to_domain(self, model: LicenseModel) -> License:
        return license_to_domain(model)

    @sync_to_async
    def find_by_id(self, license_id: int) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License id

        Returns:
            License entity or None if not found
        """
        try:
            return self._to_domain(LicenseModel.objects.get(id=license_id))
        except LicenseModel.DoesNotExist:
            return None

    @sync_to_async
    def find_by_key(self, license_key: str) -> Optional[License]:
        """
        Find a license by key.

        Args:
            license_key: Normalized license key

        Returns:
            License entity or None if not found
        """
        try:
            return self._to_domain(LicenseModel.objects.get(license_key=license_key))
        except LicenseModel.DoesNotExist:
            return None

    @sync_to_async
    def key_exists(self, license_key: str) -> bool:
        return LicenseModel.objects.filter(license_key=license_key).exists()

    @sync_to_async
    def find_duplicate(self, contact: str, location_name: str) -> Optional[License]:
        model = LicenseModel.objects.filter(
            contact_key=contact, location_key=location_name
        ).first()
        return self._to_domain(model) if model else None

    @atomic_async
    def create(
        self,
        license: License,
        annual_fee: Decimal,
        initial_payment: Optional[Decimal],
    ) -> License:
        """
        Persist a new license, its first subscription and initial payment.

        Args:
            license: Unsaved License entity
            annual_fee: Fee recorded on the first subscription
            initial_payment: Amount of the initial payment, None for trials

        Returns:
            Saved License entity
        """
        model = apply_license_fields(LicenseModel(license_key=license.license_key), license)
        model.seat_count = license.seat_count
        model.purchase_date = license.purchase_date
        model.created_at = license.created_at
        try:
            model.save(force_insert=True)
        except IntegrityError as e:
            raise ConflictError("License key already exists", code="DUPLICATE_LICENSE_KEY") from e

        SubscriptionModel.objects.create(
            license=model,
            start_date=license.start_date,
            end_date=license.end_date,
            annual_fee=annual_fee,
            status=SubscriptionStatus.ACTIVE.value,
            grace_period_end=license.end_date,
            created_at=license.created_at,
            updated_at=license.created_at,
        )
        if initial_payment is not None:
            PaymentModel.objects.create(
                license=model,
                amount=initial_payment,
                payment_date=license.created_at,
                is_annual_subscription=False,
                payment_type="initial",
            )
        return self._to_domain(model)

    @sync_to_async
    def save(self, license: License) -> License:
        """
        Save an existing license entity.

        Args:
            license: License entity to save

        Returns:
            Saved license entity
        """
        try:
            model = LicenseModel.objects.get(id=license.id)
        except LicenseModel.DoesNotExist as e:
            raise LicenseNotFoundError() from e
        apply_license_fields(model, license)
        model.save(update_fields=EDITABLE_FIELDS)
        return self._to_domain(model)

    @atomic_async
    def revoke(
        self, license_id: int, revoked_at: datetime, edited: Optional[License] = None
    ) -> Tuple[int, int]:
        if edited is not None:
            try:
                model = LicenseModel.objects.get(id=license_id)
            except LicenseModel.DoesNotExist as e:
                raise LicenseNotFoundError() from e
            apply_license_fields(model, edited)
            model.save(update_fields=EDITABLE_FIELDS)

        updated = LicenseModel.objects.filter(id=license_id).update(
            status=LicenseStatus.REVOKED.value, updated_at=revoked_at
        )
        if not updated:
            raise LicenseNotFoundError()

        deactivated = ActivationModel.objects.filter(
            license_id=license_id, is_active=True
        ).update(is_active=False)
        cancelled = SubscriptionModel.objects.filter(
            license_id=license_id, status=SubscriptionStatus.ACTIVE.value
        ).update(
            status=SubscriptionStatus.CANCELLED.value,
            end_date=revoked_at,
            grace_period_end=revoked_at,
            updated_at=revoked_at,
        )
        return deactivated, cancelled

    @atomic_async
    def expire_lapsed(self, now: datetime) -> List[int]:
        live = SubscriptionModel.objects.filter(
            license=OuterRef("pk"),
            status=SubscriptionStatus.ACTIVE.value,
            end_date__gt=now,
        )
        lapsed = SubscriptionModel.objects.filter(license=OuterRef("pk")).filter(
            Q(status=SubscriptionStatus.EXPIRED.value) | Q(end_date__lte=now)
        )
        license_ids = list(
            LicenseModel.objects.filter(status=LicenseStatus.ACTIVE.value)
            .filter(~Exists(live), Exists(lapsed))
            .values_list("id", flat=True)
        )
        if license_ids:
            LicenseModel.objects.filter(
                id__in=license_ids, status=LicenseStatus.ACTIVE.value
            ).update(status=LicenseStatus.EXPIRED.value, updated_at=now)
        return license_ids

    @sync_to_async
    def find_trials_to_expire(self, now: datetime) -> List[License]:
        has_payment = PaymentModel.objects.filter(license=OuterRef("pk"))
        models = (
            LicenseModel.objects.filter(is_free_trial=True, free_trial_end_date__lt=now)
            .exclude(status__in=CLOSED_LICENSE_STATUSES)
            .filter(~Exists(has_payment))
        )
        return [self._to_domain(model) for model in models]

    @atomic_async
    def expire_trials(self, license_ids: List[int], now: datetime) -> int:
        if not license_ids:
            return 0
        expired = (
            LicenseModel.objects.filter(id__in=license_ids, is_free_trial=True)
            .exclude(status__in=CLOSED_LICENSE_STATUSES)
            .update(status=LicenseStatus.EXPIRED.value, updated_at=now)
        )
        SubscriptionModel.objects.filter(
            license_id__in=license_ids, status__in=OPEN_SUBSCRIPTION_STATUSES
        ).update(status=SubscriptionStatus.EXPIRED.value, updated_at=now)
        return expired

    @atomic_async
    def increment_seat_count(self, license_id: int) -> Optional[License]:
        updated = LicenseModel.objects.filter(
            id=license_id, seat_count__lt=F("seat_limit")
        ).update(seat_count=F("seat_count") + 1, updated_at=timezone.now())
        if not updated:
            return None
        return self._to_domain(LicenseModel.objects.get(id=license_id))

    @atomic_async
    def decrement_seat_count(self, license_id: int) -> Optional[License]:
        updated = LicenseModel.objects.filter(id=license_id, seat_count__gt=0).update(
            seat_count=F("seat_count") - 1, updated_at=timezone.now()
        )
        if not updated:
            return None
        return self._to_domain(LicenseModel.objects.get(id=license_id))

    @atomic_async
    def set_seat_count(self, license_id: int, seat_count: int) -> Optional[License]:
        updated = LicenseModel.objects.filter(id=license_id).update(
            seat_count=seat_count, updated_at=timezone.now()
        )
        if not updated:
            return None
        return self._to_domain(LicenseModel.objects.get(id=license_id))

    @sync_to_async
    def count_by_status(self) -> Dict[str, int]:
        counts = {status.value: 0 for status in LicenseStatus}
        for row in LicenseModel.objects.values("status").annotate(total=Count("id")):
            counts[row["status"]] = row["total"]
        return counts

    @sync_to_async
    def search(
        self, query: str, status: Optional[str] = None, limit: int = 50
    ) -> List[License]:
        models = LicenseModel.objects.all()
        if query:
            models = models.filter(
                Q(license_key__icontains=query)
                | Q(customer_name__icontains=query)
                | Q(customer_phone__icontains=query)
                | Q(location_name__icontains=query)
            )
        if status:
            models = models.filter(status=status)
        return [self._to_domain(model) for model in models[:limit]]
