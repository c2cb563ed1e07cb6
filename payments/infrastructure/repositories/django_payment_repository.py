"""
Django implementation of PaymentRepository port.
"""
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db.models import F

from core.domain.exceptions import LicenseNotFoundError
from core.domain.value_objects import PaymentType
from core.infrastructure.database import atomic_async
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from payments.domain.payment import Payment
from payments.infrastructure.models import Payment as PaymentModel
from payments.ports.payment_repository import PaymentRepository
from subscriptions.domain.subscription import Subscription
from subscriptions.infrastructure.repositories.django_subscription_repository import (
    save_subscription,
)


class DjangoPaymentRepository(PaymentRepository):
    """Django ORM implementation of PaymentRepository."""

    def _to_domain(self, model: PaymentModel) -> Payment:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Payment model

        Returns:
            Payment domain entity
        """
        return Payment(
            id=model.id,
            license_id=model.license_id,
            amount=model.amount,
            payment_date=model.payment_date,
            is_annual_subscription=model.is_annual_subscription,
            payment_type=PaymentType(model.payment_type),
            additional_users=model.additional_users,
        )

    @sync_to_async
    def list_for_license(self, license_id: int) -> List[Payment]:
        models = PaymentModel.objects.filter(license_id=license_id)
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def has_initial_payment(self, license_id: int) -> bool:
        return PaymentModel.objects.filter(
            license_id=license_id, payment_type=PaymentType.INITIAL.value
        ).exists()

    @atomic_async
    def record(
        self,
        payment: Payment,
        license: License,
        subscription: Optional[Subscription],
        seat_limit_increase: int = 0,
    ) -> Payment:
        """
        Record a payment and apply its effects in one transaction.

        Returns:
            Saved Payment entity
        """
        updated = LicenseModel.objects.filter(id=license.id).update(
            is_free_trial=license.is_free_trial,
            free_trial_end_date=license.free_trial_end_date,
            status=license.status.value,
            initial_price=license.initial_price,
            seat_limit=F("seat_limit") + seat_limit_increase,
            updated_at=license.updated_at,
        )
        if not updated:
            raise LicenseNotFoundError()

        model = PaymentModel.objects.create(
            license_id=payment.license_id,
            amount=payment.amount,
            payment_date=payment.payment_date,
            is_annual_subscription=payment.is_annual_subscription,
            payment_type=payment.payment_type.value,
            additional_users=payment.additional_users,
        )
        if subscription is not None:
            save_subscription(subscription)
        return self._to_domain(model)
