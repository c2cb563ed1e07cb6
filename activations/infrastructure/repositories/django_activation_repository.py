"""
Django implementation of ActivationRepository port.

This adapter converts between domain entities and Django ORM models.
"""
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from activations.domain.activation import Activation
from activations.infrastructure.models import Activation as ActivationModel
from activations.ports.activation_repository import ActivationRepository
from core.domain.exceptions import (
    ActivationNotFoundError,
    DeviceAlreadyBoundError,
    DuplicateActivationError,
)
from core.domain.value_objects import LicenseStatus
from core.infrastructure.database import atomic_async
from licenses.infrastructure.models import License as LicenseModel
from subscriptions.domain.subscription import Subscription
from subscriptions.infrastructure.repositories.django_subscription_repository import (
    save_subscription,
)


class DjangoActivationRepository(ActivationRepository):
    """
    Django ORM implementation of ActivationRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Translates the unique (license, hardware) constraint into a domain error
    3. Keeps seat-count side effects in the same transaction as the binding
    """

    def _to_domain(self, model: ActivationModel) -> Activation:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Activation model

        Returns:
            Activation domain entity
        """
        return Activation(
            id=model.id,
            license_id=model.license_id,
            hardware_id=model.hardware_id,
            machine_name=model.machine_name,
            activated_at=model.activated_at,
            last_validation=model.last_validation,
            is_active=model.is_active,
        )

    def _write(self, activation: Activation) -> ActivationModel:
        """Insert or update; runs inside its own savepoint."""
        if activation.id is None:
            model = ActivationModel(
                license_id=activation.license_id, hardware_id=activation.hardware_id
            )
        else:
            try:
                model = ActivationModel.objects.get(id=activation.id)
            except ActivationModel.DoesNotExist as e:
                raise ActivationNotFoundError() from e

        model.machine_name = activation.machine_name
        model.activated_at = activation.activated_at
        model.last_validation = activation.last_validation
        model.is_active = activation.is_active
        try:
            with transaction.atomic():
                model.save()
        except IntegrityError as e:
            raise DuplicateActivationError() from e
        return model

    @sync_to_async
    def save(self, activation: Activation) -> Activation:
        """
        Save an activation entity.

        Args:
            activation: Activation entity to save

        Returns:
            Saved activation entity
        """
        return self._to_domain(self._write(activation))

    @sync_to_async
    def find_by_id(self, activation_id: int) -> Optional[Activation]:
        try:
            return self._to_domain(ActivationModel.objects.get(id=activation_id))
        except ActivationModel.DoesNotExist:
            return None

    @sync_to_async
    def find_by_license_and_hardware(
        self, license_id: int, hardware_id: str
    ) -> Optional[Activation]:
        try:
            model = ActivationModel.objects.get(license_id=license_id, hardware_id=hardware_id)
            return self._to_domain(model)
        except ActivationModel.DoesNotExist:
            return None

    @sync_to_async
    def list_for_license(self, license_id: int) -> List[Activation]:
        """
        Find all activations for a license.

        Args:
            license_id: License id

        Returns:
            List of Activation entities
        """
        models = ActivationModel.objects.filter(license_id=license_id)
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def count_active(self) -> int:
        return ActivationModel.objects.filter(is_active=True).count()

    @atomic_async
    def bind(
        self,
        activation: Activation,
        claim_first_seat: bool,
        subscription: Optional[Subscription] = None,
        lapsed: Optional[Subscription] = None,
    ) -> Activation:
        bound_elsewhere = (
            ActivationModel.objects.filter(hardware_id=activation.hardware_id, is_active=True)
            .exclude(license_id=activation.license_id)
            .exists()
        )
        if bound_elsewhere:
            raise DeviceAlreadyBoundError()

        model = self._write(activation)
        if claim_first_seat:
            LicenseModel.objects.filter(id=activation.license_id, seat_count=0).update(
                seat_count=1
            )
        if lapsed is not None:
            save_subscription(lapsed)
        if subscription is not None:
            save_subscription(subscription)
            LicenseModel.objects.filter(
                id=activation.license_id, status=LicenseStatus.EXPIRED.value
            ).update(status=LicenseStatus.ACTIVE.value)
        return self._to_domain(model)

    @atomic_async
    def roll_back(self, activation: Activation) -> bool:
        updated = ActivationModel.objects.filter(id=activation.id, is_active=True).update(
            is_active=False
        )
        if not updated:
            raise ActivationNotFoundError("No active activation found to roll back")
        reset = LicenseModel.objects.filter(
            id=activation.license_id, seat_count__lte=1
        ).update(seat_count=0)
        return bool(reset)

    @sync_to_async
    def deactivate_all_for_license(self, license_id: int) -> int:
        return ActivationModel.objects.filter(license_id=license_id, is_active=True).update(
            is_active=False
        )
