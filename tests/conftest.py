"""
Pytest configuration and shared fixtures.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from asgiref.sync import async_to_sync
from django.utils import timezone

from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from core.infrastructure.cache_adapters import DjangoCacheAdapter
from core.infrastructure.events import InMemoryEventBus
from licenses.domain.license import License
from licenses.domain.license_key import generate_license_key
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from payments.infrastructure.repositories.django_payment_repository import DjangoPaymentRepository
from subscriptions.infrastructure.repositories.django_subscription_repository import (
    DjangoSubscriptionRepository,
)
from tests.fakes import RecordingChannel


@pytest.fixture
def license_repository():
    """Fixture for LicenseRepository."""
    return DjangoLicenseRepository()


@pytest.fixture
def subscription_repository():
    """Fixture for SubscriptionRepository."""
    return DjangoSubscriptionRepository()


@pytest.fixture
def activation_repository():
    """Fixture for ActivationRepository."""
    return DjangoActivationRepository()


@pytest.fixture
def payment_repository():
    """Fixture for PaymentRepository."""
    return DjangoPaymentRepository()


@pytest.fixture
def cache():
    """Adapter over the emptied test cache so cached entities never leak between tests."""
    adapter = DjangoCacheAdapter()
    async_to_sync(adapter.flush)()
    return adapter


@pytest.fixture
def channel():
    """Fixture for a recording notification channel."""
    return RecordingChannel()


@pytest.fixture
def event_bus():
    """Fixture for an isolated event bus."""
    return InMemoryEventBus()


@pytest.fixture
def services(cache, channel, event_bus):
    """Fully wired service graph backed by the test database."""
    from PosLicenseService.services import build_services

    return build_services(cache=cache, channel=channel, event_bus=event_bus)


@pytest.fixture
def verify_phone(services):
    """Mark a phone as verified so notifications reach it."""

    async def verify(phone: str) -> None:
        await services.verification_repository.mark_verified(phone)

    return verify


@pytest.fixture
def make_license(services):
    """
    Factory creating licenses through the lifecycle manager.

    Each call gets a distinct location so the duplicate rule never trips.
    """
    counter = {"n": 0}

    async def make(**overrides) -> License:
        counter["n"] += 1
        values = {
            "customer_name": "Corner Grocery",
            "customer_phone": "+1 555 010 0000",
            "location_name": f"Branch {counter['n']}",
            "location_address": f"{counter['n']} Market Street",
        }
        values.update(overrides)
        return await services.lifecycle_manager.create(**values)

    return make


@pytest.fixture
def sample_license():
    """Fixture for an unsaved paid License entity."""
    start = timezone.now()
    return License.create(
        license_key=generate_license_key(),
        customer_name="Corner Grocery",
        customer_phone="+15550100000",
        location_name="Main Branch",
        location_address="1 Market Street",
        initial_price=Decimal("350"),
        price_per_seat=Decimal("25"),
        start_date=start,
        end_date=start + timedelta(days=364),
    )
