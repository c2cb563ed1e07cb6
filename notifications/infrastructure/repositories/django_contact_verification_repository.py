"""
Django implementation of ContactVerificationRepository port.
"""
from asgiref.sync import sync_to_async
from django.utils import timezone

from core.domain.value_objects import PhoneNumber
from notifications.infrastructure.models import ContactVerification
from notifications.ports.notification_channel import ContactVerificationRepository


class DjangoContactVerificationRepository(ContactVerificationRepository):
    """Django ORM implementation of ContactVerificationRepository."""

    @sync_to_async
    def is_verified(self, phone: str) -> bool:
        normalized = PhoneNumber.parse(phone).value
        return ContactVerification.objects.filter(phone=normalized, verified=True).exists()

    @sync_to_async
    def mark_verified(self, phone: str) -> None:
        normalized = PhoneNumber.parse(phone).value
        ContactVerification.objects.update_or_create(
            phone=normalized,
            defaults={"verified": True, "verified_at": timezone.now()},
        )
