"""
License notifier.

Renders license messages and hands them to the configured channel.
Delivery is advisory: failures are logged and reported as False, never
raised to the licensing operation that triggered them.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from asgiref.sync import sync_to_async
from django.conf import settings

from core.domain.value_objects import PhoneNumber
from core.metrics import notifications_total
from licenses.domain.license import License
from notifications.domain.messages import (
    Pricing,
    render_activation_credentials,
    render_expiration_notice,
    render_expiration_warning,
    render_license_details,
)
from notifications.ports.notification_channel import (
    ContactVerificationRepository,
    NotificationChannel,
)

logger = logging.getLogger(__name__)


def default_pricing() -> Pricing:
    """Prices from settings."""
    return Pricing(
        initial_price=Decimal(str(getattr(settings, "LICENSE_INITIAL_PRICE", 350))),
        annual_price=Decimal(str(getattr(settings, "LICENSE_ANNUAL_PRICE", 50))),
        price_per_seat=Decimal(str(getattr(settings, "LICENSE_PRICE_PER_SEAT", 25))),
    )


class LicenseNotifier:
    """Sends license messages to verified customer phones."""

    def __init__(
        self,
        channel: NotificationChannel,
        verification_repository: ContactVerificationRepository,
        product_name: Optional[str] = None,
        pricing: Optional[Pricing] = None,
    ):
        self.channel = channel
        self.verification_repository = verification_repository
        self.product_name = product_name or getattr(settings, "LICENSE_PRODUCT_NAME", "POS")
        self.pricing = pricing or default_pricing()

    async def _deliver(self, kind: str, phone: Optional[str], message: str) -> bool:
        """
        Send ``message`` to ``phone`` if it is verified.

        Returns:
            True only if the channel accepted the message
        """
        if not phone:
            notifications_total.labels(kind=kind, outcome="no_contact").inc()
            return False

        try:
            destination = PhoneNumber.parse(phone).value
        except ValueError:
            logger.warning("Skipping %s notification: invalid phone %r", kind, phone)
            notifications_total.labels(kind=kind, outcome="invalid_contact").inc()
            return False

        if not await self.verification_repository.is_verified(destination):
            logger.info("Skipping %s notification: %s is not verified", kind, destination)
            notifications_total.labels(kind=kind, outcome="unverified").inc()
            return False

        try:
            sent = await sync_to_async(self.channel.send, thread_sensitive=False)(
                destination, message
            )
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error sending %s notification to %s: %s", kind, destination, e, exc_info=True)
            notifications_total.labels(kind=kind, outcome="error").inc()
            return False

        notifications_total.labels(kind=kind, outcome="sent" if sent else "failed").inc()
        return bool(sent)

    async def send_license_details(self, license: License) -> bool:
        message = render_license_details(
            product=self.product_name,
            customer_name=license.customer_name,
            license_key=license.license_key,
            location_name=license.location_name,
            location_address=license.location_address,
            is_free_trial=license.is_free_trial,
            expires_at=license.end_date,
        )
        return await self._deliver("license_details", license.customer_phone, message)

    async def send_activation_credentials(
        self, license: License, username: str, password: str
    ) -> bool:
        message = render_activation_credentials(
            product=self.product_name,
            customer_name=license.customer_name,
            username=username,
            password=password,
            license_key=license.license_key,
            location_name=license.location_name or "N/A",
            location_address=license.location_address or "N/A",
        )
        return await self._deliver("activation_credentials", license.customer_phone, message)

    async def send_expiration_warning(
        self, license: License, expiration_date: datetime, days_remaining: int
    ) -> bool:
        message = render_expiration_warning(
            product=self.product_name,
            customer_name=license.customer_name,
            license_key=license.license_key,
            location_name=license.location_name,
            expiration_date=expiration_date,
            days_remaining=days_remaining,
            is_free_trial=license.is_free_trial,
            pricing=self.pricing,
        )
        return await self._deliver("expiration_warning", license.customer_phone, message)

    async def send_expiration_notice(self, license: License, expiration_date: datetime) -> bool:
        message = render_expiration_notice(
            product=self.product_name,
            customer_name=license.customer_name,
            license_key=license.license_key,
            location_name=license.location_name,
            expiration_date=expiration_date,
            is_free_trial=license.is_free_trial,
            pricing=self.pricing,
        )
        return await self._deliver("expiration_notice", license.customer_phone, message)
