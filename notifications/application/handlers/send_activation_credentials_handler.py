"""
SendActivationCredentialsHandler.

Handler for delivering POS login credentials to the license owner.
"""
import logging

from core.domain.exceptions import LicenseNotFoundError, MissingFieldError
from licenses.domain.license_key import normalize_license_key
from licenses.ports.license_repository import LicenseRepository
from notifications.application.commands.send_activation_credentials import (
    SendActivationCredentialsCommand,
)
from notifications.application.dto.notification_dto import NotificationResultDTO
from notifications.application.services.license_notifier import LicenseNotifier

logger = logging.getLogger(__name__)


class SendActivationCredentialsHandler:
    """Handler for SendActivationCredentialsCommand."""

    def __init__(self, license_repository: LicenseRepository, notifier: LicenseNotifier):
        """Initialize handler with the license store and notifier."""
        self.license_repository = license_repository
        self.notifier = notifier

    async def handle(self, command: SendActivationCredentialsCommand) -> NotificationResultDTO:
        """
        Handle send credentials command.

        The credentials are already stored on the device, so a failed
        delivery is reported rather than raised.

        Args:
            command: SendActivationCredentialsCommand

        Returns:
            NotificationResultDTO

        Raises:
            MissingFieldError: If key, username or password is missing
            LicenseNotFoundError: If the key is unknown
        """
        if not command.license_key or not command.username or not command.password:
            raise MissingFieldError("License key, username and password are required")

        license = await self.license_repository.find_by_key(
            normalize_license_key(command.license_key)
        )
        if license is None:
            raise LicenseNotFoundError()
        if not license.customer_phone:
            raise MissingFieldError("Customer phone is required to send credentials")

        sent = await self.notifier.send_activation_credentials(
            license, command.username, command.password
        )
        if not sent:
            logger.warning(
                "Credentials for %s... could not be delivered", license.license_key[:8]
            )
            return NotificationResultDTO(
                sent=False,
                message="Credentials saved, but the message could not be sent.",
                phone=license.customer_phone,
            )
        return NotificationResultDTO(
            sent=True, message="Credentials sent successfully", phone=license.customer_phone
        )
