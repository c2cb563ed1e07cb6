"""
ValidateLicenseHandler.

Handler for periodic license validation from an activated device.
"""
import logging

from activations.application.commands.validate_license import ValidateLicenseCommand
from activations.application.dto.activation_dto import ValidateLicenseResponseDTO
from activations.domain.services import ActivationManager
from core.domain.exceptions import DomainException, LicenseExpiredError

logger = logging.getLogger(__name__)


class ValidateLicenseHandler:
    """Handler for ValidateLicenseCommand."""

    def __init__(self, activation_manager: ActivationManager):
        """Initialize handler with the activation manager."""
        self.activation_manager = activation_manager

    async def handle(self, command: ValidateLicenseCommand) -> ValidateLicenseResponseDTO:
        """
        Handle validate license command.

        Args:
            command: ValidateLicenseCommand

        Returns:
            ValidateLicenseResponseDTO; expired licenses still report their end date
        """
        try:
            outcome = await self.activation_manager.validate(
                license_key=command.license_key,
                hardware_id=command.hardware_id,
                as_of=command.as_of,
                location_address=command.location_address,
            )
        except LicenseExpiredError as e:
            return ValidateLicenseResponseDTO(
                valid=False,
                message=e.message,
                expires_at=e.expires_at,
                grace_period_end=e.expires_at,
            )
        except DomainException as e:
            logger.info("Validation failed (%s): %s", e.code, e.message)
            return ValidateLicenseResponseDTO(valid=False, message=e.message)

        subscription = outcome.subscription
        return ValidateLicenseResponseDTO(
            valid=True,
            message=f"License is valid. {outcome.days_remaining} days remaining.",
            expires_at=subscription.end_date,
            grace_period_end=subscription.grace_period_end,
            days_remaining=outcome.days_remaining,
        )
