"""
ActivateLicenseHandler.

Handler for activating a license on a device.
"""
import logging

from activations.application.commands.activate_license import ActivateLicenseCommand
from activations.application.dto.activation_dto import ActivateLicenseResponseDTO
from activations.domain.services import ActivationManager
from core.domain.exceptions import DomainException
from core.metrics import licenses_activated_total

logger = logging.getLogger(__name__)


class ActivateLicenseHandler:
    """Handler for ActivateLicenseCommand."""

    def __init__(self, activation_manager: ActivationManager):
        """Initialize handler with the activation manager."""
        self.activation_manager = activation_manager

    async def handle(self, command: ActivateLicenseCommand) -> ActivateLicenseResponseDTO:
        """
        Handle activate license command.

        Business-rule failures come back as ``success=False`` with the
        reason; only unexpected errors such as a database outage raise.

        Args:
            command: ActivateLicenseCommand

        Returns:
            ActivateLicenseResponseDTO with activation details
        """
        try:
            outcome = await self.activation_manager.activate(
                license_key=command.license_key,
                hardware_id=command.hardware_id,
                machine_name=command.machine_name,
                product_tag=command.product_tag,
            )
        except DomainException as e:
            licenses_activated_total.labels(outcome="rejected").inc()
            logger.info("Activation rejected (%s): %s", e.code, e.message)
            return ActivateLicenseResponseDTO(success=False, message=e.message)

        license = outcome.license
        subscription = outcome.subscription
        return ActivateLicenseResponseDTO(
            success=True,
            message=(
                "License reactivated successfully (already active - data preserved)"
                if outcome.is_reactivating_active
                else "License activated successfully"
            ),
            expires_at=subscription.end_date,
            grace_period_end=subscription.grace_period_end,
            token=outcome.token,
            location_name=license.location_name,
            location_address=license.location_address,
            customer_name=license.customer_name,
            customer_phone=license.customer_phone,
            is_reactivating_active=outcome.is_reactivating_active,
        )
