"""
GenerateLicenseHandler.

Handler for creating a license with its first subscription.
"""
from licenses.application.commands.generate_license import GenerateLicenseCommand
from licenses.application.dto.license_dto import LicenseDTO
from licenses.domain.services import LicenseLifecycleManager


class GenerateLicenseHandler:
    """Handler for GenerateLicenseCommand."""

    def __init__(self, lifecycle_manager: LicenseLifecycleManager):
        """Initialize handler with the lifecycle manager."""
        self.lifecycle_manager = lifecycle_manager

    async def handle(self, command: GenerateLicenseCommand) -> LicenseDTO:
        """
        Handle generate license command.

        Args:
            command: GenerateLicenseCommand

        Returns:
            LicenseDTO of the saved license

        Raises:
            DuplicateLicenseError: If the contact already has a license for this location
            MissingFieldError: If the phone cannot be normalized
        """
        license = await self.lifecycle_manager.create(
            customer_name=command.customer_name,
            customer_phone=command.customer_phone,
            location_name=command.location_name,
            location_address=command.location_address,
            is_free_trial=command.is_free_trial,
            initial_price=command.initial_price,
            annual_price=command.annual_price,
            price_per_seat=command.price_per_seat,
            seat_limit=command.seat_limit,
            product_tag=command.product_tag,
            start_date=command.start_date,
            end_date=command.end_date,
        )
        return LicenseDTO.from_entity(license)
