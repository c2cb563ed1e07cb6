"""
License lifecycle handlers.

Handlers for revoke, suspend, resume and update license commands.
"""
import logging

from core.domain.exceptions import MissingFieldError
from licenses.application.commands.resume_license import ResumeLicenseCommand
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.commands.suspend_license import SuspendLicenseCommand
from licenses.application.commands.update_license import UpdateLicenseCommand
from licenses.application.dto.license_dto import LicenseDTO
from licenses.domain.services import LicenseLifecycleManager

logger = logging.getLogger(__name__)


class RevokeLicenseHandler:
    """Handler for RevokeLicenseCommand."""

    def __init__(self, lifecycle_manager: LicenseLifecycleManager):
        self.lifecycle_manager = lifecycle_manager

    async def handle(self, command: RevokeLicenseCommand) -> LicenseDTO:
        """
        Handle revoke license command.

        Args:
            command: RevokeLicenseCommand naming the license by id or key

        Returns:
            LicenseDTO of the revoked license

        Raises:
            MissingFieldError: If neither id nor key is given
            LicenseNotFoundError: If license not found
        """
        if command.license_id is not None:
            license = await self.lifecycle_manager.revoke(command.license_id)
        elif command.license_key:
            license = await self.lifecycle_manager.revoke_by_key(command.license_key)
        else:
            raise MissingFieldError("License id or license key is required")
        return LicenseDTO.from_entity(license)


class SuspendLicenseHandler:
    """Handler for SuspendLicenseCommand."""

    def __init__(self, lifecycle_manager: LicenseLifecycleManager):
        self.lifecycle_manager = lifecycle_manager

    async def handle(self, command: SuspendLicenseCommand) -> LicenseDTO:
        license = await self.lifecycle_manager.suspend(command.license_id)
        if command.reason:
            logger.info("License %s suspended: %s", license.license_key, command.reason)
        return LicenseDTO.from_entity(license)


class ResumeLicenseHandler:
    """Handler for ResumeLicenseCommand."""

    def __init__(self, lifecycle_manager: LicenseLifecycleManager):
        self.lifecycle_manager = lifecycle_manager

    async def handle(self, command: ResumeLicenseCommand) -> LicenseDTO:
        license = await self.lifecycle_manager.resume(command.license_id)
        return LicenseDTO.from_entity(license)


class UpdateLicenseHandler:
    """Handler for UpdateLicenseCommand."""

    def __init__(self, lifecycle_manager: LicenseLifecycleManager):
        self.lifecycle_manager = lifecycle_manager

    async def handle(self, command: UpdateLicenseCommand) -> LicenseDTO:
        """
        Handle update license command.

        Raises:
            MissingFieldError: If a field is not editable
            InvalidLicenseStatusError: If a revoked license would change status
        """
        license = await self.lifecycle_manager.update(command.license_id, command.changes)
        return LicenseDTO.from_entity(license)
