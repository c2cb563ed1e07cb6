"""
RollbackActivationHandler.

Handler for compensating a successful activation.
"""
import logging

from activations.application.commands.rollback_activation import RollbackActivationCommand
from activations.application.dto.activation_dto import RollbackActivationResponseDTO
from activations.domain.services import ActivationManager
from core.domain.exceptions import ActivationNotFoundError, DomainException

logger = logging.getLogger(__name__)


class RollbackActivationHandler:
    """Handler for RollbackActivationCommand."""

    def __init__(self, activation_manager: ActivationManager):
        """Initialize handler with the activation manager."""
        self.activation_manager = activation_manager

    async def handle(self, command: RollbackActivationCommand) -> RollbackActivationResponseDTO:
        """
        Handle rollback activation command.

        A pair with no active binding has nothing to undo and reports
        success, so repeated compensation attempts stay harmless.

        Args:
            command: RollbackActivationCommand

        Returns:
            RollbackActivationResponseDTO
        """
        try:
            reset = await self.activation_manager.rollback_activation(
                command.license_key, command.hardware_id
            )
        except ActivationNotFoundError as e:
            logger.info("Rollback skipped: %s", e.message)
            return RollbackActivationResponseDTO(
                success=True, message=e.message, seat_count_reset=False
            )
        except DomainException as e:
            logger.info("Rollback rejected (%s): %s", e.code, e.message)
            return RollbackActivationResponseDTO(success=False, message=e.message)

        return RollbackActivationResponseDTO(
            success=True,
            message="Activation rolled back successfully",
            seat_count_reset=reset,
        )
