"""
Activation administration handlers.
"""
from typing import List

from activations.application.commands.deactivate_activation import (
    DeactivateActivationCommand,
    DeactivateAllActivationsCommand,
)
from activations.application.dto.activation_dto import ActivationDTO
from activations.domain.services import ActivationManager


class DeactivateActivationHandler:
    """Handler for DeactivateActivationCommand."""

    def __init__(self, activation_manager: ActivationManager):
        self.activation_manager = activation_manager

    async def handle(self, command: DeactivateActivationCommand) -> ActivationDTO:
        """
        Handle deactivate command.

        Raises:
            ActivationNotFoundError: If the activation does not exist
        """
        activation = await self.activation_manager.deactivate(command.activation_id)
        return ActivationDTO.from_entity(activation)


class DeactivateAllActivationsHandler:
    """Handler for DeactivateAllActivationsCommand."""

    def __init__(self, activation_manager: ActivationManager):
        self.activation_manager = activation_manager

    async def handle(self, command: DeactivateAllActivationsCommand) -> int:
        return await self.activation_manager.deactivate_all(command.license_id)


class ListActivationsHandler:
    """Lists the device bindings of a license."""

    def __init__(self, activation_manager: ActivationManager):
        self.activation_manager = activation_manager

    async def handle(self, license_id: int) -> List[ActivationDTO]:
        activations = await self.activation_manager.list_for_license(license_id)
        return [ActivationDTO.from_entity(activation) for activation in activations]
