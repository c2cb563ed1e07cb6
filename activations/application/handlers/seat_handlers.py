"""
Seat handlers.

Handlers for the seat operations a POS installation performs when it
manages its local users.
"""
import logging

from activations.application.commands.seat_commands import (
    CheckSeatCommand,
    DecrementSeatCommand,
    IncrementSeatCommand,
    SyncSeatCommand,
)
from activations.application.dto.activation_dto import SeatResponseDTO
from activations.domain.services import ActivationManager
from core.domain.exceptions import DomainException

logger = logging.getLogger(__name__)


def _failed(e: DomainException) -> SeatResponseDTO:
    logger.info("Seat operation rejected (%s): %s", e.code, e.message)
    return SeatResponseDTO(success=False, seat_count=0, seat_limit=0, message=e.message)


class CheckSeatHandler:
    """Handler for CheckSeatCommand."""

    def __init__(self, activation_manager: ActivationManager):
        self.activation_manager = activation_manager

    async def handle(self, command: CheckSeatCommand) -> SeatResponseDTO:
        try:
            usage = await self.activation_manager.check_seat_allowed(command.license_key)
        except DomainException as e:
            return _failed(e)

        if not usage.allowed:
            return SeatResponseDTO(
                success=False,
                seat_count=usage.seat_count,
                seat_limit=usage.seat_limit,
                message=(
                    f"User limit reached ({usage.seat_count}/{usage.seat_limit}). "
                    "Please contact administrator to increase your user limit."
                ),
            )
        return SeatResponseDTO(
            success=True,
            seat_count=usage.seat_count,
            seat_limit=usage.seat_limit,
            message=f"You can create {usage.remaining} more user(s).",
        )


class IncrementSeatHandler:
    """Handler for IncrementSeatCommand."""

    def __init__(self, activation_manager: ActivationManager):
        self.activation_manager = activation_manager

    async def handle(self, command: IncrementSeatCommand) -> SeatResponseDTO:
        """
        Handle increment seat command.

        Args:
            command: IncrementSeatCommand

        Returns:
            SeatResponseDTO with the counters after the increment
        """
        try:
            usage = await self.activation_manager.increment_seat(command.license_key)
        except DomainException as e:
            return _failed(e)

        return SeatResponseDTO(
            success=True,
            seat_count=usage.seat_count,
            seat_limit=usage.seat_limit,
            message=(
                f"User created successfully. Current users: {usage.seat_count}/{usage.seat_limit}"
            ),
        )


class DecrementSeatHandler:
    """Handler for DecrementSeatCommand."""

    def __init__(self, activation_manager: ActivationManager):
        self.activation_manager = activation_manager

    async def handle(self, command: DecrementSeatCommand) -> SeatResponseDTO:
        try:
            usage = await self.activation_manager.decrement_seat(command.license_key)
        except DomainException as e:
            return _failed(e)

        return SeatResponseDTO(
            success=True,
            seat_count=usage.seat_count,
            seat_limit=usage.seat_limit,
            message=(
                f"User deleted successfully. Current users: {usage.seat_count}/{usage.seat_limit}"
            ),
        )


class SyncSeatHandler:
    """Handler for SyncSeatCommand."""

    def __init__(self, activation_manager: ActivationManager):
        self.activation_manager = activation_manager

    async def handle(self, command: SyncSeatCommand) -> SeatResponseDTO:
        try:
            usage = await self.activation_manager.sync_seat(
                command.license_key, command.actual_count
            )
        except DomainException as e:
            return _failed(e)

        return SeatResponseDTO(
            success=True,
            seat_count=usage.seat_count,
            seat_limit=usage.seat_limit,
            message=f"User count synced successfully. Current users: {usage.seat_count}.",
        )
