"""
Subscription handlers.

Handlers for renewing, creating and listing subscriptions.
"""
from typing import List

from subscriptions.application.commands.create_subscription import CreateSubscriptionCommand
from subscriptions.application.commands.renew_subscription import RenewSubscriptionCommand
from subscriptions.application.dto.subscription_dto import SubscriptionDTO
from subscriptions.domain.services import SubscriptionManager


class RenewSubscriptionHandler:
    """Handler for RenewSubscriptionCommand."""

    def __init__(self, subscription_manager: SubscriptionManager):
        """Initialize handler with the subscription manager."""
        self.subscription_manager = subscription_manager

    async def handle(self, command: RenewSubscriptionCommand) -> SubscriptionDTO:
        """
        Handle renew subscription command.

        Args:
            command: RenewSubscriptionCommand

        Returns:
            SubscriptionDTO with the extended window

        Raises:
            SubscriptionNotFoundError: If subscription not found
            LicenseRevokedError: If the owning license is revoked
        """
        subscription = await self.subscription_manager.renew(
            command.subscription_id,
            extend_from_now=command.extend_from_now,
            annual_fee=command.annual_fee,
        )
        return SubscriptionDTO.from_entity(subscription)


class CreateSubscriptionHandler:
    """Handler for CreateSubscriptionCommand."""

    def __init__(self, subscription_manager: SubscriptionManager):
        self.subscription_manager = subscription_manager

    async def handle(self, command: CreateSubscriptionCommand) -> SubscriptionDTO:
        subscription = await self.subscription_manager.create(
            command.license_id,
            start_date=command.start_date,
            end_date=command.end_date,
            annual_fee=command.annual_fee,
        )
        return SubscriptionDTO.from_entity(subscription)


class ListSubscriptionsHandler:
    """Lists a license's subscriptions, newest first."""

    def __init__(self, subscription_manager: SubscriptionManager):
        self.subscription_manager = subscription_manager

    async def handle(self, license_id: int) -> List[SubscriptionDTO]:
        subscriptions = await self.subscription_manager.find_for_license(license_id)
        return [SubscriptionDTO.from_entity(subscription) for subscription in subscriptions]
