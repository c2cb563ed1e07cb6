"""
RecordPaymentHandler.

Handler for recording payments.
"""
from typing import List

from payments.application.commands.record_payment import RecordPaymentCommand
from payments.application.dto.payment_dto import PaymentDTO
from payments.domain.services import PaymentRenewalService


class RecordPaymentHandler:
    """Handler for RecordPaymentCommand."""

    def __init__(self, payment_service: PaymentRenewalService):
        """Initialize handler with the payment service."""
        self.payment_service = payment_service

    async def handle(self, command: RecordPaymentCommand) -> PaymentDTO:
        """
        Handle record payment command.

        Args:
            command: RecordPaymentCommand

        Returns:
            PaymentDTO of the saved payment

        Raises:
            InvalidPaymentError: If the amount or type is invalid
            InitialPaymentExistsError: If a second initial payment is recorded
            InitialPaymentRequiredError: If a seat payment precedes the initial one
            LicenseExpiredError: If a seat payment targets an expired license
        """
        payment = await self.payment_service.record_payment(
            license_id=command.license_id,
            amount=command.amount,
            payment_type=command.payment_type,
            additional_users=command.additional_users,
            payment_date=command.payment_date,
        )
        return PaymentDTO.from_entity(payment)


class ListPaymentsHandler:
    """Lists the payment ledger of a license."""

    def __init__(self, payment_service: PaymentRenewalService):
        self.payment_service = payment_service

    async def handle(self, license_id: int) -> List[PaymentDTO]:
        payments = await self.payment_service.list_for_license(license_id)
        return [PaymentDTO.from_entity(payment) for payment in payments]
