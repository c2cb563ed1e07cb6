"""
Event handlers for domain events.

These handlers process domain events for side effects such as the
license operation audit trail.
"""

import logging

from activations.domain.events import (
    ActivationDeactivated,
    ActivationRolledBack,
    LicenseActivated,
)
from core.domain.events import DomainEvent, EventHandler
from licenses.domain.events import (
    LicenseCreated,
    LicenseResumed,
    LicenseRevoked,
    LicensesExpired,
    LicenseSuspended,
    LicenseUpdated,
)
from payments.domain.events import PaymentRecorded

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("core.audit")

AUDITED_EVENTS = (
    LicenseCreated,
    LicenseUpdated,
    LicenseRevoked,
    LicenseSuspended,
    LicenseResumed,
    LicensesExpired,
    LicenseActivated,
    ActivationRolledBack,
    ActivationDeactivated,
    PaymentRecorded,
)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Writes every license operation to the ``core.audit`` logger as one
    structured record.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        payload = event.to_dict()
        audit_logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={
                "event_id": str(event.event_id),
                "event_type": event.event_type,
                "aggregate_id": event.aggregate_id,
                "occurred_at": event.occurred_at.isoformat(),
                "payload": payload,
            },
        )


# Shared instance so repeated registration stays idempotent.
audit_handler = AuditLogEventHandler()


def register_event_handlers(bus=None) -> None:
    """Register all event handlers with the event bus."""
    if bus is None:
        from core.infrastructure.events import event_bus as bus

    for event_type in AUDITED_EVENTS:
        bus.subscribe(event_type, audit_handler)

    logger.info("Event handlers registered")
