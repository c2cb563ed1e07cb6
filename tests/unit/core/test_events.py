"""
Unit tests for the event bus and the audit handler.
"""
import logging
from decimal import Decimal

import pytest

from core.domain.events import EventHandler
from core.infrastructure.event_handlers import (
    AUDITED_EVENTS,
    audit_handler,
    register_event_handlers,
)
from core.infrastructure.events import InMemoryEventBus
from licenses.domain.events import LicenseCreated, LicenseSuspended
from payments.domain.events import PaymentRecorded


class CollectingHandler(EventHandler):
    def __init__(self):
        self.events = []

    async def handle(self, event):
        self.events.append(event)


class BrokenHandler(EventHandler):
    async def handle(self, event):
        raise RuntimeError("handler failed")


class TestDomainEvent:
    """Tests for DomainEvent serialization."""

    def test_to_dict(self):
        event = PaymentRecorded(
            payment_id=7,
            license_id=3,
            amount=Decimal("50.00"),
            payment_type="annual",
            converted_trial=False,
            additional_users=None,
        )
        data = event.to_dict()

        assert data["event_type"] == "PaymentRecorded"
        assert data["aggregate_id"] == "3"
        assert data["amount"] == "50.00"
        assert isinstance(data["occurred_at"], str)
        assert isinstance(data["event_id"], str)


@pytest.mark.asyncio
class TestInMemoryEventBus:
    """Tests for InMemoryEventBus."""

    async def test_publish_to_subscribers(self):
        bus = InMemoryEventBus()
        handler = CollectingHandler()
        bus.subscribe(LicenseSuspended, handler)

        await bus.publish(LicenseSuspended(license_id=1))
        await bus.publish(LicenseCreated(license_id=1, license_key="K", is_free_trial=False))

        assert [e.event_type for e in handler.events] == ["LicenseSuspended"]

    async def test_duplicate_subscription_ignored(self):
        bus = InMemoryEventBus()
        handler = CollectingHandler()
        bus.subscribe(LicenseSuspended, handler)
        bus.subscribe(LicenseSuspended, handler)

        await bus.publish(LicenseSuspended(license_id=1))

        assert len(handler.events) == 1

    async def test_failing_handler_is_isolated(self):
        """Test one handler raising neither reaches the publisher nor stops others."""
        bus = InMemoryEventBus()
        collector = CollectingHandler()
        bus.subscribe(LicenseSuspended, BrokenHandler())
        bus.subscribe(LicenseSuspended, collector)

        await bus.publish(LicenseSuspended(license_id=1))

        assert len(collector.events) == 1

    async def test_clear(self):
        bus = InMemoryEventBus()
        handler = CollectingHandler()
        bus.subscribe(LicenseSuspended, handler)
        bus.clear()

        await bus.publish(LicenseSuspended(license_id=1))

        assert handler.events == []


@pytest.mark.asyncio
class TestAuditLogEventHandler:
    """Tests for the audit trail handler."""

    async def test_writes_structured_record(self, caplog):
        event = LicenseSuspended(license_id=42)
        with caplog.at_level(logging.INFO, logger="core.audit"):
            await audit_handler.handle(event)

        record = next(r for r in caplog.records if r.name == "core.audit")
        assert record.event_type == "LicenseSuspended"
        assert record.aggregate_id == "42"
        assert record.payload["license_id"] == 42

    async def test_register_is_idempotent(self):
        bus = InMemoryEventBus()
        register_event_handlers(bus)
        register_event_handlers(bus)

        for event_type in AUDITED_EVENTS:
            assert bus._handlers[event_type] == [audit_handler]
