"""
Domain events base classes and infrastructure.

Domain events represent something that happened in the domain.
They are used for decoupling modules and enabling event-driven architecture.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from django.utils import timezone


class DomainEvent(ABC):
    """
    Base class for all domain events.

    Subclasses pass the aggregate id up and store their own payload
    as plain attributes.
    """

    def __init__(self, aggregate_id: str, occurred_at: Optional[datetime] = None):
        """
        Initialize event metadata.

        Args:
            aggregate_id: Identifier of the aggregate the event belongs to
            occurred_at: When the event occurred (defaults to now)
        """
        self.event_id = uuid.uuid4()
        self.occurred_at = occurred_at or timezone.now()
        self.aggregate_id = str(aggregate_id)

    @property
    def event_type(self) -> str:
        """Event name, taken from the class."""
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        data: Dict[str, Any] = {"event_type": self.event_type}
        for name, value in vars(self).items():
            if isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, (uuid.UUID, Decimal)):
                value = str(value)
            elif isinstance(value, Enum):
                value = value.value
            data[name] = value
        return data


class EventHandler(ABC):
    """
    Base class for event handlers.

    Event handlers process domain events asynchronously.
    """

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        """
        Handle a domain event.

        Args:
            event: The domain event to handle
        """
        pass


class EventBus(ABC):
    """
    Abstract event bus for publishing and subscribing to domain events.
    """

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        """
        Publish a domain event.

        Args:
            event: The domain event to publish
        """
        pass

    @abstractmethod
    def subscribe(self, event_type: type, handler: EventHandler) -> None:
        """
        Subscribe to a domain event type.

        Args:
            event_type: The type of event to subscribe to
            handler: The handler to call when event is published
        """
        pass
