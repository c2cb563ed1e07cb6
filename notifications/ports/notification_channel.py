"""
Notification ports (interfaces).

The licensing engine renders messages itself and hands them to a
channel; delivery is best-effort.
"""

from abc import ABC, abstractmethod


class NotificationChannel(ABC):
    """Outbound message channel."""

    @abstractmethod
    def send(self, destination: str, message: str) -> bool:
        """
        Send a message.

        Args:
            destination: Normalized phone number
            message: Rendered message body

        Returns:
            True if the gateway accepted the message
        """
        pass


class ContactVerificationRepository(ABC):
    """Records which contact phones have been verified."""

    @abstractmethod
    async def is_verified(self, phone: str) -> bool:
        """Whether ``phone`` completed verification."""
        pass

    @abstractmethod
    async def mark_verified(self, phone: str) -> None:
        """Record a successful verification for ``phone``."""
        pass
