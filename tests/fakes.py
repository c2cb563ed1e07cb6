"""
Test doubles shared by unit and integration tests.
"""
from typing import List, Tuple

from notifications.ports.notification_channel import (
    ContactVerificationRepository,
    NotificationChannel,
)


class RecordingChannel(NotificationChannel):
    """Channel that keeps every message it is asked to send."""

    def __init__(self, accept: bool = True):
        self.accept = accept
        self.sent: List[Tuple[str, str]] = []

    def send(self, destination: str, message: str) -> bool:
        self.sent.append((destination, message))
        return self.accept


class FailingChannel(NotificationChannel):
    """Channel whose transport always blows up."""

    def send(self, destination: str, message: str) -> bool:
        raise ConnectionError("gateway unreachable")


class FakeVerificationRepository(ContactVerificationRepository):
    """In-memory verified phone list."""

    def __init__(self, verified=()):
        self.verified = set(verified)

    async def is_verified(self, phone: str) -> bool:
        return phone in self.verified

    async def mark_verified(self, phone: str) -> None:
        self.verified.add(phone)
