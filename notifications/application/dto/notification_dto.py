"""
Notification DTOs.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class NotificationResultDTO:
    """DTO for a delivery attempt."""

    sent: bool
    message: str
    phone: Optional[str] = None
