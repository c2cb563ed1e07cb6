"""
Seat commands.

Commands sent by a POS installation when it creates, deletes or
recounts its local users.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class CheckSeatCommand:
    """Ask whether one more user may be created."""

    license_key: str


@dataclass
class IncrementSeatCommand:
    """Claim a seat for a newly created user."""

    license_key: str
    hardware_id: Optional[str] = None


@dataclass
class DecrementSeatCommand:
    """Release the seat of a deleted user."""

    license_key: str
    hardware_id: Optional[str] = None


@dataclass
class SyncSeatCommand:
    """Overwrite the seat count with the installation's own tally."""

    license_key: str
    actual_count: int
    hardware_id: Optional[str] = None
