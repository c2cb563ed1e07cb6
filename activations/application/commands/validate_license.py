"""
ValidateLicenseCommand.

Command to check that an activated license may keep running.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class ValidateLicenseCommand:
    """Command to validate a license."""

    license_key: str
    hardware_id: Optional[str] = None
    as_of: Optional[datetime] = None
    location_address: Optional[str] = None
