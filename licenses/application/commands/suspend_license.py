"""
SuspendLicenseCommand.

Command to suspend a license.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class SuspendLicenseCommand:
    """Command to suspend a license."""

    license_id: int
    reason: Optional[str] = None
