"""
ActivateLicenseCommand.

Command to bind a license to a device.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ActivateLicenseCommand:
    """Command to activate a license on a device."""

    license_key: str
    hardware_id: str
    machine_name: Optional[str] = None
    product_tag: Optional[str] = None
