"""
RevokeLicenseCommand.

Command to revoke a license permanently.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class RevokeLicenseCommand:
    """Command to revoke a license by id or by key."""

    license_id: Optional[int] = None
    license_key: Optional[str] = None
