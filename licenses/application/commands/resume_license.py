"""
ResumeLicenseCommand.

Command to resume a suspended license.
"""
from dataclasses import dataclass


@dataclass
class ResumeLicenseCommand:
    """Command to resume a license."""

    license_id: int
