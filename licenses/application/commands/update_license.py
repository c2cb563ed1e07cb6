"""
UpdateLicenseCommand.

Command carrying an administrator's edits to a license.
"""
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class UpdateLicenseCommand:
    """Command to edit the mutable fields of a license."""

    license_id: int
    changes: Dict[str, Any] = field(default_factory=dict)
