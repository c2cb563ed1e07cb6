"""
GetLicenseStatusQuery.

Query to check whether a license key currently permits use.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class GetLicenseStatusQuery:
    """Query to get license status for a license key."""

    license_key: str
    as_of: Optional[datetime] = None
