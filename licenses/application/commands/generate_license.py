"""
GenerateLicenseCommand.

Command to create a license for a customer location.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class GenerateLicenseCommand:
    """Command to generate a new license with its first subscription."""

    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    location_name: Optional[str] = None
    location_address: Optional[str] = None
    is_free_trial: bool = False
    initial_price: Optional[Decimal] = None
    annual_price: Optional[Decimal] = None
    price_per_seat: Optional[Decimal] = None
    seat_limit: Optional[int] = None
    product_tag: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
