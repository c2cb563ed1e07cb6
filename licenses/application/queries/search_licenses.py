"""
SearchLicensesQuery.

Query for the administrator's license search.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class SearchLicensesQuery:
    """Case-insensitive search over key, customer and location fields."""

    query: str = ""
    status: Optional[str] = None
    limit: int = 50
