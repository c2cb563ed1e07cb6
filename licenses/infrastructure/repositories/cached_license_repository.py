"""
Cache-through decorator for LicenseRepository.

Reads by key or id are served from the cache when possible. Every
write goes to the wrapped store unchanged; callers invalidate through
``invalidate`` once the write has committed.
"""
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from licenses.application.services.license_cache_service import LicenseCacheService
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository


class CachedLicenseRepository(LicenseRepository):
    """LicenseRepository that caches single-license lookups."""

    def __init__(self, inner: LicenseRepository, cache_service: LicenseCacheService):
        """
        Initialize the decorator.

        Args:
            inner: Repository backed by the store
            cache_service: Cache key layout and invalidation rules
        """
        self.inner = inner
        self.cache_service = cache_service

    async def find_by_id(self, license_id: int) -> Optional[License]:
        cached = await self.cache_service.get_by_id(license_id)
        if cached is not None:
            return cached
        license = await self.inner.find_by_id(license_id)
        if license is not None:
            await self.cache_service.store(license)
        return license

    async def find_by_key(self, license_key: str) -> Optional[License]:
        cached = await self.cache_service.get_by_key(license_key)
        if cached is not None:
            return cached
        license = await self.inner.find_by_key(license_key)
        if license is not None:
            await self.cache_service.store(license)
        return license

    async def invalidate(self, license: License) -> None:
        """Drop the license's entries plus listings derived from it."""
        await self.cache_service.invalidate_license(license)
        await self.cache_service.invalidate_listings()

    async def invalidate_all(self) -> None:
        """Drop every cached license after a set-based update."""
        await self.cache_service.invalidate_all_licenses()

    async def key_exists(self, license_key: str) -> bool:
        return await self.inner.key_exists(license_key)

    async def find_duplicate(self, contact: str, location_name: str) -> Optional[License]:
        return await self.inner.find_duplicate(contact, location_name)

    async def create(
        self, license: License, annual_fee: Decimal, initial_payment: Optional[Decimal]
    ) -> License:
        return await self.inner.create(license, annual_fee, initial_payment)

    async def save(self, license: License) -> License:
        return await self.inner.save(license)

    async def revoke(
        self, license_id: int, revoked_at: datetime, edited: Optional[License] = None
    ) -> Tuple[int, int]:
        return await self.inner.revoke(license_id, revoked_at, edited=edited)

    async def expire_lapsed(self, now: datetime) -> List[int]:
        return await self.inner.expire_lapsed(now)

    async def find_trials_to_expire(self, now: datetime) -> List[License]:
        return await self.inner.find_trials_to_expire(now)

    async def expire_trials(self, license_ids: List[int], now: datetime) -> int:
        return await self.inner.expire_trials(license_ids, now)

    async def increment_seat_count(self, license_id: int) -> Optional[License]:
        return await self.inner.increment_seat_count(license_id)

    async def decrement_seat_count(self, license_id: int) -> Optional[License]:
        return await self.inner.decrement_seat_count(license_id)

    async def set_seat_count(self, license_id: int, seat_count: int) -> Optional[License]:
        return await self.inner.set_seat_count(license_id, seat_count)

    async def count_by_status(self) -> Dict[str, int]:
        return await self.inner.count_by_status()

    async def search(
        self, query: str, status: Optional[str] = None, limit: int = 50
    ) -> List[License]:
        return await self.inner.search(query, status, limit)
