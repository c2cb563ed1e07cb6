"""
License cache service.

Owns the cache key layout for licenses and the invalidation rules that
every write path applies after its transaction commits.
"""
import logging
from typing import Any, Optional

from django.conf import settings

from core.infrastructure.cache import CachePort
from core.infrastructure.cache_adapters import cache_adapter
from licenses.domain.license import License

logger = logging.getLogger(__name__)

# Cache TTLs (in seconds)
CACHE_TTL_LICENSE = 300  # 5 minutes

DASHBOARD_STATS_KEY = "stats:dashboard"
SEARCH_PATTERN = "search:*"
LICENSE_PATTERN = "license:*"


class LicenseCacheService:
    """Service for caching license-related data."""

    def __init__(self, cache: Optional[CachePort] = None, ttl: Optional[int] = None):
        self.cache = cache or cache_adapter
        self.ttl = ttl or getattr(settings, "LICENSE_CACHE_TTL", CACHE_TTL_LICENSE)

    @staticmethod
    def license_key_cache_key(license_key: str) -> str:
        """Generate cache key for a license looked up by key."""
        return f"license:{license_key.strip().lower()}"

    @staticmethod
    def license_id_cache_key(license_id: int) -> str:
        """Generate cache key for a license looked up by id."""
        return f"license:id:{license_id}"

    @staticmethod
    def search_cache_key(query: str, status: Optional[str] = None) -> str:
        """Generate cache key for a search result page."""
        return f"search:{(query or '').strip().lower()}:{status or 'all'}"

    async def get_by_key(self, license_key: str) -> Optional[License]:
        return await self.cache.get(self.license_key_cache_key(license_key))

    async def get_by_id(self, license_id: int) -> Optional[License]:
        return await self.cache.get(self.license_id_cache_key(license_id))

    async def store(self, license: License) -> None:
        """
        Cache a license under both its key and its id.

        Args:
            license: License entity to cache
        """
        await self.cache.set(self.license_key_cache_key(license.license_key), license, self.ttl)
        await self.cache.set(self.license_id_cache_key(license.id), license, self.ttl)

    async def get(self, key: str) -> Optional[Any]:
        return await self.cache.get(key)

    async def set(self, key: str, value: Any) -> None:
        await self.cache.set(key, value, self.ttl)

    async def invalidate_license(self, license: License) -> None:
        """
        Drop both cached entries of one license.

        Args:
            license: License whose entries are stale
        """
        await self.cache.delete(self.license_key_cache_key(license.license_key))
        await self.cache.delete(self.license_id_cache_key(license.id))
        logger.debug("Invalidated license cache: %s", license.id)

    async def invalidate_listings(self) -> None:
        """Drop dashboard statistics and every cached search result."""
        await self.cache.delete(DASHBOARD_STATS_KEY)
        removed = await self.cache.delete_by_pattern(SEARCH_PATTERN)
        logger.debug("Invalidated dashboard stats and %s search result(s)", removed)

    async def invalidate_all_licenses(self) -> None:
        """Drop every cached license, used after set-based sweeps."""
        removed = await self.cache.delete_by_pattern(LICENSE_PATTERN)
        await self.invalidate_listings()
        logger.info("Invalidated %s cached license entries", removed)
