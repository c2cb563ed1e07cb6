"""
License query service.

Read-side helpers for the administrator: dashboard statistics and
license search, both cached until the next license write.
"""
import logging
from typing import List, Optional

from activations.ports.activation_repository import ActivationRepository
from core.domain.value_objects import LicenseStatus
from licenses.application.dto.license_dto import DashboardStatsDTO, LicenseDTO
from licenses.application.services.license_cache_service import (
    DASHBOARD_STATS_KEY,
    LicenseCacheService,
)
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 50


class LicenseQueryService:
    """Cached dashboard and search queries."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
        cache_service: Optional[LicenseCacheService] = None,
    ):
        self.license_repository = license_repository
        self.activation_repository = activation_repository
        self.cache_service = cache_service or LicenseCacheService()

    async def dashboard_stats(self) -> DashboardStatsDTO:
        """
        Count licenses by status plus active device bindings.

        Returns:
            DashboardStatsDTO, served from the cache when fresh
        """
        cached = await self.cache_service.get(DASHBOARD_STATS_KEY)
        if cached is not None:
            return cached

        counts = await self.license_repository.count_by_status()
        stats = DashboardStatsDTO(
            total_licenses=sum(counts.values()),
            active_licenses=counts.get(LicenseStatus.ACTIVE.value, 0),
            expired_licenses=counts.get(LicenseStatus.EXPIRED.value, 0),
            revoked_licenses=counts.get(LicenseStatus.REVOKED.value, 0),
            suspended_licenses=counts.get(LicenseStatus.SUSPENDED.value, 0),
            active_activations=await self.activation_repository.count_active(),
            by_status=counts,
        )
        await self.cache_service.set(DASHBOARD_STATS_KEY, stats)
        return stats

    async def search(
        self, query: str = "", status: Optional[str] = None, limit: int = DEFAULT_SEARCH_LIMIT
    ) -> List[LicenseDTO]:
        """
        Search licenses by key, customer name, phone or location.

        Only default-sized pages are cached.
        """
        query = (query or "").strip()
        if status:
            status = LicenseStatus(status).value

        cache_key = LicenseCacheService.search_cache_key(query, status)
        cacheable = limit == DEFAULT_SEARCH_LIMIT
        if cacheable:
            cached = await self.cache_service.get(cache_key)
            if cached is not None:
                return cached

        licenses = await self.license_repository.search(query, status, limit)
        results = [LicenseDTO.from_entity(license) for license in licenses]
        if cacheable:
            await self.cache_service.set(cache_key, results)
        logger.debug("License search '%s' (%s) returned %s row(s)", query, status, len(results))
        return results
