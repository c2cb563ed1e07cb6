"""
License query handlers.

Handlers for status checks, dashboard statistics and search.
"""
from typing import List

from licenses.application.dto.license_dto import (
    DashboardStatsDTO,
    LicenseDTO,
    LicenseStatusDTO,
)
from licenses.application.queries.get_license_status import GetLicenseStatusQuery
from licenses.application.queries.search_licenses import SearchLicensesQuery
from licenses.application.services.license_query_service import LicenseQueryService
from licenses.domain.services import LicenseLifecycleManager


class GetLicenseStatusHandler:
    """Handler for GetLicenseStatusQuery."""

    def __init__(self, lifecycle_manager: LicenseLifecycleManager):
        """Initialize handler with the lifecycle manager."""
        self.lifecycle_manager = lifecycle_manager

    async def handle(self, query: GetLicenseStatusQuery) -> LicenseStatusDTO:
        """
        Handle get license status query.

        Unknown keys are reported with status ``not_found`` instead of
        raising.

        Args:
            query: GetLicenseStatusQuery

        Returns:
            LicenseStatusDTO
        """
        check = await self.lifecycle_manager.check_status(query.license_key, query.as_of)
        return LicenseStatusDTO.from_check(query.license_key, check)


class SearchLicensesHandler:
    """Handler for SearchLicensesQuery."""

    def __init__(self, query_service: LicenseQueryService):
        self.query_service = query_service

    async def handle(self, query: SearchLicensesQuery) -> List[LicenseDTO]:
        return await self.query_service.search(query.query, query.status, query.limit)


class DashboardStatsHandler:
    """Returns the administrator dashboard counters."""

    def __init__(self, query_service: LicenseQueryService):
        self.query_service = query_service

    async def handle(self) -> DashboardStatsDTO:
        return await self.query_service.dashboard_stats()
