"""Repository for ServiceProvider entity database operations."""

from __future__ import annotations

from sqlalchemy import func, or_

from homemaint.models import ServiceProvider
from homemaint.repositories.base import Repository, contains_ci

_BY_COMPANY = (ServiceProvider.company, ServiceProvider.id)


class ServiceProviderRepository(Repository[ServiceProvider]):
    """Repository for ServiceProvider entity database operations.

    Deleting a provider keeps its maintenance records; their
    ``service_provider_id`` is cleared by the schema.
    """

    model_class = ServiceProvider
    required_fields = ("home_id", "company")

    async def find_by_home_id(self, home_id: int) -> list[ServiceProvider]:
        return await self._list(ServiceProvider.home_id == home_id, order_by=_BY_COMPANY)

    async def find_by_specialty(
        self, specialty: str, home_id: int | None = None
    ) -> list[ServiceProvider]:
        """Get providers with the given specialty (case-insensitive exact match)."""
        criteria = [func.lower(ServiceProvider.specialty) == specialty.strip().lower()]
        if home_id is not None:
            criteria.append(ServiceProvider.home_id == home_id)
        return await self._list(*criteria, order_by=_BY_COMPANY)

    async def search(self, home_id: int, query: str) -> list[ServiceProvider]:
        """Find a home's providers by company, contact name or specialty.

        A blank query returns all of the home's providers.
        """
        query = query.strip()
        if not query:
            return await self.find_by_home_id(home_id)

        return await self._list(
            ServiceProvider.home_id == home_id,
            or_(
                contains_ci(ServiceProvider.company, query),
                contains_ci(ServiceProvider.name, query),
                contains_ci(ServiceProvider.specialty, query),
            ),
            order_by=_BY_COMPANY,
        )
