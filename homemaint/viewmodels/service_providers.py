"""Service provider list view model with search."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homemaint.repositories import ServiceProviderRepository
from homemaint.services.seed_service import SeedDataService
from homemaint.viewmodels.base import ViewModel

if TYPE_CHECKING:
    from homemaint.core.database import Database
    from homemaint.models import ServiceProvider
    from homemaint.viewmodels.dashboard import SeedServiceFactory


class ServiceProviderListViewModel(ViewModel):
    def __init__(
        self,
        database: Database,
        seed_service_factory: SeedServiceFactory = SeedDataService,
    ) -> None:
        super().__init__(database)
        self._seed_service_factory = seed_service_factory
        self.providers: list[ServiceProvider] = []
        self.search_query = ""
        self.home_id: int | None = None

    async def load(self) -> None:
        async with self._loading("Failed to load providers"):
            async with self.database.session() as session:
                home = await self._seed_service_factory(session).get_or_create_home()
                repo = ServiceProviderRepository(session)
                if self.search_query.strip():
                    providers = await repo.search(home.id, self.search_query)
                else:
                    providers = await repo.find_by_home_id(home.id)
            self.home_id = home.id
            self.providers = providers

    async def search(self, query: str) -> None:
        self.search_query = query
        await self.load()

    async def delete_provider(self, provider: ServiceProvider) -> None:
        """Delete a provider; its maintenance records are kept without a provider."""
        if provider.id is None:
            return
        async with self._handling_errors("Failed to delete provider"):
            async with self.database.session() as session:
                await ServiceProviderRepository(session).delete(provider.id)
            await self.load()

    async def refresh(self) -> None:
        await self.load()
