"""Asset list view model with search."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homemaint.repositories import AssetRepository
from homemaint.services.seed_service import SeedDataService
from homemaint.viewmodels.base import ViewModel

if TYPE_CHECKING:
    from homemaint.core.database import Database
    from homemaint.models import Asset
    from homemaint.viewmodels.dashboard import SeedServiceFactory


class AssetListViewModel(ViewModel):
    def __init__(
        self,
        database: Database,
        seed_service_factory: SeedServiceFactory = SeedDataService,
    ) -> None:
        super().__init__(database)
        self._seed_service_factory = seed_service_factory
        self.assets: list[Asset] = []
        self.search_query = ""
        self.home_id: int | None = None

    async def load(self) -> None:
        """Load the home's assets, narrowed by the current search query."""
        async with self._loading("Failed to load assets"):
            async with self.database.session() as session:
                home = await self._seed_service_factory(session).get_or_create_home()
                repo = AssetRepository(session)
                if self.search_query.strip():
                    assets = await repo.search(home.id, self.search_query)
                else:
                    assets = await repo.find_by_home_id(home.id)
            self.home_id = home.id
            self.assets = assets

    async def search(self, query: str) -> None:
        self.search_query = query
        await self.load()

    async def delete_asset(self, asset: Asset) -> None:
        """Delete an asset (and, through the schema, its records, tasks and attachments)."""
        if asset.id is None:
            return
        async with self._handling_errors("Failed to delete asset"):
            async with self.database.session() as session:
                await AssetRepository(session).delete(asset.id)
            await self.load()

    async def refresh(self) -> None:
        await self.load()
