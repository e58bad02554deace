"""Dashboard view model: counts, recent work and alerts for the home."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from homemaint.core.config import Settings, get_settings
from homemaint.core.logging import get_logger
from homemaint.repositories import (
    AssetRepository,
    MaintenanceRecordRepository,
    MaintenanceTaskRepository,
)
from homemaint.services.seed_service import SeedDataService
from homemaint.viewmodels.base import ViewModel

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from homemaint.core.database import Database
    from homemaint.models import Asset, Home, MaintenanceRecord, MaintenanceTask

logger = get_logger(__name__)

SeedServiceFactory = Callable[["AsyncSession"], SeedDataService]


class DashboardViewModel(ViewModel):
    """State for the dashboard screen.

    The time windows and the number of recent records come from Settings
    (30 days, 30 days and 5 records by default).
    """

    def __init__(
        self,
        database: Database,
        settings: Settings | None = None,
        seed_service_factory: SeedServiceFactory = SeedDataService,
    ) -> None:
        super().__init__(database)
        self.settings = settings or get_settings()
        self._seed_service_factory = seed_service_factory

        self.home: Home | None = None
        self.total_assets = 0
        self.recent_maintenance: list[MaintenanceRecord] = []
        self.upcoming_tasks: list[MaintenanceTask] = []
        self.overdue_tasks: list[MaintenanceTask] = []
        self.expiring_warranties: list[Asset] = []

    async def load(self) -> None:
        """Load every dashboard figure in one read transaction."""
        async with self._loading("Failed to load dashboard"):
            async with self.database.session() as session:
                home = await self._seed_service_factory(session).get_or_create_home()
                assets = AssetRepository(session)
                records = MaintenanceRecordRepository(session)
                tasks = MaintenanceTaskRepository(session)

                total_assets = await assets.count_by_home_id(home.id)
                recent = await records.find_recent(limit=self.settings.recent_maintenance_limit)
                upcoming = await tasks.find_upcoming(days=self.settings.upcoming_task_days)
                overdue = await tasks.find_overdue()
                expiring = await assets.find_expiring_warranties(
                    home.id, within_days=self.settings.expiring_warranty_days
                )

            self.home = home
            self.total_assets = total_assets
            self.recent_maintenance = recent
            self.upcoming_tasks = upcoming
            self.overdue_tasks = overdue
            self.expiring_warranties = expiring
            logger.debug(f"Dashboard loaded for home {home.id}")

    async def refresh(self) -> None:
        await self.load()

    @property
    def maintenance_count(self) -> int:
        return len(self.recent_maintenance)

    @property
    def pending_tasks_count(self) -> int:
        return len(self.upcoming_tasks) + len(self.overdue_tasks)

    @property
    def alerts_count(self) -> int:
        return len(self.overdue_tasks) + len(self.expiring_warranties)
