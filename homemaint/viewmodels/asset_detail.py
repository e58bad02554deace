"""Asset detail view model: one asset with its related records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homemaint.repositories import (
    AttachmentRepository,
    CategoryRepository,
    LocationRepository,
    MaintenanceRecordRepository,
    MaintenanceTaskRepository,
)
from homemaint.viewmodels.base import ViewModel

if TYPE_CHECKING:
    from homemaint.core.database import Database
    from homemaint.models import (
        Asset,
        Attachment,
        Category,
        Location,
        MaintenanceRecord,
        MaintenanceTask,
    )


class AssetDetailViewModel(ViewModel):
    """State for a single asset's detail screen.

    Attributes:
        asset: The asset being shown
        category: The asset's category, if it has one
        location: The asset's location, if it has one
        maintenance_records: Records newest first
        tasks: Tasks soonest due first
        attachments: Attachments newest first
    """

    def __init__(self, database: Database, asset: Asset) -> None:
        super().__init__(database)
        self.asset = asset
        self.category: Category | None = None
        self.location: Location | None = None
        self.maintenance_records: list[MaintenanceRecord] = []
        self.tasks: list[MaintenanceTask] = []
        self.attachments: list[Attachment] = []

    async def load_related_data(self) -> None:
        async with self._loading("Failed to load related data"):
            async with self.database.session() as session:
                category = None
                location = None
                if self.asset.category_id is not None:
                    category = await CategoryRepository(session).find_by_id(
                        self.asset.category_id
                    )
                if self.asset.location_id is not None:
                    location = await LocationRepository(session).find_by_id(
                        self.asset.location_id
                    )

                records: list[MaintenanceRecord] = []
                tasks: list[MaintenanceTask] = []
                attachments: list[Attachment] = []
                if self.asset.id is not None:
                    records = await MaintenanceRecordRepository(session).find_by_asset_id(
                        self.asset.id
                    )
                    tasks = await MaintenanceTaskRepository(session).find_by_asset_id(
                        self.asset.id
                    )
                    attachments = await AttachmentRepository(session).find_by_asset_id(
                        self.asset.id
                    )

            self.category = category
            self.location = location
            self.maintenance_records = records
            self.tasks = tasks
            self.attachments = attachments

    async def refresh(self) -> None:
        await self.load_related_data()

    @property
    def warranty_status_text(self) -> str:
        return self.asset.warranty_status.display_text

    @property
    def warranty_status_color(self) -> str:
        return self.asset.warranty_status.color

    @property
    def maintenance_count(self) -> int:
        return len(self.maintenance_records)

    @property
    def pending_tasks_count(self) -> int:
        """Tasks not yet completed (pending, in progress or cancelled)."""
        return sum(1 for task in self.tasks if not task.is_completed)

    @property
    def photo_count(self) -> int:
        return sum(1 for attachment in self.attachments if attachment.is_image)
