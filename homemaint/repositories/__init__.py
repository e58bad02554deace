"""Repository pattern implementation for database access abstraction.

Each repository is the only component that issues persistence operations for
its record type. Repositories are constructed with an AsyncSession and never
commit; the enclosing ``Database.session()`` block does.

Exports:
    Repository: Generic base class for all repositories
    HomeRepository, CategoryRepository, LocationRepository, AssetRepository,
    ServiceProviderRepository, MaintenanceRecordRepository,
    MaintenanceTaskRepository, AttachmentRepository

Example:
    from homemaint.repositories import AssetRepository, MaintenanceTaskRepository

    async with db.session() as session:
        asset_repo = AssetRepository(session)
        task_repo = MaintenanceTaskRepository(session)

        assets = await asset_repo.search(home.id, "heater")
        overdue = await task_repo.find_overdue()
"""

from homemaint.repositories.asset_repository import AssetRepository
from homemaint.repositories.attachment_repository import AttachmentRepository
from homemaint.repositories.base import Repository
from homemaint.repositories.category_repository import CategoryRepository
from homemaint.repositories.home_repository import HomeRepository
from homemaint.repositories.location_repository import LocationRepository
from homemaint.repositories.maintenance_record_repository import MaintenanceRecordRepository
from homemaint.repositories.maintenance_task_repository import MaintenanceTaskRepository
from homemaint.repositories.service_provider_repository import ServiceProviderRepository

__all__ = [
    "AssetRepository",
    "AttachmentRepository",
    "CategoryRepository",
    "HomeRepository",
    "LocationRepository",
    "MaintenanceRecordRepository",
    "MaintenanceTaskRepository",
    "Repository",
    "ServiceProviderRepository",
]
