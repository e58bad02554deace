"""SQLAlchemy models for the home maintenance tracker."""

from .asset import Asset, warranty_status
from .attachment import Attachment
from .category import Category
from .enums import AttachmentType, MaintenanceType, TaskPriority, TaskStatus, WarrantyStatus
from .home import Base, Home
from .location import Location
from .maintenance_record import MaintenanceRecord, parse_cost
from .maintenance_task import MaintenanceTask, is_task_overdue
from .service_provider import ServiceProvider
from .types import ISODateTime

__all__ = [
    "Asset",
    "Attachment",
    "AttachmentType",
    "Base",
    "Category",
    "Home",
    "ISODateTime",
    "Location",
    "MaintenanceRecord",
    "MaintenanceTask",
    "MaintenanceType",
    "ServiceProvider",
    "TaskPriority",
    "TaskStatus",
    "WarrantyStatus",
    "is_task_overdue",
    "parse_cost",
    "warranty_status",
]
