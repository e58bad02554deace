"""Services built on top of the repositories."""

from homemaint.services.attachment_service import (
    AttachmentService,
    OrphanedFileSweeper,
    OrphanedFileSweepStats,
)
from homemaint.services.file_storage import FileStorageService, StoredFile
from homemaint.services.seed_service import SeedDataService

__all__ = [
    "AttachmentService",
    "FileStorageService",
    "OrphanedFileSweepStats",
    "OrphanedFileSweeper",
    "SeedDataService",
    "StoredFile",
]
