"""Attachment lifecycle: file bytes plus database row.

The file store and the database are updated in two separate steps. On add,
the file is written first and the row inserted second; on delete, the row is
removed and committed first and the file second. A crash between the steps
can therefore only leave an unreferenced file behind, never a row pointing at
a missing file. OrphanedFileSweeper removes such files.
"""

from __future__ import annotations

import time
from datetime import timedelta
from typing import TYPE_CHECKING

from homemaint.core.exceptions import FileStorageError, StoredFileNotFoundError
from homemaint.core.logging import get_logger
from homemaint.models import AttachmentType
from homemaint.repositories import AttachmentRepository

if TYPE_CHECKING:
    from homemaint.core.database import Database
    from homemaint.models import Attachment
    from homemaint.services.file_storage import FileStorageService

logger = get_logger(__name__)

# Files younger than this may belong to an add_attachment() still in progress
DEFAULT_SWEEP_MIN_AGE = timedelta(hours=1)


class AttachmentService:
    """Adds and removes attachments together with their stored files."""

    def __init__(self, database: Database, file_storage: FileStorageService) -> None:
        self.database = database
        self.file_storage = file_storage

    async def add_attachment(
        self,
        data: bytes,
        *,
        filename: str,
        mime_type: str,
        attachment_type: AttachmentType | str = AttachmentType.PHOTO,
        asset_id: int | None = None,
        maintenance_record_id: int | None = None,
    ) -> Attachment:
        """Store file bytes and record them as an attachment.

        Raises:
            FileTooLargeError: If data exceeds the store's size limit
            ValidationError: If the attachment fields are invalid
            StorageError: If the row cannot be inserted (for example an
                          unknown asset id); the stored file is then left for
                          the sweeper
        """
        stored = await self.file_storage.store_file(data, mime_type, filename)

        async with self.database.session() as session:
            attachment = await AttachmentRepository(session).create(
                asset_id=asset_id,
                maintenance_record_id=maintenance_record_id,
                type=attachment_type,
                filename=filename,
                relative_path=stored.relative_path,
                file_size=stored.file_size,
                mime_type=mime_type,
            )
        return attachment

    async def delete_attachment(self, attachment_id: int) -> bool:
        """Delete an attachment row, then its file if nothing else uses it.

        Deduplicated files can be shared by several attachments, so the file
        is only removed when no remaining row references its path.

        Returns:
            True if the attachment existed and was deleted.
        """
        async with self.database.session() as session:
            repo = AttachmentRepository(session)
            attachment = await repo.find_by_id(attachment_id)
            if attachment is None:
                return False
            relative_path = attachment.relative_path
            await repo.delete(attachment_id)
            still_referenced = await repo.count_by_relative_path(relative_path) > 0

        if still_referenced:
            logger.debug(f"Keeping shared file {relative_path}")
            return True

        try:
            await self.file_storage.delete_file(relative_path)
        except StoredFileNotFoundError:
            logger.warning(f"Attachment {attachment_id} referenced missing file {relative_path}")
        return True


class OrphanedFileSweepStats:
    """Statistics for an orphan sweep."""

    def __init__(self) -> None:
        self.files_scanned: int = 0
        self.orphans_found: int = 0
        self.files_deleted: int = 0
        self.files_skipped_young: int = 0
        self.space_reclaimed: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "files_scanned": self.files_scanned,
            "orphans_found": self.orphans_found,
            "files_deleted": self.files_deleted,
            "files_skipped_young": self.files_skipped_young,
            "space_reclaimed": self.space_reclaimed,
        }

    def __repr__(self) -> str:
        return (
            f"<OrphanedFileSweepStats(scanned={self.files_scanned}, "
            f"orphans={self.orphans_found}, "
            f"deleted={self.files_deleted}, "
            f"skipped_young={self.files_skipped_young}, "
            f"space={self.space_reclaimed} bytes)>"
        )


class OrphanedFileSweeper:
    """Removes stored files that no attachment row references.

    Files modified less than ``min_age`` ago are left alone so that a file
    written by an in-progress add_attachment() is not removed before its row
    is committed.
    """

    def __init__(
        self,
        database: Database,
        file_storage: FileStorageService,
        min_age: timedelta = DEFAULT_SWEEP_MIN_AGE,
    ) -> None:
        self.database = database
        self.file_storage = file_storage
        self.min_age = min_age

    async def sweep(self) -> OrphanedFileSweepStats:
        """Run one sweep over the upload root.

        Returns:
            Statistics describing what was scanned and removed.
        """
        stats = OrphanedFileSweepStats()

        async with self.database.session() as session:
            referenced = await AttachmentRepository(session).find_relative_paths()

        cutoff = time.time() - self.min_age.total_seconds()
        for relative_path in await self.file_storage.iter_relative_paths():
            stats.files_scanned += 1
            if relative_path in referenced:
                continue
            stats.orphans_found += 1

            try:
                stat = await self.file_storage.stat_file(relative_path)
            except StoredFileNotFoundError:
                continue
            if stat.st_mtime > cutoff:
                stats.files_skipped_young += 1
                continue

            try:
                await self.file_storage.delete_file(relative_path)
            except StoredFileNotFoundError:
                continue
            except FileStorageError as e:
                logger.warning(f"Failed to delete orphaned file {relative_path}: {e.message}")
                continue
            stats.files_deleted += 1
            stats.space_reclaimed += stat.st_size

        logger.info(f"Orphaned file sweep complete: {stats!r}")
        return stats
