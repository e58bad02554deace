"""Integration tests for attachment add/delete and the orphaned file sweep."""

from __future__ import annotations

import os
import time
from datetime import timedelta

import pytest
from factories import AssetFactory, fields

from homemaint.core.exceptions import FileTooLargeError, StorageError
from homemaint.models import AttachmentType
from homemaint.repositories import AssetRepository, AttachmentRepository
from homemaint.services.attachment_service import AttachmentService, OrphanedFileSweeper


@pytest.fixture
def service(database, file_storage):
    return AttachmentService(database, file_storage)


@pytest.fixture
async def asset(database, home):
    async with database.session() as session:
        return await AssetRepository(session).create(**fields(AssetFactory, home_id=home.id))


def _age(file_storage, relative_path, seconds):
    """Backdate a stored file's modification time."""
    path = file_storage.base_path / relative_path
    past = time.time() - seconds
    os.utime(path, (past, past))


class TestAddAttachment:
    async def test_stores_file_and_row(self, service, database, file_storage, asset):
        attachment = await service.add_attachment(
            b"manual pages",
            filename="manual.pdf",
            mime_type="application/pdf",
            attachment_type=AttachmentType.MANUAL,
            asset_id=asset.id,
        )

        assert attachment.id is not None
        assert attachment.type == "manual"
        assert attachment.file_size == len(b"manual pages")
        assert await file_storage.get_file(attachment.relative_path) == b"manual pages"
        async with database.session() as session:
            rows = await AttachmentRepository(session).find_by_asset_id(asset.id)
        assert [a.id for a in rows] == [attachment.id]

    async def test_oversize_file_writes_nothing(self, service, database, file_storage, asset):
        with pytest.raises(FileTooLargeError):
            await service.add_attachment(
                b"x" * 4096, filename="big.jpg", mime_type="image/jpeg", asset_id=asset.id
            )
        assert await file_storage.get_file_count() == 0
        async with database.session() as session:
            assert await AttachmentRepository(session).count() == 0

    async def test_failed_insert_leaves_only_an_orphan_file(self, service, file_storage):
        with pytest.raises(StorageError):
            await service.add_attachment(
                b"lost", filename="lost.jpg", mime_type="image/jpeg", asset_id=424242
            )
        assert await file_storage.get_file_count() == 1


class TestDeleteAttachment:
    async def test_removes_row_and_file(self, service, database, file_storage, asset):
        attachment = await service.add_attachment(
            b"photo", filename="p.jpg", mime_type="image/jpeg", asset_id=asset.id
        )

        assert await service.delete_attachment(attachment.id) is True

        assert not await file_storage.file_exists(attachment.relative_path)
        async with database.session() as session:
            assert await AttachmentRepository(session).find_by_id(attachment.id) is None

    async def test_shared_file_kept_until_last_reference(self, service, file_storage, asset):
        first = await service.add_attachment(
            b"same", filename="a.jpg", mime_type="image/jpeg", asset_id=asset.id
        )
        second = await service.add_attachment(
            b"same", filename="b.jpg", mime_type="image/jpeg", asset_id=asset.id
        )
        assert first.relative_path == second.relative_path

        await service.delete_attachment(first.id)
        assert await file_storage.file_exists(first.relative_path)

        await service.delete_attachment(second.id)
        assert not await file_storage.file_exists(first.relative_path)

    async def test_unknown_attachment(self, service):
        assert await service.delete_attachment(999) is False

    async def test_missing_file_still_deletes_row(self, service, database, file_storage, asset):
        attachment = await service.add_attachment(
            b"gone", filename="g.jpg", mime_type="image/jpeg", asset_id=asset.id
        )
        await file_storage.delete_file(attachment.relative_path)

        assert await service.delete_attachment(attachment.id) is True
        async with database.session() as session:
            assert await AttachmentRepository(session).count() == 0


class TestOrphanedFileSweeper:
    async def test_removes_only_unreferenced_files(self, service, database, file_storage, asset):
        kept = await service.add_attachment(
            b"keep me", filename="keep.jpg", mime_type="image/jpeg", asset_id=asset.id
        )
        orphan = await file_storage.store_file(b"orphan", "image/jpeg", "orphan.jpg")

        stats = await OrphanedFileSweeper(database, file_storage, min_age=timedelta(0)).sweep()

        assert stats.files_scanned == 2
        assert stats.orphans_found == 1
        assert stats.files_deleted == 1
        assert stats.space_reclaimed == len(b"orphan")
        assert await file_storage.file_exists(kept.relative_path)
        assert not await file_storage.file_exists(orphan.relative_path)

    async def test_young_orphans_skipped(self, database, file_storage):
        orphan = await file_storage.store_file(b"in flight", "image/jpeg", "new.jpg")

        stats = await OrphanedFileSweeper(database, file_storage).sweep()

        assert stats.orphans_found == 1
        assert stats.files_skipped_young == 1
        assert stats.files_deleted == 0
        assert await file_storage.file_exists(orphan.relative_path)

    async def test_old_orphans_removed_with_default_age(self, database, file_storage):
        orphan = await file_storage.store_file(b"stale", "image/jpeg", "stale.jpg")
        _age(file_storage, orphan.relative_path, seconds=2 * 3600)

        stats = await OrphanedFileSweeper(database, file_storage).sweep()

        assert stats.files_deleted == 1
        assert not await file_storage.file_exists(orphan.relative_path)

    async def test_reused_orphan_survives_sweep_before_row_commits(
        self, database, file_storage
    ):
        orphan = await file_storage.store_file(b"reused", "image/jpeg", "old.jpg")
        _age(file_storage, orphan.relative_path, seconds=2 * 3600)

        # Same bytes stored again, sweep runs before the attachment row exists
        reused = await file_storage.store_file(b"reused", "image/jpeg", "new.jpg")
        stats = await OrphanedFileSweeper(database, file_storage).sweep()

        assert reused.was_deduplicated is True
        assert stats.files_skipped_young == 1
        assert stats.files_deleted == 0
        assert await file_storage.file_exists(reused.relative_path)

    async def test_reconciles_failed_insert(self, service, database, file_storage):
        with pytest.raises(StorageError):
            await service.add_attachment(
                b"lost", filename="lost.jpg", mime_type="image/jpeg", asset_id=424242
            )

        stats = await OrphanedFileSweeper(database, file_storage, min_age=timedelta(0)).sweep()
        assert stats.files_deleted == 1
        assert await file_storage.get_file_count() == 0

    async def test_stats_serialization(self, database, file_storage):
        stats = await OrphanedFileSweeper(database, file_storage).sweep()
        assert stats.to_dict() == {
            "files_scanned": 0,
            "orphans_found": 0,
            "files_deleted": 0,
            "files_skipped_young": 0,
            "space_reclaimed": 0,
        }
        assert "scanned=0" in repr(stats)
