"""Integration tests for AttachmentRepository."""

from __future__ import annotations

import pytest
from factories import AssetFactory, AttachmentFactory, MaintenanceRecordFactory, fields

from homemaint.core.exceptions import InvalidInputError
from homemaint.models import AttachmentType
from homemaint.repositories import (
    AssetRepository,
    AttachmentRepository,
    MaintenanceRecordRepository,
)


@pytest.fixture
def repo(session):
    return AttachmentRepository(session)


@pytest.fixture
async def asset(session, home):
    return await AssetRepository(session).create(**fields(AssetFactory, home_id=home.id))


@pytest.fixture
async def record(session, asset):
    return await MaintenanceRecordRepository(session).create(
        **fields(MaintenanceRecordFactory, asset_id=asset.id)
    )


class TestValidation:
    async def test_type_enum_accepted(self, repo, asset):
        attachment = await repo.create(
            **fields(AttachmentFactory, asset_id=asset.id, type=AttachmentType.RECEIPT)
        )
        assert attachment.type == "receipt"
        assert attachment.type_enum is AttachmentType.RECEIPT

    async def test_unknown_type_rejected(self, repo, asset):
        with pytest.raises(InvalidInputError):
            await repo.create(**fields(AttachmentFactory, asset_id=asset.id, type="blueprint"))

    async def test_negative_size_rejected(self, repo, asset):
        with pytest.raises(InvalidInputError):
            await repo.create(**fields(AttachmentFactory, asset_id=asset.id, file_size=-1))

    @pytest.mark.parametrize("missing", ["filename", "relative_path", "type"])
    async def test_required_fields(self, repo, asset, missing):
        values = fields(AttachmentFactory, asset_id=asset.id)
        del values[missing]
        with pytest.raises(InvalidInputError):
            await repo.create(**values)


class TestFinders:
    async def test_find_by_owner_newest_first(self, repo, asset, record):
        first = await repo.create(**fields(AttachmentFactory, asset_id=asset.id))
        second = await repo.create(**fields(AttachmentFactory, asset_id=asset.id))
        on_record = await repo.create(
            **fields(AttachmentFactory, maintenance_record_id=record.id)
        )

        assert [a.id for a in await repo.find_by_asset_id(asset.id)] == [second.id, first.id]
        assert [a.id for a in await repo.find_by_maintenance_record_id(record.id)] == [
            on_record.id
        ]

    async def test_find_by_type(self, repo, asset):
        manual = await repo.create(
            **fields(AttachmentFactory, asset_id=asset.id, type="manual")
        )
        await repo.create(**fields(AttachmentFactory, asset_id=asset.id, type="photo"))
        assert [a.id for a in await repo.find_by_type(AttachmentType.MANUAL)] == [manual.id]
        assert [a.id for a in await repo.find_by_type("manual")] == [manual.id]

    async def test_find_by_unknown_type(self, repo):
        with pytest.raises(InvalidInputError):
            await repo.find_by_type("blueprint")

    async def test_relative_path_queries(self, repo, asset):
        await repo.create(**fields(AttachmentFactory, asset_id=asset.id, relative_path="a/b.jpg"))
        await repo.create(**fields(AttachmentFactory, asset_id=asset.id, relative_path="a/b.jpg"))
        await repo.create(**fields(AttachmentFactory, asset_id=asset.id, relative_path="c/d.pdf"))

        assert await repo.find_relative_paths() == {"a/b.jpg", "c/d.pdf"}
        assert await repo.count_by_relative_path("a/b.jpg") == 2
        assert await repo.count_by_relative_path("missing") == 0

    async def test_deleting_record_removes_its_attachments(self, repo, session, record):
        attachment = await repo.create(
            **fields(AttachmentFactory, maintenance_record_id=record.id)
        )
        await MaintenanceRecordRepository(session).delete(record.id)
        assert await repo.find_by_id(attachment.id) is None
