"""Repository for Attachment entity database operations."""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select

from homemaint.core.exceptions import InvalidInputError
from homemaint.models import Attachment, AttachmentType
from homemaint.repositories.base import Repository

_NEWEST_FIRST = (Attachment.created_at.desc(), Attachment.id.desc())

_TYPES = frozenset(t.value for t in AttachmentType)


class AttachmentRepository(Repository[Attachment]):
    """Repository for Attachment entity database operations.

    Only metadata is handled here. Writing and removing the file bytes is the
    job of FileStorageService and AttachmentService.
    """

    model_class = Attachment
    required_fields = ("type", "filename", "relative_path")

    def validate_fields(self, fields: dict[str, Any]) -> dict[str, Any]:
        if "type" in fields:
            value = fields["type"]
            if isinstance(value, AttachmentType):
                value = value.value
            if value not in _TYPES:
                raise InvalidInputError(
                    f"type must be one of: {', '.join(sorted(_TYPES))}",
                    field="type",
                    value=value,
                    constraint="choice",
                )
            fields = {**fields, "type": value}
        file_size = fields.get("file_size")
        if isinstance(file_size, int) and file_size < 0:
            raise InvalidInputError(
                "file_size must not be negative",
                field="file_size",
                value=file_size,
                constraint="min:0",
            )
        return fields

    async def find_by_asset_id(self, asset_id: int) -> list[Attachment]:
        return await self._list(Attachment.asset_id == asset_id, order_by=_NEWEST_FIRST)

    async def find_by_maintenance_record_id(self, record_id: int) -> list[Attachment]:
        return await self._list(
            Attachment.maintenance_record_id == record_id, order_by=_NEWEST_FIRST
        )

    async def find_by_type(self, attachment_type: AttachmentType | str) -> list[Attachment]:
        try:
            value = AttachmentType(attachment_type).value
        except ValueError:
            raise InvalidInputError(
                f"Unknown attachment type: {attachment_type}",
                field="type",
                value=attachment_type,
                constraint="choice",
            ) from None
        return await self._list(Attachment.type == value, order_by=_NEWEST_FIRST)

    async def find_relative_paths(self) -> set[str]:
        """Return every file path referenced by an attachment row."""
        result = await self._execute(select(Attachment.relative_path).distinct(), "select")
        return set(result.scalars().all())

    async def count_by_relative_path(self, relative_path: str) -> int:
        """Count attachment rows referencing the given file path."""
        stmt = (
            select(func.count())
            .select_from(Attachment)
            .where(Attachment.relative_path == relative_path)
        )
        result = await self._execute(stmt, "count")
        return result.scalar_one()
