"""Attachment model for photos and documents stored on disk."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .enums import AttachmentType
from .home import Base
from .types import ISODateTime, utcnow


class Attachment(Base):
    """Metadata for a file held by the file store.

    The bytes live under the upload root at ``relative_path``; this row only
    records where. Identical content shares one path, so several attachments
    may reference the same file.
    """

    __tablename__ = "attachments"
    __table_args__ = (
        Index("idx_attachments_asset_id", "asset_id"),
        Index("idx_attachments_maintenance_record_id", "maintenance_record_id"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    asset_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("assets.id", ondelete="CASCADE"), nullable=True
    )
    maintenance_record_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("maintenance_records.id", ondelete="CASCADE"), nullable=True
    )
    type: Mapped[str] = mapped_column(String, nullable=False)
    filename: Mapped[str] = mapped_column(String, nullable=False)
    relative_path: Mapped[str] = mapped_column(String, nullable=False)
    file_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    mime_type: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(ISODateTime, default=utcnow, nullable=False)

    @property
    def type_enum(self) -> AttachmentType:
        try:
            return AttachmentType(self.type)
        except ValueError:
            return AttachmentType.OTHER

    @property
    def is_image(self) -> bool:
        return bool(self.mime_type and self.mime_type.startswith("image/"))

    @property
    def is_pdf(self) -> bool:
        return self.mime_type == "application/pdf"

    def __repr__(self) -> str:
        return (
            f"<Attachment(id={self.id}, type={self.type!r}, "
            f"relative_path={self.relative_path!r})>"
        )
