"""Home model, the root of every other record."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .types import ISODateTime, utcnow


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class Home(Base):
    """A property whose assets are being tracked.

    Deleting a home removes its categories, locations, assets and service
    providers, and transitively their records, tasks and attachments.
    """

    __tablename__ = "homes"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    purchase_date: Mapped[datetime | None] = mapped_column(ISODateTime, nullable=True)
    square_footage: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(ISODateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(ISODateTime, default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Home(id={self.id}, name={self.name!r})>"
