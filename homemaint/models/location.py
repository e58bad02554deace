"""Location model for rooms and areas of a home."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .home import Base
from .types import ISODateTime, utcnow


class Location(Base):
    """A room or area where assets are installed.

    ``floor`` is free text ("1", "B", "3") rather than a number so basements
    and split levels can be expressed.
    """

    __tablename__ = "locations"
    __table_args__ = (
        Index("idx_locations_home_id", "home_id"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    home_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("homes.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    floor: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(ISODateTime, default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Location(id={self.id}, home_id={self.home_id}, name={self.name!r})>"
