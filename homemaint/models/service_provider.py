"""Service provider model for contractors and repair companies."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .home import Base
from .types import ISODateTime, utcnow


class ServiceProvider(Base):
    __tablename__ = "service_providers"
    __table_args__ = (
        Index("idx_service_providers_home_id", "home_id"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    home_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("homes.id", ondelete="CASCADE"), nullable=False
    )
    company: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str | None] = mapped_column(String, nullable=True)
    phone: Mapped[str | None] = mapped_column(String, nullable=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    specialty: Mapped[str | None] = mapped_column(String, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(ISODateTime, default=utcnow, nullable=False)

    @property
    def display_name(self) -> str:
        """Company name, followed by the contact name when one is recorded."""
        if self.name:
            return f"{self.company} ({self.name})"
        return self.company

    def __repr__(self) -> str:
        return f"<ServiceProvider(id={self.id}, company={self.company!r})>"
