"""Asset model for appliances, systems and fixtures in a home."""

from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .enums import WarrantyStatus
from .home import Base
from .types import ISODateTime, ensure_utc, utcnow

# Warranties expiring within this window are reported as expiring soon
WARRANTY_EXPIRING_WINDOW = timedelta(days=30)


def warranty_status(expiration: datetime | None, now: datetime | None = None) -> WarrantyStatus:
    """Classify a warranty expiration relative to ``now``.

    Args:
        expiration: Warranty expiration, or None if not recorded
        now: Reference time (defaults to the current UTC time)

    Returns:
        UNKNOWN if no expiration is set, EXPIRED if it is in the past,
        EXPIRING_SOON if it falls within the next 30 days, ACTIVE otherwise.
    """
    if expiration is None:
        return WarrantyStatus.UNKNOWN

    now = ensure_utc(now) if now is not None else utcnow()
    expiration = ensure_utc(expiration)

    if expiration < now:
        return WarrantyStatus.EXPIRED
    if expiration < now + WARRANTY_EXPIRING_WINDOW:
        return WarrantyStatus.EXPIRING_SOON
    return WarrantyStatus.ACTIVE


class Asset(Base):
    """A tracked item such as a water heater, furnace or dishwasher.

    Deleting an asset cascades to its maintenance records, tasks and
    attachments. Deleting its category or location only clears the
    corresponding reference.
    """

    __tablename__ = "assets"
    __table_args__ = (
        Index("idx_assets_home_id", "home_id"),
        Index("idx_assets_category_id", "category_id"),
        Index("idx_assets_location_id", "location_id"),
        Index("idx_assets_warranty_expiration", "warranty_expiration"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    home_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("homes.id", ondelete="CASCADE"), nullable=False
    )
    category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True
    )
    location_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("locations.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    manufacturer: Mapped[str | None] = mapped_column(String, nullable=True)
    model_number: Mapped[str | None] = mapped_column(String, nullable=True)
    serial_number: Mapped[str | None] = mapped_column(String, nullable=True)
    purchase_date: Mapped[datetime | None] = mapped_column(ISODateTime, nullable=True)
    installation_date: Mapped[datetime | None] = mapped_column(ISODateTime, nullable=True)
    warranty_expiration: Mapped[datetime | None] = mapped_column(ISODateTime, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(ISODateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(ISODateTime, default=utcnow, nullable=False)

    @property
    def warranty_status(self) -> WarrantyStatus:
        return warranty_status(self.warranty_expiration)

    @property
    def display_name(self) -> str:
        if self.model_number:
            return f"{self.name} ({self.model_number})"
        return self.name

    def __repr__(self) -> str:
        return f"<Asset(id={self.id}, home_id={self.home_id}, name={self.name!r})>"
