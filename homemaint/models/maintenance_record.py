"""Maintenance record model for logged service work."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .home import Base
from .types import ISODateTime, utcnow


def parse_cost(value: str | None) -> Decimal | None:
    """Parse a stored cost string into an exact Decimal.

    Returns None for a missing or unparseable cost.
    """
    if value is None or not value.strip():
        return None
    try:
        parsed = Decimal(value.strip())
    except InvalidOperation:
        return None
    if not parsed.is_finite():
        return None
    return parsed


class MaintenanceRecord(Base):
    """A single piece of service work performed on an asset.

    ``cost`` is stored as decimal text (for example ``"123.45"``) and is never
    converted through binary floating point. Use ``cost_decimal`` for
    arithmetic.
    """

    __tablename__ = "maintenance_records"
    __table_args__ = (
        Index("idx_maintenance_records_asset_id", "asset_id"),
        Index("idx_maintenance_records_service_provider_id", "service_provider_id"),
        Index("idx_maintenance_records_date", "date"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    asset_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("assets.id", ondelete="CASCADE"), nullable=False
    )
    service_provider_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("service_providers.id", ondelete="SET NULL"), nullable=True
    )
    date: Mapped[datetime] = mapped_column(ISODateTime, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    cost: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(ISODateTime, default=utcnow, nullable=False)

    @property
    def cost_decimal(self) -> Decimal | None:
        return parse_cost(self.cost)

    def __repr__(self) -> str:
        return (
            f"<MaintenanceRecord(id={self.id}, asset_id={self.asset_id}, "
            f"date={self.date!r}, cost={self.cost!r})>"
        )
