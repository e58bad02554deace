"""Repository for MaintenanceRecord entity database operations.

Costs are stored as decimal text. The repository accepts ``str``, ``int`` and
``Decimal`` costs, normalizes them to text, and refuses ``float`` so binary
rounding never reaches the database.

Example:
    async with db.session() as session:
        repo = MaintenanceRecordRepository(session)
        await repo.create(asset_id=asset.id, date=now, type="Repair", cost="123.45")
        total = await repo.get_total_cost(asset_id=asset.id)  # Decimal("123.45")
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import select

from homemaint.core.exceptions import DateRangeValidationError, InvalidInputError
from homemaint.models import MaintenanceRecord, parse_cost
from homemaint.models.types import ensure_utc
from homemaint.repositories.base import Repository

_NEWEST_FIRST = (MaintenanceRecord.date.desc(), MaintenanceRecord.id.desc())


def normalize_cost(value: Any) -> str | None:
    """Convert an incoming cost to its stored decimal text form.

    Raises:
        InvalidInputError: If the cost is a float or is not a finite decimal.
    """
    if value is None:
        return None
    if isinstance(value, bool) or isinstance(value, float):
        raise InvalidInputError(
            "cost must be a decimal string or Decimal, not float",
            field="cost",
            value=value,
            constraint="decimal",
        )
    if isinstance(value, int | Decimal):
        value = str(value)
    if not isinstance(value, str):
        raise InvalidInputError(
            "cost must be a decimal string", field="cost", value=value, constraint="decimal"
        )

    text = value.strip()
    if not text:
        return None
    try:
        parsed = Decimal(text)
    except InvalidOperation:
        raise InvalidInputError(
            "cost is not a valid decimal", field="cost", value=value, constraint="decimal"
        ) from None
    if not parsed.is_finite():
        raise InvalidInputError(
            "cost must be finite", field="cost", value=value, constraint="decimal"
        )
    return text


class MaintenanceRecordRepository(Repository[MaintenanceRecord]):
    """Repository for MaintenanceRecord entity database operations.

    Lists are ordered newest first (by service date).
    """

    model_class = MaintenanceRecord
    required_fields = ("asset_id", "date", "type")

    def validate_fields(self, fields: dict[str, Any]) -> dict[str, Any]:
        if "cost" in fields:
            fields = {**fields, "cost": normalize_cost(fields["cost"])}
        return fields

    async def find_by_asset_id(self, asset_id: int) -> list[MaintenanceRecord]:
        return await self._list(MaintenanceRecord.asset_id == asset_id, order_by=_NEWEST_FIRST)

    async def find_by_service_provider_id(self, provider_id: int) -> list[MaintenanceRecord]:
        return await self._list(
            MaintenanceRecord.service_provider_id == provider_id, order_by=_NEWEST_FIRST
        )

    async def find_recent(self, limit: int = 10) -> list[MaintenanceRecord]:
        """Get the ``limit`` most recent records across all assets."""
        if limit < 1:
            raise InvalidInputError(
                "limit must be positive", field="limit", value=limit, constraint="min:1"
            )
        return await self._list(order_by=_NEWEST_FIRST, limit=limit)

    async def find_by_date_range(self, start: datetime, end: datetime) -> list[MaintenanceRecord]:
        """Get records whose service date falls within ``[start, end]``.

        Raises:
            DateRangeValidationError: If start is after end.
        """
        start, end = ensure_utc(start), ensure_utc(end)
        if start > end:
            raise DateRangeValidationError(start_date=start, end_date=end)
        return await self._list(
            MaintenanceRecord.date >= start,
            MaintenanceRecord.date <= end,
            order_by=_NEWEST_FIRST,
        )

    async def get_total_cost(self, asset_id: int | None = None) -> Decimal:
        """Sum the recorded costs exactly, optionally for a single asset.

        Records without a cost contribute nothing.
        """
        stmt = select(MaintenanceRecord.cost).where(MaintenanceRecord.cost.is_not(None))
        if asset_id is not None:
            stmt = stmt.where(MaintenanceRecord.asset_id == asset_id)
        result = await self._execute(stmt, "select")

        total = Decimal("0")
        for cost in result.scalars():
            parsed = parse_cost(cost)
            if parsed is not None:
                total += parsed
        return total
