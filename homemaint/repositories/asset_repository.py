"""Repository for Asset entity database operations.

This module provides the AssetRepository class which extends the generic
Repository base class with asset-specific query methods.

Example:
    async with db.session() as session:
        repo = AssetRepository(session)
        heaters = await repo.search(home.id, "heat")
        expiring = await repo.find_expiring_warranties(home.id, within_days=30)
"""

from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import func, or_, select

from homemaint.models import Asset
from homemaint.models.types import ensure_utc, utcnow
from homemaint.repositories.base import Repository, contains_ci

_BY_NAME = (Asset.name, Asset.id)


class AssetRepository(Repository[Asset]):
    """Repository for Asset entity database operations.

    Provides CRUD operations inherited from Repository base class plus
    lookups by home, category and location, free-text search and warranty
    expiry queries.
    """

    model_class = Asset
    required_fields = ("home_id", "name")

    async def find_by_home_id(self, home_id: int) -> list[Asset]:
        """Get all assets of a home ordered by name."""
        return await self._list(Asset.home_id == home_id, order_by=_BY_NAME)

    async def find_by_category_id(self, category_id: int) -> list[Asset]:
        return await self._list(Asset.category_id == category_id, order_by=_BY_NAME)

    async def find_by_location_id(self, location_id: int) -> list[Asset]:
        return await self._list(Asset.location_id == location_id, order_by=_BY_NAME)

    async def count_by_home_id(self, home_id: int) -> int:
        stmt = select(func.count()).select_from(Asset).where(Asset.home_id == home_id)
        result = await self._execute(stmt, "count")
        return result.scalar_one()

    async def search(self, home_id: int, query: str) -> list[Asset]:
        """Find a home's assets matching a free-text query.

        The match is a case-insensitive substring match against name,
        manufacturer, model number and notes. A blank query returns all of
        the home's assets.

        Args:
            home_id: Home whose assets are searched
            query: Text to look for

        Returns:
            Matching assets ordered by name.
        """
        query = query.strip()
        if not query:
            return await self.find_by_home_id(home_id)

        return await self._list(
            Asset.home_id == home_id,
            or_(
                contains_ci(Asset.name, query),
                contains_ci(Asset.manufacturer, query),
                contains_ci(Asset.model_number, query),
                contains_ci(Asset.notes, query),
            ),
            order_by=_BY_NAME,
        )

    async def find_expiring_warranties(
        self,
        home_id: int,
        within_days: int = 30,
        now: datetime | None = None,
    ) -> list[Asset]:
        """Find assets whose warranty expires on or before now + ``within_days``.

        Warranties that have already expired are included.

        Returns:
            Matching assets ordered by expiration, soonest first.
        """
        now = ensure_utc(now) if now is not None else utcnow()
        cutoff = now + timedelta(days=within_days)
        return await self._list(
            Asset.home_id == home_id,
            Asset.warranty_expiration.is_not(None),
            Asset.warranty_expiration <= cutoff,
            order_by=(Asset.warranty_expiration, Asset.id),
        )
