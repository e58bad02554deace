"""Repository for Location entity database operations."""

from __future__ import annotations

from homemaint.models import Location
from homemaint.repositories.base import Repository


class LocationRepository(Repository[Location]):
    model_class = Location
    required_fields = ("home_id", "name")

    async def find_by_home_id(self, home_id: int) -> list[Location]:
        """Get a home's locations ordered by name."""
        return await self._list(Location.home_id == home_id, order_by=(Location.name, Location.id))
