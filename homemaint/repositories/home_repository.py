"""Repository for Home entity database operations."""

from __future__ import annotations

from homemaint.models import Home
from homemaint.repositories.base import Repository


class HomeRepository(Repository[Home]):
    """Repository for Home entity database operations.

    Example:
        async with db.session() as session:
            repo = HomeRepository(session)
            home = await repo.get_first()
            if home is None:
                home = await repo.create(name="My Home")
    """

    model_class = Home
    required_fields = ("name",)

    async def get_first(self) -> Home | None:
        """Return the home with the lowest id, or None if there are no homes."""
        homes = await self._list(order_by=(Home.id,), limit=1)
        return homes[0] if homes else None
