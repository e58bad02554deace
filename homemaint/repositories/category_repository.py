"""Repository for Category entity database operations."""

from __future__ import annotations

from homemaint.models import Category
from homemaint.repositories.base import Repository


class CategoryRepository(Repository[Category]):
    model_class = Category
    required_fields = ("home_id", "name")

    async def find_by_home_id(self, home_id: int) -> list[Category]:
        """Get a home's categories ordered by name."""
        return await self._list(Category.home_id == home_id, order_by=(Category.name, Category.id))
