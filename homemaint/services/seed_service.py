"""Seed data for first launch.

Creates a default home together with a starter set of categories and
locations so a fresh install is not empty. Seeding is idempotent: each step
checks for existing rows before inserting.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from homemaint.core.logging import get_logger
from homemaint.repositories import CategoryRepository, HomeRepository, LocationRepository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from homemaint.models import Home

logger = get_logger(__name__)

DEFAULT_HOME_NAME = "My Home"

# (name, icon)
DEFAULT_CATEGORIES: list[tuple[str, str]] = [
    ("HVAC", "thermometer"),
    ("Plumbing", "drop"),
    ("Electrical", "bolt"),
    ("Appliances", "washer"),
    ("Exterior", "house"),
    ("Interior", "paintbrush"),
    ("Landscaping", "leaf"),
    ("Security", "lock"),
    ("Other", "ellipsis"),
]

# (name, floor)
DEFAULT_LOCATIONS: list[tuple[str, str | None]] = [
    ("Kitchen", "1"),
    ("Living Room", "1"),
    ("Dining Room", "1"),
    ("Master Bedroom", "2"),
    ("Bedroom 2", "2"),
    ("Bathroom 1", "1"),
    ("Bathroom 2", "2"),
    ("Garage", "1"),
    ("Basement", "B"),
    ("Attic", "3"),
    ("Exterior", None),
    ("Yard", None),
]


class SeedDataService:
    """Creates the default home, categories and locations when missing.

    Usage:
        async with db.session() as session:
            home = await SeedDataService(session).seed_if_needed()
    """

    def __init__(self, session: AsyncSession) -> None:
        self.homes = HomeRepository(session)
        self.categories = CategoryRepository(session)
        self.locations = LocationRepository(session)

    async def seed_if_needed(self) -> Home:
        """Seed the database if needed and return the first home.

        Safe to call any number of times: the home is only created when no
        home exists, and categories and locations only when the home has
        none of them.
        """
        home = await self.homes.get_first()
        if home is None:
            logger.info("Creating default home")
            home = await self.homes.create(name=DEFAULT_HOME_NAME)
        else:
            logger.debug(f"Found existing home: {home.name}")

        existing_categories = await self.categories.find_by_home_id(home.id)
        if not existing_categories:
            for name, icon in DEFAULT_CATEGORIES:
                await self.categories.create(home_id=home.id, name=name, icon=icon)
            logger.info(f"Created {len(DEFAULT_CATEGORIES)} default categories")

        existing_locations = await self.locations.find_by_home_id(home.id)
        if not existing_locations:
            for name, floor in DEFAULT_LOCATIONS:
                await self.locations.create(home_id=home.id, name=name, floor=floor)
            logger.info(f"Created {len(DEFAULT_LOCATIONS)} default locations")

        return home

    async def get_or_create_home(self) -> Home:
        """Return the first home, seeding the database when there is none."""
        home = await self.homes.get_first()
        if home is not None:
            return home
        return await self.seed_if_needed()
