"""Pytest configuration and shared fixtures.

This module provides shared test fixtures for all homemaint tests:
- settings: Settings pointing every path into the test's tmp_path
- database: Connected and migrated Database backed by a temporary SQLite file
- session: A session from that database that commits when the test ends
- home: A persisted Home row
- file_storage: FileStorageService rooted in tmp_path

Each test gets its own database file, so tests never share state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from homemaint.core.config import Settings, get_settings
from homemaint.core.database import Database
from homemaint.repositories import HomeRepository
from homemaint.services.file_storage import FileStorageService

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Generator
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncSession

    from homemaint.models import Home


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None]:
    """Make sure no test sees settings cached by another."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated to the test's temporary directory."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'homemaint.db'}",
        uploads_path=str(tmp_path / "uploads"),
        log_file_path=str(tmp_path / "logs" / "homemaint.log"),
        max_upload_bytes=1024,
    )


@pytest.fixture
async def database(settings: Settings) -> AsyncGenerator[Database]:
    """Connected database with all migrations applied."""
    db = Database(settings.database_url)
    await db.connect()
    await db.migrate()
    try:
        yield db
    finally:
        await db.close()


@pytest.fixture
async def session(database: Database) -> AsyncGenerator[AsyncSession]:
    async with database.session() as session:
        yield session


@pytest.fixture
async def home(database: Database) -> Home:
    """A committed home row, usable from any session."""
    async with database.session() as session:
        return await HomeRepository(session).create(name="Test Home")


@pytest.fixture
async def file_storage(settings: Settings) -> FileStorageService:
    storage = FileStorageService(settings.uploads_path, settings.max_upload_bytes)
    await storage.ensure_base_path()
    return storage
