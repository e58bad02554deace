"""Application startup and shutdown.

``startup()`` brings the persistence layer up in a fixed order: logging,
database connection, schema migration, first-run seeding, and the attachment
file store. A migration failure is fatal; nothing is returned and the
connection is closed.

Usage:
    async with lifespan() as app:
        async with app.database.session() as session:
            ...
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from homemaint.core.config import Settings, get_settings
from homemaint.core.database import Database
from homemaint.core.exceptions import ConfigurationError, MigrationError
from homemaint.core.logging import get_logger, sanitize_error, setup_logging
from homemaint.services.attachment_service import AttachmentService
from homemaint.services.file_storage import FileStorageService
from homemaint.services.seed_service import SeedDataService

logger = get_logger(__name__)


@dataclass
class AppContext:
    """Everything the presentation layer needs, built once at startup."""

    settings: Settings
    database: Database
    file_storage: FileStorageService
    attachments: AttachmentService

    async def aclose(self) -> None:
        await self.database.close()


async def startup(settings: Settings | None = None) -> AppContext:
    """Initialize logging, the database and the file store.

    Raises:
        MigrationError: If the schema cannot be brought up to date
        StorageError: If the database cannot be opened or seeded
        ConfigurationError: If the upload directory cannot be created
    """
    settings = settings or get_settings()
    setup_logging(settings)

    database = Database(settings.database_url, echo=settings.debug)
    await database.connect()
    try:
        await database.migrate()
        if settings.seed_on_startup:
            async with database.session() as session:
                home = await SeedDataService(session).seed_if_needed()
            logger.info(f"Using home {home.id}: {home.name}")
    except MigrationError:
        logger.critical("Schema migration failed; refusing to start")
        await database.close()
        raise
    except BaseException:
        await database.close()
        raise

    file_storage = FileStorageService(settings.uploads_path, settings.max_upload_bytes)
    try:
        await file_storage.ensure_base_path()
    except OSError as e:
        await database.close()
        raise ConfigurationError(
            f"Upload directory is not usable: {sanitize_error(e)}",
            details={"uploads_path": settings.uploads_path},
        ) from e
    logger.info(f"{settings.app_name} {settings.app_version} started")

    return AppContext(
        settings=settings,
        database=database,
        file_storage=file_storage,
        attachments=AttachmentService(database, file_storage),
    )


@asynccontextmanager
async def lifespan(settings: Settings | None = None) -> AsyncIterator[AppContext]:
    """Run startup(), yield the context, and close the database on exit."""
    app = await startup(settings)
    try:
        yield app
    finally:
        await app.aclose()
        logger.info("Shutdown complete")
