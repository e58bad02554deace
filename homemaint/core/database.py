"""Database connection and session management using SQLAlchemy 2.0 async patterns.

This module provides SQLite connectivity through the aiosqlite driver. A
``Database`` is constructed explicitly at startup and handed to whatever needs
it; there is no module-level engine.

Every DBAPI connection runs with ``PRAGMA foreign_keys=ON`` and with the
driver's implicit transaction handling switched off, so that SQLAlchemy emits
its own ``BEGIN`` and DDL statements participate in transactions.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.util import CommandError
from sqlalchemy import Connection, Engine, delete, event, table
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from homemaint.core.exceptions import MigrationError, StorageError
from homemaint.core.logging import get_logger, sanitize_error

logger = get_logger(__name__)

ALEMBIC_DIR = Path(__file__).resolve().parent.parent / "alembic"

# Child tables first so foreign keys are never violated mid-reset
RESET_ORDER: tuple[str, ...] = (
    "attachments",
    "tasks",
    "maintenance_records",
    "service_providers",
    "assets",
    "locations",
    "categories",
    "homes",
)


def _is_memory_url(url: str) -> bool:
    """Check if the database URL points at an in-memory SQLite database."""
    return ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:")


def install_sqlite_pragmas(sync_engine: Engine) -> None:
    """Attach the connection and transaction hooks every engine needs.

    Used for the async engine's ``sync_engine`` as well as for the plain engine
    Alembic builds when invoked from the command line.
    """

    @event.listens_for(sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        # Disable the driver's own BEGIN handling; see _on_begin
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    @event.listens_for(sync_engine, "begin")
    def _on_begin(conn: Connection) -> None:
        if conn.get_execution_options().get("isolation_level") == "AUTOCOMMIT":
            return
        conn.exec_driver_sql("BEGIN")


def build_alembic_config(script_location: str | Path | None = None) -> Config:
    """Build an in-memory Alembic config pointing at the packaged migrations."""
    cfg = Config()
    cfg.set_main_option("script_location", str(script_location or ALEMBIC_DIR))
    return cfg


class Database:
    """Handle to the application's SQLite database.

    Usage:
        db = Database(settings.database_url)
        await db.connect()
        await db.migrate()
        async with db.session() as session:
            assets = await AssetRepository(session).find_all()
        await db.close()
    """

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self.url = url
        self.echo = echo
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        """Get the async engine.

        Raises:
            RuntimeError: If connect() has not been called.
        """
        if self._engine is None:
            raise RuntimeError("Database not initialized. Call connect() first.")
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get the async session factory.

        Raises:
            RuntimeError: If connect() has not been called.
        """
        if self._session_factory is None:
            raise RuntimeError("Database not initialized. Call connect() first.")
        return self._session_factory

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    async def connect(self) -> None:
        """Create the engine and session factory.

        The file's parent directory is created if missing. Calling connect()
        twice is a no-op.
        """
        if self._engine is not None:
            return

        engine_kwargs: dict[str, Any] = {"echo": self.echo}
        if _is_memory_url(self.url):
            # One shared connection, otherwise each checkout sees an empty database
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        else:
            _ensure_parent_dir(self.url)

        self._engine = create_async_engine(self.url, **engine_kwargs)
        install_sqlite_pragmas(self._engine.sync_engine)

        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info(f"Database connected: {self.url}")

    async def close(self) -> None:
        """Dispose of the engine and release the connection pool."""
        if self._engine is not None:
            try:
                await self._engine.dispose()
            finally:
                self._engine = None
                self._session_factory = None
            logger.info("Database connection closed")

    async def migrate(self, *, script_location: str | Path | None = None) -> None:
        """Apply all pending schema migrations.

        Each revision runs in its own transaction together with its
        ``alembic_version`` update, so a failed revision leaves the schema at
        the previous revision.

        Raises:
            MigrationError: If any revision fails to apply.
        """
        cfg = build_alembic_config(script_location)

        def _run_upgrade(connection: Connection) -> None:
            cfg.attributes["connection"] = connection
            command.upgrade(cfg, "head")

        try:
            async with self.engine.connect() as conn:
                await conn.run_sync(_run_upgrade)
                await conn.commit()
        except (CommandError, SQLAlchemyError, OSError) as e:
            logger.error(f"Database migration failed: {sanitize_error(e)}")
            raise MigrationError(f"Database migration failed: {sanitize_error(e)}") from e

        logger.info("Database schema is up to date")

    async def current_revision(self) -> str | None:
        """Return the revision recorded in the migration ledger, if any."""

        def _read(connection: Connection) -> str | None:
            return MigrationContext.configure(connection).get_current_revision()

        async with self.engine.connect() as conn:
            return await conn.run_sync(_read)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Get an async database session as a context manager.

        The session commits when the block exits normally and rolls back when
        it raises. Database errors escaping the block are raised as
        StorageError.

        Usage:
            async with db.session() as session:
                repo = HomeRepository(session)
                home = await repo.create(name="My Home")

        Yields:
            AsyncSession: An async SQLAlchemy session.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise StorageError(
                    f"Database transaction failed: {sanitize_error(e)}",
                    operation="commit",
                ) from e
            except Exception:
                await session.rollback()
                raise

    async def optimize(self) -> None:
        """Refresh query planner statistics and reclaim free pages."""
        try:
            async with self.engine.begin() as conn:
                await conn.exec_driver_sql("ANALYZE")
            await self._vacuum()
        except SQLAlchemyError as e:
            raise StorageError(
                f"Database optimization failed: {sanitize_error(e)}", operation="optimize"
            ) from e
        logger.info("Database optimized")

    async def check_integrity(self) -> bool:
        """Run SQLite's integrity check.

        Returns:
            True if the check reports ``ok``.
        """
        try:
            async with self.engine.connect() as conn:
                result = await conn.exec_driver_sql("PRAGMA integrity_check")
                rows = [row[0] for row in result.fetchall()]
        except SQLAlchemyError as e:
            raise StorageError(
                f"Integrity check failed: {sanitize_error(e)}", operation="integrity_check"
            ) from e

        ok = rows == ["ok"]
        if not ok:
            logger.warning(f"Database integrity check reported problems: {rows[:10]}")
        return ok

    async def reset_all_data(self) -> dict[str, int]:
        """Delete every row from every application table.

        Tables are emptied child-first in a single transaction, the
        AUTOINCREMENT counters are reset, and the file is vacuumed afterwards.

        Returns:
            Mapping of table name to number of rows removed.
        """
        removed: dict[str, int] = {}
        try:
            async with self.engine.begin() as conn:
                for name in RESET_ORDER:
                    result = await conn.execute(delete(table(name)))
                    removed[name] = result.rowcount
                await conn.execute(delete(table("sqlite_sequence")))
            await self._vacuum()
        except SQLAlchemyError as e:
            raise StorageError(
                f"Failed to reset data: {sanitize_error(e)}", operation="reset"
            ) from e

        logger.info(f"All data reset: {sum(removed.values())} rows removed")
        return removed

    async def _vacuum(self) -> None:
        # VACUUM cannot run inside a transaction
        async with self.engine.connect() as conn:
            autocommit = await conn.execution_options(isolation_level="AUTOCOMMIT")
            await autocommit.exec_driver_sql("VACUUM")


def _ensure_parent_dir(url: str) -> None:
    _, _, path = url.partition(":///")
    if path:
        Path(path).expanduser().parent.mkdir(parents=True, exist_ok=True)
