"""Alembic migration environment configuration.

This module configures Alembic to use our SQLAlchemy models. When invoked
through ``Database.migrate()`` the caller's connection is passed in via
``config.attributes``; when invoked from the ``alembic`` command line a
synchronous SQLite engine is built from the configured URL.
"""

import os
from logging.config import fileConfig

from sqlalchemy import Connection, create_engine, pool

from alembic import context
from homemaint.core.database import install_sqlite_pragmas

# Import our models to get the metadata
from homemaint.models import Base

# This is the Alembic Config object
config = context.config

# Interpret the config file for Python logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Set target metadata from our models
target_metadata = Base.metadata

# Default database URL for development
DEFAULT_DATABASE_URL = "sqlite:///./data/homemaint.db"


def get_database_url() -> str:
    """Get database URL from environment or config.

    Priority:
    1. DATABASE_URL environment variable
    2. alembic.ini sqlalchemy.url setting
    """
    url = os.getenv("DATABASE_URL") or config.get_main_option("sqlalchemy.url")
    if not url:
        return DEFAULT_DATABASE_URL
    # Alembic runs synchronously: aiosqlite -> sqlite
    return url.replace("+aiosqlite", "")


def _configure_and_run(connection: Connection) -> None:
    # SQLite cannot roll back a whole multi-revision upgrade as one unit;
    # one transaction per revision keeps each revision and its ledger row atomic
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        transaction_per_migration=True,
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    This configures the context with just a URL and not an Engine.
    Useful for generating SQL scripts without a database connection.
    """
    context.configure(
        url=get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode.

    Uses the connection supplied by the application when there is one,
    otherwise creates an Engine for the configured URL.
    """
    connection = config.attributes.get("connection")
    if connection is not None:
        _configure_and_run(connection)
        return

    connectable = create_engine(get_database_url(), poolclass=pool.NullPool)
    install_sqlite_pragmas(connectable)

    with connectable.connect() as connection:
        _configure_and_run(connection)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
