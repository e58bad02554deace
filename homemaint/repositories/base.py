"""Generic Repository base class for database access abstraction.

This module provides a type-safe, async-first repository pattern implementation
for the SQLAlchemy models. The generic base class provides the CRUD contract
shared by every record type; entity repositories declare their model, the
fields a new record must carry, and any entity-specific finders.

Example:
    from homemaint.repositories import Repository
    from homemaint.models import Location

    class LocationRepository(Repository[Location]):
        model_class = Location
        required_fields = ("home_id", "name")

        async def find_by_home_id(self, home_id: int) -> list[Location]:
            return await self._list(Location.home_id == home_id)

Repositories never commit. The surrounding ``Database.session()`` block commits
on success and rolls back on error.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

from sqlalchemy import ColumnElement, Integer, String, delete, func, select
from sqlalchemy.exc import SQLAlchemyError

from homemaint.core.exceptions import InvalidInputError, StorageError
from homemaint.core.logging import get_logger, sanitize_error
from homemaint.models.types import ISODateTime, utcnow

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute

    from homemaint.models.home import Base

logger = get_logger(__name__)

# Type variable for the model class
# Bound to Base to ensure only SQLAlchemy models can be used
T = TypeVar("T", bound="Base")

# Columns callers never set through update()
IMMUTABLE_FIELDS: frozenset[str] = frozenset({"id", "created_at"})


def _python_type(column_type: Any) -> type | None:
    if isinstance(column_type, ISODateTime):
        return datetime
    if isinstance(column_type, Integer):
        return int
    if isinstance(column_type, String):
        return str
    return None


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains_ci(column: InstrumentedAttribute[Any], query: str) -> ColumnElement[bool]:
    """Case-insensitive substring match of ``query`` against ``column``."""
    return column.ilike(f"%{escape_like(query)}%", escape="\\")


class Repository(Generic[T]):  # noqa: UP046
    """Generic repository base class providing common CRUD operations.

    Type Parameters:
        T: The SQLAlchemy model class this repository works with.

    Attributes:
        model_class: The SQLAlchemy model class. Must be set by subclasses.
        required_fields: Fields that create() requires to be present and,
                         for strings, non-blank.
        session: The async database session used for all operations.

    Reads always refresh objects already loaded in the session, so rows
    changed by database-side cascades (ON DELETE SET NULL) are never served
    stale from the identity map.
    """

    # Subclasses must set this to their model class
    model_class: type[T]
    required_fields: ClassVar[tuple[str, ...]] = ()

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a database session.

        Args:
            session: An async SQLAlchemy session, normally obtained from
                     ``Database.session()``.
        """
        self.session = session

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find_all(self) -> list[T]:
        """Retrieve every record in insertion (id) order."""
        return await self._list(order_by=(self._pk_column(),))

    async def find_by_id(self, entity_id: int) -> T | None:
        """Retrieve a record by its primary key.

        Returns:
            The record if found, None otherwise.
        """
        stmt = select(self.model_class).where(self._pk_column() == entity_id)
        result = await self._execute(stmt.execution_options(populate_existing=True), "select")
        return result.scalar_one_or_none()

    async def count(self) -> int:
        """Count the total number of records in the table."""
        stmt = select(func.count()).select_from(self.model_class)
        result = await self._execute(stmt, "count")
        return result.scalar_one()

    async def exists(self, entity_id: int) -> bool:
        """Check if a record with the given primary key exists.

        Note:
            More efficient than find_by_id() when only existence matters, as
            it doesn't load the full record.
        """
        stmt = (
            select(func.count())
            .select_from(self.model_class)
            .where(self._pk_column() == entity_id)
        )
        result = await self._execute(stmt, "exists")
        return result.scalar_one() > 0

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, **fields: Any) -> T:
        """Insert a new record.

        Args:
            **fields: Column values for the new record.

        Returns:
            The persisted record with its database-assigned ``id``.

        Raises:
            InvalidInputError: If a required field is missing or blank, a
                               field has the wrong shape, or a field is not a
                               column of the table.
            StorageError: If the database rejects the insert (for example a
                          foreign key referencing a missing parent).
        """
        if "id" in fields:
            raise InvalidInputError(
                "id is assigned by the database", field="id", value=fields["id"]
            )
        self._check_known_fields(fields)
        for name in self.required_fields:
            if name not in fields:
                raise InvalidInputError(f"{name} is required", field=name, constraint="required")
        self._check_required_values(fields)
        fields = self.validate_fields(fields)
        self._check_shapes(fields)

        entity = self.model_class(**fields)
        self.session.add(entity)
        await self._flush("insert")
        await self.session.refresh(entity)
        logger.debug(f"Created {self._table_name()} id={self._pk_value(entity)}")
        return entity

    async def update(self, entity_id: int, **fields: Any) -> T | None:
        """Apply a partial update to a record.

        Only the given fields change. Passing ``None`` for an optional field
        clears it. Tables with an ``updated_at`` column have it refreshed.

        Returns:
            The updated record, or None if no record has ``entity_id``.

        Raises:
            InvalidInputError: If a field is immutable, unknown, or invalid.
            StorageError: If the database rejects the update.
        """
        immutable = IMMUTABLE_FIELDS.intersection(fields)
        if immutable:
            name = sorted(immutable)[0]
            raise InvalidInputError(
                f"{name} cannot be changed", field=name, constraint="immutable"
            )
        self._check_known_fields(fields)
        self._check_required_values(fields)
        fields = self.validate_fields(fields)
        self._check_shapes(fields)

        entity = await self.find_by_id(entity_id)
        if entity is None:
            return None

        for name, value in fields.items():
            setattr(entity, name, value)
        if self._has_column("updated_at"):
            entity.updated_at = utcnow()  # type: ignore[attr-defined]

        await self._flush("update")
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity_id: int) -> bool:
        """Delete a record by its primary key.

        Dependent rows follow the schema's foreign key actions (cascade or
        set null).

        Returns:
            True if a row was removed, False if no record had ``entity_id``.
        """
        stmt = delete(self.model_class).where(self._pk_column() == entity_id)
        result = await self._execute(stmt, "delete")
        removed = (result.rowcount or 0) > 0
        if removed:
            logger.debug(f"Deleted {self._table_name()} id={entity_id}")
        return removed

    async def delete_all(self) -> int:
        """Delete every record in the table.

        Returns:
            The number of rows removed.
        """
        result = await self._execute(delete(self.model_class), "delete")
        return result.rowcount or 0

    # ------------------------------------------------------------------
    # Validation hooks
    # ------------------------------------------------------------------

    def validate_fields(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Check and normalize entity-specific field values.

        Called by create() with the full field set and by update() with only
        the changed fields. Subclasses override this to enforce enumerations
        and value shapes; the returned dict is what gets written.
        """
        return fields

    def _check_known_fields(self, fields: dict[str, Any]) -> None:
        columns = self.model_class.__table__.columns
        for name in fields:
            if name not in columns:
                raise InvalidInputError(
                    f"Unknown field for {self._table_name()}: {name}",
                    field=name,
                    constraint="unknown_field",
                )

    def _check_required_values(self, fields: dict[str, Any]) -> None:
        for name in self.required_fields:
            if name not in fields:
                continue
            value = fields[name]
            if value is None or (isinstance(value, str) and not value.strip()):
                raise InvalidInputError(
                    f"{name} must not be empty", field=name, constraint="not_blank"
                )

    def _check_shapes(self, fields: dict[str, Any]) -> None:
        columns = self.model_class.__table__.columns
        for name, value in fields.items():
            if value is None:
                if not columns[name].nullable:
                    raise InvalidInputError(
                        f"{name} must not be empty", field=name, constraint="not_null"
                    )
                continue
            expected = _python_type(columns[name].type)
            if expected is None:
                continue
            # bool is an int subclass but never a valid integer column value
            if not isinstance(value, expected) or isinstance(value, bool):
                raise InvalidInputError(
                    f"{name} must be {expected.__name__}, got {type(value).__name__}",
                    field=name,
                    value=value,
                    constraint="type",
                )

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    async def _list(
        self,
        *criteria: ColumnElement[bool],
        order_by: tuple[Any, ...] = (),
        limit: int | None = None,
    ) -> list[T]:
        stmt: Select[tuple[T]] = select(self.model_class).where(*criteria)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._execute(stmt.execution_options(populate_existing=True), "select")
        return list(result.scalars().all())

    async def _execute(self, stmt: Any, operation: str) -> Any:
        try:
            return await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise self._storage_error(e, operation) from e

    async def _flush(self, operation: str) -> None:
        try:
            await self.session.flush()
        except SQLAlchemyError as e:
            raise self._storage_error(e, operation) from e

    def _storage_error(self, error: SQLAlchemyError, operation: str) -> StorageError:
        table = self._table_name()
        logger.warning(f"Database {operation} on {table} failed: {sanitize_error(error)}")
        return StorageError(
            f"Failed to {operation} {table}: {sanitize_error(error)}",
            operation=operation,
            table=table,
        )

    def _pk_column(self) -> Any:
        return self.model_class.id  # type: ignore[attr-defined]

    def _has_column(self, name: str) -> bool:
        return name in self.model_class.__table__.columns

    def _table_name(self) -> str:
        return self.model_class.__tablename__

    @staticmethod
    def _pk_value(entity: Any) -> Any:
        return getattr(entity, "id", None)
