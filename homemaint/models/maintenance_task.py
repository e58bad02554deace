"""Maintenance task model for scheduled or to-do work."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .enums import TaskPriority, TaskStatus
from .home import Base
from .types import ISODateTime, ensure_utc, utcnow


def is_task_overdue(
    due_date: datetime | None, status: str | None, now: datetime | None = None
) -> bool:
    """Check whether a task is past its due date and still open.

    A task is overdue iff it has a due date, its status is not completed, and
    the due date is before ``now``.
    """
    if due_date is None or status == TaskStatus.COMPLETED.value:
        return False
    now = ensure_utc(now) if now is not None else utcnow()
    return ensure_utc(due_date) < now


class MaintenanceTask(Base):
    """A piece of work to be done, optionally attached to an asset.

    Status moves between pending and completed; ``completed_at`` is set when
    the task is completed and cleared when it is reopened.
    """

    __tablename__ = "tasks"
    __table_args__ = (
        Index("idx_tasks_asset_id", "asset_id"),
        Index("idx_tasks_status_due_date", "status", "due_date"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    asset_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("assets.id", ondelete="CASCADE"), nullable=True
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    due_date: Mapped[datetime | None] = mapped_column(ISODateTime, nullable=True)
    priority: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(
        String, default=TaskStatus.PENDING.value, server_default="pending", nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(ISODateTime, default=utcnow, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(ISODateTime, nullable=True)

    @property
    def is_overdue(self) -> bool:
        return is_task_overdue(self.due_date, self.status)

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED.value

    @property
    def status_enum(self) -> TaskStatus:
        return TaskStatus(self.status)

    @property
    def priority_enum(self) -> TaskPriority | None:
        return TaskPriority(self.priority) if self.priority else None

    def __repr__(self) -> str:
        return f"<MaintenanceTask(id={self.id}, title={self.title!r}, status={self.status!r})>"
