"""Repository for MaintenanceTask entity database operations.

Tasks are listed soonest-due first; tasks without a due date sort last.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from homemaint.core.exceptions import InvalidInputError
from homemaint.models import MaintenanceTask, TaskPriority, TaskStatus
from homemaint.models.types import ensure_utc, utcnow
from homemaint.repositories.base import Repository

_BY_DUE_DATE = (MaintenanceTask.due_date.asc().nulls_last(), MaintenanceTask.id)

_STATUSES = frozenset(s.value for s in TaskStatus)
_PRIORITIES = frozenset(p.value for p in TaskPriority)


class MaintenanceTaskRepository(Repository[MaintenanceTask]):
    """Repository for MaintenanceTask entity database operations.

    ``status`` must be one of the TaskStatus values and ``priority``, when
    set, one of the TaskPriority values. Enum members are accepted and stored
    by value.
    """

    model_class = MaintenanceTask
    required_fields = ("title",)

    def validate_fields(self, fields: dict[str, Any]) -> dict[str, Any]:
        fields = dict(fields)
        if "status" in fields:
            fields["status"] = _coerce_choice(fields["status"], "status", _STATUSES)
        if fields.get("priority") is not None:
            fields["priority"] = _coerce_choice(fields["priority"], "priority", _PRIORITIES)
        return fields

    async def find_by_asset_id(self, asset_id: int) -> list[MaintenanceTask]:
        return await self._list(MaintenanceTask.asset_id == asset_id, order_by=_BY_DUE_DATE)

    async def find_by_status(self, status: TaskStatus | str) -> list[MaintenanceTask]:
        status = _coerce_choice(status, "status", _STATUSES)
        return await self._list(MaintenanceTask.status == status, order_by=_BY_DUE_DATE)

    async def find_pending(self) -> list[MaintenanceTask]:
        return await self.find_by_status(TaskStatus.PENDING)

    async def find_completed(self) -> list[MaintenanceTask]:
        return await self.find_by_status(TaskStatus.COMPLETED)

    async def find_by_priority(self, priority: TaskPriority | str) -> list[MaintenanceTask]:
        """Get open (not completed) tasks with the given priority."""
        priority = _coerce_choice(priority, "priority", _PRIORITIES)
        return await self._list(
            MaintenanceTask.priority == priority,
            MaintenanceTask.status != TaskStatus.COMPLETED.value,
            order_by=_BY_DUE_DATE,
        )

    async def find_overdue(self, now: datetime | None = None) -> list[MaintenanceTask]:
        """Get tasks that are not completed and were due before ``now``."""
        now = ensure_utc(now) if now is not None else utcnow()
        return await self._list(
            MaintenanceTask.status != TaskStatus.COMPLETED.value,
            MaintenanceTask.due_date.is_not(None),
            MaintenanceTask.due_date < now,
            order_by=_BY_DUE_DATE,
        )

    async def find_upcoming(
        self, days: int = 30, now: datetime | None = None
    ) -> list[MaintenanceTask]:
        """Get tasks that are not completed and fall due within ``days`` of now."""
        now = ensure_utc(now) if now is not None else utcnow()
        cutoff = now + timedelta(days=days)
        return await self._list(
            MaintenanceTask.status != TaskStatus.COMPLETED.value,
            MaintenanceTask.due_date.is_not(None),
            MaintenanceTask.due_date >= now,
            MaintenanceTask.due_date <= cutoff,
            order_by=_BY_DUE_DATE,
        )

    async def mark_completed(
        self, task_id: int, now: datetime | None = None
    ) -> MaintenanceTask | None:
        """Complete a task and stamp ``completed_at``.

        Returns:
            The updated task, or None if no task has ``task_id``.
        """
        completed_at = ensure_utc(now) if now is not None else utcnow()
        return await self.update(
            task_id, status=TaskStatus.COMPLETED.value, completed_at=completed_at
        )

    async def mark_pending(self, task_id: int) -> MaintenanceTask | None:
        """Reopen a task and clear ``completed_at``."""
        return await self.update(task_id, status=TaskStatus.PENDING.value, completed_at=None)


def _coerce_choice(value: Any, field: str, allowed: frozenset[str]) -> str:
    if isinstance(value, TaskStatus | TaskPriority):
        value = value.value
    if not isinstance(value, str) or value not in allowed:
        raise InvalidInputError(
            f"{field} must be one of: {', '.join(sorted(allowed))}",
            field=field,
            value=value,
            constraint="choice",
        )
    return value
