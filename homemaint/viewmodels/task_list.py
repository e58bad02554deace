"""Task list view model with status and priority filters."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from homemaint.core.config import Settings, get_settings
from homemaint.models import TaskPriority
from homemaint.repositories import MaintenanceTaskRepository
from homemaint.viewmodels.base import ViewModel

if TYPE_CHECKING:
    from homemaint.core.database import Database
    from homemaint.models import MaintenanceTask


class TaskFilter(str, Enum):
    """Which tasks the list shows."""

    ALL = "All"
    PENDING = "Pending"
    OVERDUE = "Overdue"
    UPCOMING = "Upcoming"
    COMPLETED = "Completed"

    def __str__(self) -> str:
        return self.value


class TaskListViewModel(ViewModel):
    """State for the task list screen.

    The status filter picks the repository query; the priority filter and
    the search query (title or description) narrow its result in memory.
    """

    def __init__(self, database: Database, settings: Settings | None = None) -> None:
        super().__init__(database)
        self.settings = settings or get_settings()
        self.tasks: list[MaintenanceTask] = []
        self.search_query = ""
        self.filter_status = TaskFilter.ALL
        self.filter_priority: TaskPriority | None = None

    async def load(self) -> None:
        async with self._loading("Failed to load tasks"):
            async with self.database.session() as session:
                tasks = await self._load_for_filter(MaintenanceTaskRepository(session))

            if self.filter_priority is not None:
                tasks = [t for t in tasks if t.priority == self.filter_priority.value]

            query = self.search_query.strip().casefold()
            if query:
                tasks = [
                    t
                    for t in tasks
                    if query in t.title.casefold()
                    or (t.description is not None and query in t.description.casefold())
                ]
            self.tasks = tasks

    async def _load_for_filter(self, repo: MaintenanceTaskRepository) -> list[MaintenanceTask]:
        match self.filter_status:
            case TaskFilter.PENDING:
                return await repo.find_pending()
            case TaskFilter.OVERDUE:
                return await repo.find_overdue()
            case TaskFilter.UPCOMING:
                return await repo.find_upcoming(days=self.settings.upcoming_task_days)
            case TaskFilter.COMPLETED:
                return await repo.find_completed()
            case _:
                return await repo.find_all()

    async def set_filter(self, task_filter: TaskFilter) -> None:
        self.filter_status = TaskFilter(task_filter)
        await self.load()

    async def set_priority_filter(self, priority: TaskPriority | None) -> None:
        self.filter_priority = TaskPriority(priority) if priority is not None else None
        await self.load()

    async def search(self, query: str) -> None:
        self.search_query = query
        await self.load()

    async def toggle_completion(self, task: MaintenanceTask) -> None:
        """Complete an open task, or reopen a completed one."""
        if task.id is None:
            return
        async with self._handling_errors("Failed to update task"):
            async with self.database.session() as session:
                repo = MaintenanceTaskRepository(session)
                if task.is_completed:
                    await repo.mark_pending(task.id)
                else:
                    await repo.mark_completed(task.id)
            await self.load()

    async def delete_task(self, task: MaintenanceTask) -> None:
        if task.id is None:
            return
        async with self._handling_errors("Failed to delete task"):
            async with self.database.session() as session:
                await MaintenanceTaskRepository(session).delete(task.id)
            await self.load()

    async def refresh(self) -> None:
        await self.load()

    @property
    def overdue_count(self) -> int:
        return sum(1 for task in self.tasks if task.is_overdue)

    @property
    def pending_count(self) -> int:
        return sum(1 for task in self.tasks if not task.is_completed)

    @property
    def completed_count(self) -> int:
        return sum(1 for task in self.tasks if task.is_completed)
