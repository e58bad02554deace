"""Base class for presentation-state holders.

A view model owns the state one screen renders (its data plus ``is_loading``
and ``error_message``) and exposes coroutine actions that refresh that state
from the repositories. Actions never raise application errors: they record a
user-facing message instead and always reset ``is_loading``.

Callers on an event loop that must not wait for an action (a UI loop, for
example) hand the coroutine to ``schedule()`` and observe the returned task.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Coroutine
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, TypeVar

from homemaint.core.exceptions import HomeMaintError
from homemaint.core.logging import get_logger, sanitize_error

if TYPE_CHECKING:
    from homemaint.core.database import Database

logger = get_logger(__name__)

R = TypeVar("R")


class ViewModel:
    """Shared state and error handling for all view models.

    Attributes:
        database: Database the actions read from and write to
        is_loading: True while a loading action is running
        error_message: Message from the last failed action, if any
    """

    def __init__(self, database: Database) -> None:
        self.database = database
        self.is_loading = False
        self.error_message: str | None = None
        self._tasks: set[asyncio.Task[Any]] = set()

    def schedule(self, action: Coroutine[Any, Any, R]) -> asyncio.Task[R]:
        """Run an action in the background on the running event loop.

        Usage:
            task = view_model.schedule(view_model.load())
            ...
            await task

        Returns:
            The task running the action. A reference is kept until it
            finishes so it is not garbage collected mid-flight.
        """
        task = asyncio.get_running_loop().create_task(action)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @asynccontextmanager
    async def _loading(self, error_prefix: str) -> AsyncIterator[None]:
        """Mark the view model as loading for the duration of the block."""
        self.is_loading = True
        self.error_message = None
        try:
            async with self._handling_errors(error_prefix):
                yield
        finally:
            self.is_loading = False

    @asynccontextmanager
    async def _handling_errors(self, error_prefix: str) -> AsyncIterator[None]:
        """Turn application errors raised in the block into ``error_message``."""
        try:
            yield
        except HomeMaintError as e:
            self.error_message = f"{error_prefix}: {sanitize_error(e)}"
            logger.error(
                f"{type(self).__name__}: {self.error_message}",
                extra={"error_code": e.error_code},
            )
