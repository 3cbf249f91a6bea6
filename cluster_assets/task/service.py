"""Task tracking service for concurrent asset resolution.

The concurrent resolver creates one task per asset it generates. The service
keeps track of them so that the first failure can cancel every sibling that is
still running.
"""

import asyncio
from functools import partial
import logging
from typing import Any, Coroutine, Set
from abc import ABC, abstractmethod

_LOGGER = logging.getLogger(__name__)

__all__: list[str] = []


class TaskService(ABC):
    """Service for tracking and waiting for asynchronous tasks."""

    @abstractmethod
    def create_task(
        self, coro: Coroutine[None, None, Any], name: str | None = None
    ) -> asyncio.Task[Any]:
        """Create and track a new task.

        Args:
            coro: The coroutine to run as a task
            name: Optional name of the task, used for debugging

        Returns:
            The created task
        """

    @abstractmethod
    async def cancel_all(self) -> None:
        """Cancel all active tasks and wait for them to finish."""

    @abstractmethod
    def get_num_active_tasks(self) -> int:
        """Get the number of active tasks."""


class TaskServiceImpl(TaskService):
    """Service for tracking and waiting for asynchronous tasks."""

    def __init__(self) -> None:
        """Initialize the task service."""
        self._active_tasks: Set[asyncio.Task[Any]] = set()

    def create_task(
        self, coro: Coroutine[None, None, Any], name: str | None = None
    ) -> asyncio.Task[Any]:
        """Create and track a new task."""
        task = asyncio.create_task(coro, name=name)
        self._active_tasks.add(task)
        task.add_done_callback(partial(self._task_done, self._active_tasks))
        return task

    def _task_done(
        self, task_set: Set[asyncio.Task[Any]], task: asyncio.Task[Any]
    ) -> None:
        """Callback when a task is done."""
        if not task.cancelled() and (err := task.exception()) is not None:
            _LOGGER.debug("Task %s failed: %s", task.get_name(), err)
        task_set.discard(task)

    async def cancel_all(self) -> None:
        """Cancel all active tasks and wait for them to finish."""
        active_tasks = list(self._active_tasks)
        if not active_tasks:
            return
        _LOGGER.debug("Cancelling %d tasks", len(active_tasks))
        for task in active_tasks:
            task.cancel()
        await asyncio.gather(*active_tasks, return_exceptions=True)

    def get_num_active_tasks(self) -> int:
        """Get the number of active tasks."""
        return len(self._active_tasks)
