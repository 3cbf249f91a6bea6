"""Tests for the TaskServiceImpl."""

import asyncio
from typing import Any

import pytest

from cluster_assets.task import task_service_context, get_task_service
from cluster_assets.task.service import TaskServiceImpl


@pytest.fixture
def task_service() -> TaskServiceImpl:
    """Fixture for creating a TaskServiceImpl instance."""
    return TaskServiceImpl()


async def test_create_and_complete_task(task_service: TaskServiceImpl) -> None:
    """Test creating and completing a task."""

    async def test_task() -> Any:
        await asyncio.sleep(0.01)
        return "done"

    task = task_service.create_task(test_task(), name="test")
    assert task_service.get_num_active_tasks() == 1

    assert await task == "done"
    await asyncio.sleep(0)
    assert task_service.get_num_active_tasks() == 0


async def test_task_failure(task_service: TaskServiceImpl) -> None:
    """Test a failed task is no longer tracked."""

    async def failing_task() -> Any:
        raise ValueError("Test error")

    task = task_service.create_task(failing_task())
    with pytest.raises(ValueError, match="Test error"):
        await task
    await asyncio.sleep(0)
    assert task_service.get_num_active_tasks() == 0


async def test_cancel_all(task_service: TaskServiceImpl) -> None:
    """Test cancelling every active task."""

    async def cancellable_task() -> Any:
        await asyncio.sleep(10)

    tasks = [task_service.create_task(cancellable_task()) for _ in range(2)]
    await task_service.cancel_all()
    assert all(task.cancelled() for task in tasks)
    await asyncio.sleep(0)
    assert task_service.get_num_active_tasks() == 0


async def test_cancel_all_no_tasks(task_service: TaskServiceImpl) -> None:
    """Test cancelling with nothing running."""
    await task_service.cancel_all()


def test_task_service_context() -> None:
    """Test scoping a task service to a context."""
    service = TaskServiceImpl()
    with task_service_context(service) as active:
        assert active is service
        assert get_task_service() is service
    assert get_task_service() is not service
