"""Task tracking module for concurrent asset resolution.

This module provides a simple task tracking service that allows the
concurrent resolver to track, wait for and cancel asynchronous tasks.
"""

from .context import task_service_context, get_task_service
from .service import TaskService

__all__ = ["get_task_service", "task_service_context", "TaskService"]
