"""Owner-scoped task use cases."""
from __future__ import annotations

import logging
from typing import Any, Mapping

from taskapi.core.errors import NotFoundError
from taskapi.core.utils import isoformat_utc
from taskapi.db.models import Task
from taskapi.repositories.sql_repository import TaskRepository
from taskapi.services.validation import validate_new_task, validate_task_changes

logger = logging.getLogger(__name__)

TASK_NOT_FOUND = "Task not found"

# ids are SQLite INTEGER PRIMARY KEYs
MAX_TASK_ID = 2**63 - 1


def parse_task_id(value: Any) -> int:
    """
    Turn a path segment into a task id.

    Anything that cannot name a stored row (not a decimal number, zero or
    beyond the integer range of the store) is reported as a missing task.
    """
    if isinstance(value, str):
        value = value.strip()
        if not (value.isascii() and value.isdigit()) or len(value.lstrip("0")) > len(str(MAX_TASK_ID)):
            raise NotFoundError(TASK_NOT_FOUND)
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= MAX_TASK_ID:
        raise NotFoundError(TASK_NOT_FOUND)
    return value


def task_view(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "user_id": task.owner_id,
        "title": task.title,
        "description": task.description,
        "status": task.status,
        "created_at": isoformat_utc(task.created_at),
        "updated_at": isoformat_utc(task.updated_at),
    }


class TaskService:
    """
    CRUD over tasks for a single owner.

    A task owned by someone else is reported exactly like a missing one.
    """

    def __init__(self, repository: TaskRepository):
        self.repository = repository

    async def create_task(self, owner_id: int, title: Any, description: Any = None, status: Any = None) -> dict[str, Any]:
        title, description, status = validate_new_task(title, description, status)
        task = await self.repository.create_task(owner_id, title, description, status)
        logger.info("User %s created task %s", owner_id, task.id)
        return task_view(task)

    async def list_tasks(self, owner_id: int) -> list[dict[str, Any]]:
        return [task_view(task) for task in await self.repository.list_tasks(owner_id)]

    async def get_task(self, owner_id: int, task_id: int | str) -> dict[str, Any]:
        task_id = parse_task_id(task_id)
        task = await self.repository.get_task(owner_id, task_id)
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND)
        return task_view(task)

    async def update_task(self, owner_id: int, task_id: int | str, changes: Mapping[str, Any]) -> dict[str, Any]:
        values = validate_task_changes(changes)
        task_id = parse_task_id(task_id)
        task = await self.repository.update_task(owner_id, task_id, values)
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND)
        logger.info("User %s updated task %s (%s)", owner_id, task_id, ", ".join(sorted(values)))
        return task_view(task)

    async def delete_task(self, owner_id: int, task_id: int | str) -> None:
        task_id = parse_task_id(task_id)
        if not await self.repository.delete_task(owner_id, task_id):
            raise NotFoundError(TASK_NOT_FOUND)
        logger.info("User %s deleted task %s", owner_id, task_id)
