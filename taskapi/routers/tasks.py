from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel

from taskapi.services.session_service import Identity, current_identity
from taskapi.services.task_service import TaskService

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


class TaskCreateRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None


class TaskUpdateRequest(TaskCreateRequest):
    """Only the fields present in the body are applied."""


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(
    req: TaskCreateRequest,
    identity: Identity = Depends(current_identity),
    tasks: TaskService = Depends(get_task_service),
) -> Dict[str, Any]:
    task = await tasks.create_task(identity.id, req.title, req.description, req.status)
    return {"message": "Task created successfully", "task": task}


@router.get("")
async def list_tasks(
    identity: Identity = Depends(current_identity),
    tasks: TaskService = Depends(get_task_service),
) -> Dict[str, Any]:
    return {"tasks": await tasks.list_tasks(identity.id)}


@router.get("/{task_id}")
async def read_task(
    task_id: str,
    identity: Identity = Depends(current_identity),
    tasks: TaskService = Depends(get_task_service),
) -> Dict[str, Any]:
    return {"task": await tasks.get_task(identity.id, task_id)}


@router.put("/{task_id}")
async def update_task(
    task_id: str,
    req: TaskUpdateRequest,
    identity: Identity = Depends(current_identity),
    tasks: TaskService = Depends(get_task_service),
) -> Dict[str, Any]:
    task = await tasks.update_task(identity.id, task_id, req.model_dump(exclude_unset=True))
    return {"message": "Task updated successfully", "task": task}


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    identity: Identity = Depends(current_identity),
    tasks: TaskService = Depends(get_task_service),
) -> Dict[str, Any]:
    await tasks.delete_task(identity.id, task_id)
    return {"message": "Task deleted successfully"}
