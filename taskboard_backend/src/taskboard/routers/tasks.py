from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from pydantic import ValidationError

from ..errors import TaskboardError
from ..repositories import TaskRepository, get_task_repository
from ..schemas import TaskCreate, TaskUpdate
from ..utils import read_payload, redirect_back

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tasks"])

# Task mutations never surface failures to the user: errors are logged and
# the browser is sent back to the page it came from.


# PUBLIC_INTERFACE
@router.post(
    "/addtask",
    summary="Add task",
    description="Create a task from task, date, description, time and categoryChoosed.",
    responses={302: {"description": "Redirect back to the referring page"}},
)
def add_task(
    request: Request,
    payload: Dict[str, Any] = Depends(read_payload),
    tasks: TaskRepository = Depends(get_task_repository),
) -> Response:
    try:
        task = tasks.create(TaskCreate.model_validate(payload))
    except (TaskboardError, ValidationError) as exc:
        logger.error("Task creation error: %s", exc)
    else:
        logger.info("Task created: id=%s task=%r", task["id"], task.get("task"))
    return redirect_back(request)


# PUBLIC_INTERFACE
@router.get(
    "/complete-task",
    summary="Complete task",
    description="Mark the task with the given id as completed. Repeating the call is harmless.",
    responses={302: {"description": "Redirect back to the referring page"}},
)
def complete_task(
    request: Request,
    id: Optional[str] = Query(None, description="Task id"),
    tasks: TaskRepository = Depends(get_task_repository),
) -> Response:
    try:
        task = tasks.update_by_id(id, TaskUpdate(completed=True))
    except TaskboardError as exc:
        logger.error("Completion error: %s", exc)
    else:
        logger.info("Task completed: id=%s", task["id"])
    return redirect_back(request)


# PUBLIC_INTERFACE
@router.get(
    "/delete-task",
    summary="Delete task",
    description="Delete the task with the given id.",
    responses={302: {"description": "Redirect back to the referring page"}},
)
def delete_task(
    request: Request,
    id: Optional[str] = Query(None, description="Task id"),
    tasks: TaskRepository = Depends(get_task_repository),
) -> Response:
    try:
        tasks.delete_by_id(id)
    except TaskboardError as exc:
        logger.error("Deletion error: %s", exc)
    else:
        logger.info("Task deleted: id=%s", id)
    return redirect_back(request)
