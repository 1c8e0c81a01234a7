from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from ..errors import TaskboardError
from ..models import TaskEntity
from ..repositories import TaskRepository, get_task_repository

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(tags=["pages"])


# PUBLIC_INTERFACE
@router.get("/", response_class=HTMLResponse, summary="Registration page")
def index(request: Request) -> Response:
    return templates.TemplateResponse(request, "index.html", {"title": "Register"})


# PUBLIC_INTERFACE
@router.get("/dashboard", response_class=HTMLResponse, summary="Task dashboard")
def dashboard(request: Request, tasks: TaskRepository = Depends(get_task_repository)) -> Response:
    """Render every task with its complete/delete links and the add-task form."""
    items: List[TaskEntity] = []
    try:
        items = tasks.list_all()
    except TaskboardError as exc:
        logger.error("Dashboard listing error: %s", exc)
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {"title": "Dashboard", "tasks": items},
    )
