"""
Task API endpoints.

Thin handlers over the caller's TaskViewModel; each response reflects the
view-model's cache after the operation.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from modules.tasks.models import (
    CreateSectionRequest,
    CreateTaskRequest,
    SetDueDateRequest,
    Task,
    TaskListResponse,
)
from modules.tasks.viewmodel import TaskViewModel

from ..dependencies import get_task_view_model
from ..models.errors import ERROR_RESPONSES

router = APIRouter(responses=ERROR_RESPONSES)


def _snapshot(view_model: TaskViewModel) -> TaskListResponse:
    return TaskListResponse(
        tasks=view_model.tasks,
        completed_tasks=view_model.completed_tasks,
        sections=view_model.sections,
    )


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    section: Optional[str] = Query(default=None, description="Only incomplete tasks in this section"),
    view_model: TaskViewModel = Depends(get_task_view_model),
) -> TaskListResponse:
    """List the caller's tasks from the cache."""
    if section is None:
        return _snapshot(view_model)
    return TaskListResponse(
        tasks=view_model.tasks_in_section(section),
        completed_tasks=[],
        sections=view_model.sections,
    )


@router.post("/refresh", response_model=TaskListResponse)
async def refresh_tasks(
    view_model: TaskViewModel = Depends(get_task_view_model),
) -> TaskListResponse:
    """Re-fetch tasks and sections from the backend."""
    await view_model.refresh()
    return _snapshot(view_model)


@router.get("/sections", response_model=list[str])
async def list_sections(
    view_model: TaskViewModel = Depends(get_task_view_model),
) -> list[str]:
    """Re-read the sections, creating the default one if needed."""
    return await view_model.fetch_sections()


@router.post("/sections", response_model=list[str], status_code=201)
async def create_section(
    request: CreateSectionRequest,
    view_model: TaskViewModel = Depends(get_task_view_model),
) -> list[str]:
    return await view_model.add_section(request.name)


@router.post("", response_model=Task, status_code=201)
async def create_task(
    request: CreateTaskRequest,
    view_model: TaskViewModel = Depends(get_task_view_model),
) -> Task:
    return await view_model.add_task(
        request.title,
        description=request.description,
        due_date=request.due_date,
        section=request.section,
    )


@router.get("/{task_id}", response_model=Task)
async def get_task(
    task_id: str,
    view_model: TaskViewModel = Depends(get_task_view_model),
) -> Task:
    return view_model.get_task(task_id)


@router.post("/{task_id}/toggle", response_model=Task)
async def toggle_task(
    task_id: str,
    view_model: TaskViewModel = Depends(get_task_view_model),
) -> Task:
    """Complete an open task or reopen a completed one."""
    return await view_model.toggle_complete(view_model.get_task(task_id))


@router.put("/{task_id}/due-date", response_model=Task)
async def set_due_date(
    task_id: str,
    request: SetDueDateRequest,
    view_model: TaskViewModel = Depends(get_task_view_model),
) -> Task:
    return await view_model.set_due_date(view_model.get_task(task_id), request.due_date)


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: str,
    view_model: TaskViewModel = Depends(get_task_view_model),
) -> None:
    await view_model.delete_task(view_model.get_task(task_id))
