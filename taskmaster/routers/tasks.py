"""Task router."""
from fastapi import APIRouter, Depends, Query
from typing import Optional
from sqlmodel import Session

from taskmaster.db.config import get_session
from taskmaster.errors import ValidationError
from taskmaster.middleware.auth import get_current_user_id
from taskmaster.models.task import TaskStatus
from taskmaster.schemas.task import (
    DeleteResponse,
    TaskCreate,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
)
from taskmaster.services.task_service import TaskService

router = APIRouter(tags=["Tasks"])  # main.py adds the /api prefix


def get_task_service(session: Session = Depends(get_session)) -> TaskService:
    """Dependency for getting TaskService instance."""
    return TaskService(session)


def parse_status_filter(value: Optional[str]) -> Optional[TaskStatus]:
    """An absent or blank filter lists everything; anything else must be a known status."""
    if value is None or not value.strip():
        return None
    try:
        return TaskStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown status: {value}")


@router.post("/tasks", response_model=TaskResponse)
def create_task(
    task_data: TaskCreate,
    owner_id: int = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
):
    """Create a task for the authenticated user."""
    return service.create(owner_id, task_data.title, task_data.description)


@router.get("/tasks", response_model=TaskListResponse)
def list_tasks(
    owner_id: int = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
    status_filter: Optional[str] = Query(None, alias="status", description="Exact status match; blank means no filter"),
):
    """List the authenticated user's tasks, newest first."""
    tasks = service.list(owner_id, parse_status_filter(status_filter))
    return TaskListResponse(
        tasks=[TaskResponse.model_validate(task) for task in tasks],
        total=len(tasks),
    )


@router.get("/tasks/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    owner_id: int = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
):
    """Get one of the authenticated user's tasks."""
    return service.get(owner_id, task_id)


@router.patch("/tasks/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    patch: TaskUpdate,
    owner_id: int = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
):
    """Change only the fields present in the request body."""
    return service.update(owner_id, task_id, patch)


@router.delete("/tasks/{task_id}", response_model=DeleteResponse)
def delete_task(
    task_id: int,
    owner_id: int = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
):
    """Delete a task. Succeeds even when nothing matched."""
    return DeleteResponse(success=service.delete(owner_id, task_id))
