"""Task API endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user_id
from src.database import get_db
from src.schemas.task import TaskResponse
from src.services import tasks as task_service

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskResponse])
def get_tasks(
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get all tasks owned by the current user."""
    return task_service.list_tasks(db, user_id)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: Annotated[dict[str, Any], Body()],
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[Session, Depends(get_db)],
):
    """Create a new task."""
    task_data = task_service.validate_task_create(payload)
    return task_service.create_task(db, user_id, task_data)


@router.patch("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[Session, Depends(get_db)],
    payload: Annotated[Any, Body()] = None,
):
    """Partially update a task the current user owns.

    The body is validated by the service after the existence and ownership
    checks, so a 404 or 403 takes precedence over field errors.
    """
    return task_service.update_task(db, user_id, task_id, payload)
