"""Task service: validation, ownership checks and persistence."""

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from src.errors import Forbidden, NotFound, ValidationError
from src.models.task import Task
from src.schemas.task import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

# Upper bound of the INTEGER primary key column
MAX_TASK_ID = 2**31 - 1


def validate_task_create(payload: Any) -> TaskCreate:
    """Validate a create payload, reporting every violated field."""
    try:
        return TaskCreate.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e.errors()) from None


def validate_task_update(payload: Any) -> dict[str, Any]:
    """Validate a partial update and return only the supplied fields."""
    try:
        update = TaskUpdate.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e.errors()) from None
    return update.model_dump(exclude_unset=True)


def list_tasks(db: Session, user_id: int) -> list[Task]:
    """Get all tasks owned by a user, newest first."""
    return (
        db.query(Task)
        .filter(Task.user_id == user_id)
        .order_by(Task.created_at.desc(), Task.id.desc())
        .all()
    )


def get_task(db: Session, task_id: int) -> Task | None:
    """Get a task by id regardless of owner."""
    if not 1 <= task_id <= MAX_TASK_ID:
        return None
    return db.query(Task).filter(Task.id == task_id).first()


def get_owned_task(db: Session, task_id: int, user_id: int) -> Task:
    """Get a task the user owns.

    Existence is checked before ownership, so a missing task is a 404 and
    someone else's task is a 403.
    """
    task = get_task(db, task_id)
    if task is None:
        raise NotFound("Task not found")
    if task.user_id != user_id:
        logger.warning(f"User {user_id} attempted to modify task {task_id} owned by another user")
        raise Forbidden("You are not authorized to update this task")
    return task


def create_task(db: Session, user_id: int, task_data: TaskCreate) -> Task:
    """Persist a validated task for its owner."""
    task = Task(
        title=task_data.title,
        description=task_data.description,
        status=task_data.status,
        is_archived=task_data.is_archived,
        user_id=user_id,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info(f"User {user_id} created task {task.id}")
    return task


def update_task(db: Session, user_id: int, task_id: int, payload: Any) -> Task:
    """Apply a partial update to a task the user owns.

    The payload is validated only after the ownership check passes.
    """
    task = get_owned_task(db, task_id, user_id)
    changes = validate_task_update(payload)

    for field, value in changes.items():
        setattr(task, field, value)
    task.touch()

    db.commit()
    db.refresh(task)
    logger.info(f"User {user_id} updated task {task.id}: {sorted(changes)}")
    return task
