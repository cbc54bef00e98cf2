"""Task schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import ConfigDict, StrictBool, StringConstraints, field_validator

from src.models.enums import TaskStatus
from src.schemas.base import CamelModel

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 10000

# Whitespace is stripped before the length checks run
Title = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=TITLE_MAX_LENGTH)
]
Description = Annotated[
    str, StringConstraints(strip_whitespace=True, max_length=DESCRIPTION_MAX_LENGTH)
]


class TaskCreate(CamelModel):
    """Create a new task."""

    title: Title
    description: Description | None = None
    status: TaskStatus = TaskStatus.TODO
    is_archived: StrictBool = False


class TaskUpdate(CamelModel):
    """Partial update of a task.

    Only fields present in the request are applied, so callers should dump
    with ``exclude_unset=True``. ``description`` may be set to null to clear
    it; the other fields are required columns and reject an explicit null.
    """

    title: Title | None = None
    description: Description | None = None
    status: TaskStatus | None = None
    is_archived: StrictBool | None = None

    @field_validator("title", "status", "is_archived", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field may not be null")
        return value


class TaskResponse(CamelModel):
    """Task response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None
    status: TaskStatus
    is_archived: bool
    user_id: int
    created_at: datetime
    updated_at: datetime
