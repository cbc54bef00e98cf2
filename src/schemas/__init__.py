"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import RegisterResponse, TokenResponse, UserRegister
from src.schemas.task import TaskCreate, TaskResponse, TaskUpdate

__all__ = [
    "UserRegister",
    "RegisterResponse",
    "TokenResponse",
    "TaskCreate",
    "TaskUpdate",
    "TaskResponse",
]
