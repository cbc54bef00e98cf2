"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.orm import Session

from src.config import get_settings
from src.database import get_db
from src.schemas.auth import RegisterResponse, TokenResponse, UserRegister
from src.services.auth import create_user, issue_token

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user."""
    user = create_user(db, user_data.email, user_data.password)
    return RegisterResponse(user_id=user.id)


@router.post("/token", response_model=TokenResponse)
def token(
    db: Annotated[Session, Depends(get_db)],
    authorization: Annotated[str | None, Header()] = None,
):
    """Exchange Basic credentials (email:password) for a bearer token."""
    access_token = issue_token(db, authorization)
    return TokenResponse(
        token=access_token,
        expires_in=get_settings().token_lifetime_seconds,
    )
