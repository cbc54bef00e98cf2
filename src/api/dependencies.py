"""FastAPI dependencies for authentication and database."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.database import get_db
from src.errors import AuthenticationRequired, InvalidOrExpiredToken
from src.services.auth import get_user_by_id, resolve_token_user_id

# auto_error is off so a missing token goes through our own error body
security = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> int:
    """Get the id of the user asserted by the request's bearer token."""
    if credentials is None:
        raise AuthenticationRequired("Bearer")

    user_id = resolve_token_user_id(credentials.credentials)

    if get_user_by_id(db, user_id) is None:
        raise InvalidOrExpiredToken()

    return user_id
