"""Domain errors and their translation to HTTP responses."""

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.config import get_settings

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto a specific HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message is not None:
            self.message = message

    @property
    def headers(self) -> dict[str, str] | None:
        return None

    def to_body(self) -> dict[str, Any]:
        return {"message": self.message}


class ValidationError(AppError):
    """Client input is malformed; carries one entry per violated rule."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    message = "Validation failed"

    def __init__(self, errors: list[dict[str, str]], message: str | None = None):
        super().__init__(message)
        self.errors = errors

    @classmethod
    def from_pydantic(cls, issues: Iterable[dict[str, Any]], skip_prefix: str | None = None):
        """Build from the ``errors()`` list of a pydantic or FastAPI validation error."""
        return cls([_format_issue(issue, skip_prefix) for issue in issues])

    def to_body(self) -> dict[str, Any]:
        return {"message": self.message, "errors": self.errors}


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = "User already exists"


class AuthenticationRequired(AppError):
    """No credential of the expected scheme was presented."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Authentication required"

    def __init__(self, scheme: str, message: str | None = None):
        super().__init__(message)
        self.scheme = scheme

    @property
    def headers(self) -> dict[str, str]:
        return {"WWW-Authenticate": self.scheme}

    def to_body(self) -> dict[str, Any]:
        return {"message": self.message, "authScheme": self.scheme}


class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"

    @property
    def headers(self) -> dict[str, str]:
        return {"WWW-Authenticate": "Basic"}


class InvalidOrExpiredToken(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid or expired token"

    @property
    def headers(self) -> dict[str, str]:
        return {"WWW-Authenticate": "Bearer"}


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Forbidden"


class InternalError(AppError):
    pass


def _format_issue(issue: dict[str, Any], skip_prefix: str | None) -> dict[str, str]:
    loc: Sequence[Any] = issue.get("loc", ())
    if skip_prefix is not None and loc and loc[0] == skip_prefix:
        loc = loc[1:]
    return {
        "field": ".".join(str(part) for part in loc),
        "message": issue.get("msg", "Invalid value"),
        "code": issue.get("type", "invalid"),
    }


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return await app_error_handler(request, ValidationError.from_pydantic(exc.errors(), "body"))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Degrade any unexpected fault (storage, hashing, tokens) to a 500."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    body = InternalError().to_body()
    if not get_settings().is_production:
        body["error"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers that translate errors into response bodies."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
