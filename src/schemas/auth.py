"""Authentication schemas."""

from pydantic import Field, field_validator
from pydantic.networks import validate_email

from src.schemas.base import CamelModel


class UserRegister(CamelModel):
    """User registration request.

    The email is checked with the same validator as ``EmailStr`` but kept
    exactly as submitted, since token requests look it up byte for byte.
    """

    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=8, max_length=128)

    @field_validator("email")
    @classmethod
    def check_email_syntax(cls, value: str) -> str:
        validate_email(value)
        return value


class RegisterResponse(CamelModel):
    """Registration acknowledgement; never echoes the credentials."""

    message: str = "User registered successfully"
    user_id: int


class TokenResponse(CamelModel):
    """Bearer token issued in exchange for Basic credentials."""

    token: str
    expires_in: int
    token_type: str = "Bearer"  # noqa: S105
