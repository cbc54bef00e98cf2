"""Authentication service for credentials, passwords and JWT handling."""

import base64
import binascii
import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.config import get_settings
from src.errors import (
    AuthenticationRequired,
    ConflictError,
    InvalidCredentials,
    InvalidOrExpiredToken,
)
from src.models.user import User

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(user_id: int) -> str:
    """Create a JWT access token asserting the user id."""
    now = datetime.now(UTC)
    to_encode = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_expiration_minutes),
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT token (signature and expiry)."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return payload
    except JWTError:
        return None


def resolve_token_user_id(token: str) -> int:
    """Return the user id asserted by a valid token.

    Raises InvalidOrExpiredToken for a bad signature, an expired token or a
    missing/non-numeric subject.
    """
    payload = decode_access_token(token)
    if payload is None:
        raise InvalidOrExpiredToken()

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError):
        raise InvalidOrExpiredToken() from None


def parse_basic_credentials(authorization: str | None) -> tuple[str, str]:
    """Split a ``Basic base64(email:password)`` header into its parts.

    A missing header or another scheme means no credentials were offered;
    a Basic header that cannot be decoded counts as wrong credentials.
    """
    if not authorization:
        raise AuthenticationRequired("Basic")
    scheme, _, encoded = authorization.partition(" ")
    if scheme.lower() != "basic":
        raise AuthenticationRequired("Basic")

    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        raise InvalidCredentials() from None

    email, separator, password = decoded.partition(":")
    if not separator or not email:
        raise InvalidCredentials()
    return email, password


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def get_user_by_id(db: Session, user_id: int) -> User | None:
    """Get a user by id."""
    return db.query(User).filter(User.id == user_id).first()


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user:
        # Burn a hash so an unknown email takes as long as a wrong password
        pwd_context.dummy_verify()
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def create_user(db: Session, email: str, password: str) -> User:
    """Create a new user, refusing an email that is already registered."""
    if get_user_by_email(db, email):
        raise ConflictError()

    user = User(email=email, password_hash=get_password_hash(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same email
        db.rollback()
        raise ConflictError() from None
    db.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user


def issue_token(db: Session, authorization: str | None) -> str:
    """Exchange a Basic credential header for a signed access token."""
    email, password = parse_basic_credentials(authorization)

    user = authenticate_user(db, email, password)
    if not user:
        logger.info("Token request rejected: invalid credentials")
        raise InvalidCredentials()

    return create_access_token(user.id)
