import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError

from tour_booking.models.user import User
from tour_booking.utils.config import settings
from tour_booking.utils.errors import AppError


logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/users/login", auto_error=False)


def create_token(
    subject: str,
    expires_delta: timedelta | None = None,
    issued_at: datetime | None = None,
) -> str:
    """Create a signed JWT carrying the user id, issuance time and expiration."""
    now = issued_at or datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(days=settings.jwt_expires_in_days)
    payload = {
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    """Decode and verify a JWT; raises `JWTError` (or `ExpiredSignatureError`)."""
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])


def create_send_token(user: User) -> dict:
    """JSend body returned after signup, login and password changes."""
    return {
        "status": "success",
        "token": create_token(subject=str(user.id)),
        "data": {"user": user.to_output()},
    }


def protect(token: str | None = Depends(oauth2_scheme)) -> User:
    """Auth dependency that validates a bearer token and returns its user.

    Token decoding errors propagate to the global error handler. Tokens issued
    before the user's latest password change are rejected.
    """
    if not token:
        raise AppError("You are not logged in! Please log in to get access.", 401)

    payload = decode_token(token)
    user_id = payload.get("sub")
    issued_at = payload.get("iat")
    if user_id is None or issued_at is None:
        raise JWTError("Token is missing required claims")

    user: User | None = User.objects(id=user_id).first()
    if not user:
        raise AppError("The user belonging to this token does no longer exist.", 401)

    if user.changed_password_after(int(issued_at)):
        logger.info("Rejected token issued before password change for user %s", user.id)
        raise AppError("User recently changed password! Please log in again.", 401)

    return user


def restrict_to(*roles: str) -> Callable[..., User]:
    """Return a dependency that only lets users with one of `roles` through."""

    def _dependency(current_user: User = Depends(protect)) -> User:
        if current_user.role not in roles:
            raise AppError("You do not have permission to perform this action", 403)
        return current_user

    return _dependency
