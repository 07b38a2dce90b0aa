"""Password hashing and access token utilities."""
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from hr_workflow.config import settings


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Example:
        >>> hashed = hash_password("password123")
        >>> hashed.startswith("$2b$")
        True
    """
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a bcrypt hash."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8"),
    )


def create_access_token(
    user_id: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed access token for a user.

    The role claim is informational; the principal's role is always
    re-read from the user record when the token is used.

    Args:
        user_id: User ID stored in the ``sub`` claim
        role: User role stored in the ``role`` claim
        expires_delta: Optional custom lifetime

    Returns:
        Encoded JWT
    """
    now = datetime.utcnow()
    expire = now + (expires_delta or timedelta(minutes=settings.jwt_expiration_minutes))

    claims = {
        "sub": user_id,
        "role": role,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_access_token(token: str) -> str:
    """
    Verify an access token and return the user ID it was issued to.

    Raises:
        JWTError: If the token is invalid, expired or has no subject
    """
    payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    user_id = payload.get("sub")
    if user_id is None:
        raise JWTError("Token payload missing 'sub' claim")
    return user_id
