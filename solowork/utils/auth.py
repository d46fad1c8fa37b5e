"""Password hashing and access-token helpers."""
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from solowork.config import settings


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Example:
        >>> hash_password("correct horse").startswith("$2b$")
        True
    """
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Check a password against a stored bcrypt hash.

    Returns:
        True if password matches hash, False otherwise
    """
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8"),
    )


def create_access_token(
    user_id: str, expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed JWT for the account owner.

    Args:
        user_id: User ID stored in the ``sub`` claim
        expires_delta: Lifetime of the token; defaults to JWT_EXPIRATION_MINUTES

    Returns:
        Encoded JWT token string
    """
    now = datetime.utcnow()
    lifetime = expires_delta or timedelta(minutes=settings.jwt_expiration_minutes)

    claims = {
        "sub": user_id,
        "iat": now,
        "exp": now + lifetime,
    }

    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_access_token(token: str) -> str:
    """
    Verify a JWT and return the user ID it was issued for.

    Raises:
        JWTError: If token is invalid, expired or has no subject
    """
    payload = jwt.decode(
        token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
    )
    user_id: Optional[str] = payload.get("sub")

    if user_id is None:
        raise JWTError("Token payload missing 'sub' claim")

    return user_id
