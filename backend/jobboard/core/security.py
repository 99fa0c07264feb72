"""
Security utilities for authentication and authorization.

Provides password hashing (bcrypt) and JWT session token management.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from jwt.exceptions import InvalidTokenError
from passlib.context import CryptContext

from jobboard.core.config import settings
from jobboard.core.errors import ConfigurationError, InvalidToken

# Password hashing context using bcrypt with a fixed work factor
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The hashed password to compare against

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: The plain text password to hash

    Returns:
        The salted hash string
    """
    return pwd_context.hash(password)


def ensure_signing_secret() -> str:
    """Return the signing secret, failing loudly if it is not configured."""
    if not settings.SECRET_KEY:
        raise ConfigurationError("SECRET_KEY is not defined")
    return settings.SECRET_KEY


def create_access_token(
    subject_id: int,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed session token.

    Args:
        subject_id: The user id carried in the ``sub`` claim
        role: The user's role, carried in the ``role`` claim
        expires_delta: Optional custom lifetime, defaults to the configured TTL

    Returns:
        The encoded JWT token string
    """
    secret = ensure_signing_secret()

    issued_at = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        # PyJWT requires ``sub`` to be a string
        "sub": str(subject_id),
        "role": getattr(role, "value", role),
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    }

    return jwt.encode(to_encode, secret, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Decode and validate a session token.

    Raises:
        InvalidToken: if the signature is wrong, the token is malformed
            or it has expired
    """
    secret = ensure_signing_secret()
    try:
        return jwt.decode(token, secret, algorithms=[settings.ALGORITHM])
    except InvalidTokenError as e:
        raise InvalidToken(str(e)) from e
