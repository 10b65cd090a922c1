"""
Password hashing and token helpers.

Access tokens are short-lived HS256 JWTs carrying the user's identity.
Refresh tokens are random opaque strings persisted in ``refresh_tokens`` so
they can be revoked.
"""

from __future__ import annotations

import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext

from athlinked.core.database.entities.users import User
from athlinked.core.exceptions import AuthenticationError

from .config import AuthConfig, settings

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(user: User, config: Optional[AuthConfig] = None) -> str:
    """
    Sign an access token for ``user``.

    Args:
        user: The authenticated user
        config: Token settings; defaults to the application settings

    Returns:
        Encoded JWT
    """
    config = config or settings.auth
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "id": str(user.id),
        "email": user.email,
        "username": user.username,
        "user_type": user.user_type,
        "type": ACCESS_TOKEN_TYPE,
        "iat": now,
        "exp": now + timedelta(minutes=config.access_token_expire_minutes),
    }
    return jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)


def decode_access_token(token: str, config: Optional[AuthConfig] = None) -> Dict[str, Any]:
    """
    Verify and decode an access token.

    Raises:
        AuthenticationError: The token is expired, tampered with or not an access token.
    """
    config = config or settings.auth
    try:
        payload = jwt.decode(token, config.jwt_secret, algorithms=[config.jwt_algorithm])
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise AuthenticationError("Invalid token") from e

    if payload.get("type") != ACCESS_TOKEN_TYPE or "id" not in payload:
        raise AuthenticationError("Invalid token")
    return payload


def user_id_from_token(token: str, config: Optional[AuthConfig] = None) -> uuid.UUID:
    payload = decode_access_token(token, config)
    try:
        return uuid.UUID(str(payload["id"]))
    except ValueError as e:
        raise AuthenticationError("Invalid token") from e


def generate_refresh_token() -> str:
    """128 hex characters of randomness."""
    return secrets.token_hex(64)


def refresh_token_expiry(config: Optional[AuthConfig] = None) -> datetime:
    """Naive UTC expiry for a refresh token issued now."""
    config = config or settings.auth
    return datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(days=config.refresh_token_expire_days)
