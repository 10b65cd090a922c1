"""
Authentication service.

Handles account creation, login with email or username, refresh-token
rotation and logout.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError

from athlinked.core.database.entities.users import RefreshToken, User
from athlinked.core.database.repositories import RefreshTokenRepository, UserRepository
from athlinked.core.exceptions import AuthenticationError, ConflictError
from athlinked.core.logging_config import get_logger
from athlinked.core.models.io.auth import SignupRequest
from athlinked.server.core.security import (
    create_access_token,
    generate_refresh_token,
    hash_password,
    refresh_token_expiry,
    verify_password,
)

from .base import TransactionalService

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email/username or password"


@dataclass
class IssuedTokens:
    user: User
    access_token: str
    refresh_token: str


class AuthService(TransactionalService):
    """Service for accounts and sessions."""

    def __init__(self, session):
        super().__init__(session)
        self.users = UserRepository(session)
        self.tokens = RefreshTokenRepository(session)

    async def signup(
        self, data: SignupRequest, device_info: Optional[str] = None, ip_address: Optional[str] = None
    ) -> IssuedTokens:
        """
        Create an account and sign the new user in.

        Args:
            data: Validated signup payload
            device_info: User agent of the signing-up client
            ip_address: Client address

        Returns:
            The new user with a fresh token pair

        Raises:
            ConflictError: The email or username is already registered.
        """
        if await self.users.get_by_email(data.email):
            raise ConflictError("User with this email already exists")
        if data.username and await self.users.get_by_username(data.username):
            raise ConflictError("Username already taken")

        user = User(
            email=data.email,
            username=data.username,
            password_hash=hash_password(data.password),
            full_name=data.full_name.strip(),
            user_type=data.user_type.value,
            parent_email=data.parent_email,
            dob=data.dob,
        )
        try:
            async with self.transaction():
                await self.users.create(user)
                tokens = await self._issue(user, device_info, ip_address)
        except IntegrityError as e:
            raise ConflictError("User with this email or username already exists") from e

        logger.info(f"Created {user.user_type} account {user.id}")
        return tokens

    async def login(
        self, identifier: str, password: str, device_info: Optional[str] = None, ip_address: Optional[str] = None
    ) -> IssuedTokens:
        """
        Authenticate with an email address or a username.

        Input containing ``@`` is treated as an email. Unknown accounts and
        wrong passwords produce the same error.
        """
        identifier = identifier.strip()
        if "@" in identifier:
            user = await self.users.get_by_email(identifier)
        else:
            user = await self.users.get_by_username(identifier)

        if user is None or not verify_password(password, user.password_hash):
            logger.debug("Rejected login attempt")
            raise AuthenticationError(INVALID_CREDENTIALS)

        async with self.transaction():
            tokens = await self._issue(user, device_info, ip_address)
        logger.info(f"User {user.id} logged in")
        return tokens

    async def refresh(
        self, refresh_token: str, device_info: Optional[str] = None, ip_address: Optional[str] = None
    ) -> IssuedTokens:
        """Exchange a valid refresh token for a new pair; the old token is revoked."""
        stored = await self.tokens.find_valid(refresh_token)
        if stored is None:
            raise AuthenticationError("Invalid or expired refresh token")
        user = await self.users.get_by_id(stored.user_id)
        if user is None:
            raise AuthenticationError("Invalid or expired refresh token")

        async with self.transaction():
            await self.tokens.revoke(refresh_token)
            tokens = await self._issue(user, device_info or stored.device_info, ip_address or stored.ip_address)
        return tokens

    async def logout(self, refresh_token: str) -> bool:
        async with self.transaction():
            revoked = await self.tokens.revoke(refresh_token)
        return revoked

    async def logout_all(self, user: User) -> int:
        async with self.transaction():
            count = await self.tokens.revoke_all_for_user(user.id)
        logger.info(f"Revoked {count} refresh tokens for user {user.id}")
        return count

    async def purge_expired_tokens(self) -> int:
        async with self.transaction():
            removed = await self.tokens.delete_expired()
        if removed:
            logger.info(f"Removed {removed} expired refresh tokens")
        return removed

    async def _issue(self, user: User, device_info: Optional[str], ip_address: Optional[str]) -> IssuedTokens:
        token = RefreshToken(
            user_id=user.id,
            token=generate_refresh_token(),
            expires_at=refresh_token_expiry(),
            device_info=device_info,
            ip_address=ip_address,
        )
        await self.tokens.create(token)
        return IssuedTokens(user=user, access_token=create_access_token(user), refresh_token=token.token)
