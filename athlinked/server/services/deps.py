"""
FastAPI dependencies shared by the routers.

Provides the request-scoped database session, the authenticated user taken
from the ``Authorization: Bearer`` header and ready-made service instances.
"""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from athlinked.core.database import get_session, get_session_maker
from athlinked.core.database.entities.users import User
from athlinked.core.exceptions import AuthenticationError
from athlinked.core.logging_config import get_logger
from athlinked.server.core.security import user_id_from_token

from .auth import AuthService
from .clips import ClipsService
from .favorites import FavoritesService
from .messaging import MessagingService
from .network import NetworkService
from .notifications import NotificationService
from .profile import ProfileService
from .realtime import ConnectionManager, MessagingGateway, get_connection_manager
from .search import SearchService

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

SessionDep = Annotated[AsyncSession, Depends(get_session)]
CredentialsDep = Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)]


async def get_current_user(credentials: CredentialsDep, session: SessionDep) -> User:
    """
    Resolve the caller from the bearer token.

    Raises:
        AuthenticationError: No token, an unusable token or a deleted user.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")
    user_id = user_id_from_token(credentials.credentials)
    user = await session.get(User, user_id)
    if user is None:
        raise AuthenticationError("User not found")
    return user


async def get_optional_user(credentials: CredentialsDep, session: SessionDep) -> Optional[User]:
    """The caller when a valid token is sent, otherwise None. Bad tokens count as anonymous."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        user_id = user_id_from_token(credentials.credentials)
    except AuthenticationError as e:
        logger.debug(f"Ignoring unusable token on public endpoint: {e.message}")
        return None
    return await session.get(User, user_id)


CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[Optional[User], Depends(get_optional_user)]


def get_auth_service(session: SessionDep) -> AuthService:
    return AuthService(session)


def get_profile_service(session: SessionDep) -> ProfileService:
    return ProfileService(session)


def get_network_service(session: SessionDep) -> NetworkService:
    return NetworkService(session)


def get_clips_service(session: SessionDep) -> ClipsService:
    return ClipsService(session)


def get_messaging_service(session: SessionDep) -> MessagingService:
    return MessagingService(session)


def get_notification_service(session: SessionDep) -> NotificationService:
    return NotificationService(session)


def get_favorites_service(session: SessionDep) -> FavoritesService:
    return FavoritesService(session)


def get_search_service(session: SessionDep) -> SearchService:
    return SearchService(session)


def get_messaging_gateway(
    connections: Annotated[ConnectionManager, Depends(get_connection_manager)],
    session_maker: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_maker)],
) -> MessagingGateway:
    return MessagingGateway(connections, session_maker)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
NetworkServiceDep = Annotated[NetworkService, Depends(get_network_service)]
ClipsServiceDep = Annotated[ClipsService, Depends(get_clips_service)]
MessagingServiceDep = Annotated[MessagingService, Depends(get_messaging_service)]
MessagingGatewayDep = Annotated[MessagingGateway, Depends(get_messaging_gateway)]
NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]
FavoritesServiceDep = Annotated[FavoritesService, Depends(get_favorites_service)]
SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]
