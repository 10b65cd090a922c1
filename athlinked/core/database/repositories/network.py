"""
Social graph repositories.

This module provides data access operations for follows, connection requests
and accepted connections.
"""

from __future__ import annotations

import uuid
from typing import List, Optional, Tuple

from sqlalchemy import and_, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.network import ConnectionRequest, ConnectionRequestStatus, UserConnection, UserFollow
from ..entities.users import User
from .base import SQLModelRepository


def ordered_pair(user_a: uuid.UUID, user_b: uuid.UUID) -> Tuple[uuid.UUID, uuid.UUID]:
    """Return the pair with the smaller id first, the storage order of ``user_connections``."""
    return (user_a, user_b) if user_a < user_b else (user_b, user_a)


class FollowRepository(SQLModelRepository[UserFollow]):
    """Repository for ``user_follows``."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserFollow)

    async def get_pair(self, follower_id: uuid.UUID, following_id: uuid.UUID) -> Optional[UserFollow]:
        stmt = select(UserFollow).where(
            UserFollow.follower_id == follower_id, UserFollow.following_id == following_id
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def followers_of(self, user_id: uuid.UUID) -> List[Tuple[User, UserFollow]]:
        """Users following ``user_id`` with their follow row, newest follow first."""
        stmt = (
            select(User, UserFollow)
            .join(UserFollow, UserFollow.follower_id == User.id)
            .where(UserFollow.following_id == user_id)
            .order_by(UserFollow.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return [(user, follow) for user, follow in result.all()]

    async def followed_by(self, user_id: uuid.UUID) -> List[Tuple[User, UserFollow]]:
        """Users that ``user_id`` follows with the follow row."""
        stmt = (
            select(User, UserFollow)
            .join(UserFollow, UserFollow.following_id == User.id)
            .where(UserFollow.follower_id == user_id)
            .order_by(UserFollow.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return [(user, follow) for user, follow in result.all()]

    async def following_ids(self, user_id: uuid.UUID) -> List[uuid.UUID]:
        stmt = select(UserFollow.following_id).where(UserFollow.follower_id == user_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class ConnectionRequestRepository(SQLModelRepository[ConnectionRequest]):
    """Repository for ``connection_requests``."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ConnectionRequest)

    async def get_pair(self, requester_id: uuid.UUID, receiver_id: uuid.UUID) -> Optional[ConnectionRequest]:
        stmt = select(ConnectionRequest).where(
            ConnectionRequest.requester_id == requester_id, ConnectionRequest.receiver_id == receiver_id
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def pending_between(self, user_a: uuid.UUID, user_b: uuid.UUID) -> Optional[ConnectionRequest]:
        """A pending request between the two users, in either direction."""
        stmt = select(ConnectionRequest).where(
            ConnectionRequest.status == ConnectionRequestStatus.PENDING.value,
            or_(
                and_(ConnectionRequest.requester_id == user_a, ConnectionRequest.receiver_id == user_b),
                and_(ConnectionRequest.requester_id == user_b, ConnectionRequest.receiver_id == user_a),
            ),
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def incoming_pending(self, receiver_id: uuid.UUID) -> List[Tuple[ConnectionRequest, User]]:
        """Pending requests addressed to ``receiver_id`` with the requesting user, newest first."""
        stmt = (
            select(ConnectionRequest, User)
            .join(User, User.id == ConnectionRequest.requester_id)
            .where(
                ConnectionRequest.receiver_id == receiver_id,
                ConnectionRequest.status == ConnectionRequestStatus.PENDING.value,
            )
            .order_by(ConnectionRequest.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return [(request, user) for request, user in result.all()]

    async def delete_between(self, user_a: uuid.UUID, user_b: uuid.UUID) -> None:
        stmt = select(ConnectionRequest).where(
            or_(
                and_(ConnectionRequest.requester_id == user_a, ConnectionRequest.receiver_id == user_b),
                and_(ConnectionRequest.requester_id == user_b, ConnectionRequest.receiver_id == user_a),
            )
        )
        result = await self.session.execute(stmt)
        for request in result.scalars().all():
            await self.session.delete(request)
        await self.session.flush()


class ConnectionRepository(SQLModelRepository[UserConnection]):
    """Repository for ``user_connections``."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserConnection)

    async def get_pair(self, user_a: uuid.UUID, user_b: uuid.UUID) -> Optional[UserConnection]:
        first, second = ordered_pair(user_a, user_b)
        stmt = select(UserConnection).where(UserConnection.user_id_1 == first, UserConnection.user_id_2 == second)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def connected_user_ids(self, user_id: uuid.UUID) -> List[uuid.UUID]:
        """Ids of every user connected with ``user_id``."""
        stmt = select(UserConnection).where(
            or_(UserConnection.user_id_1 == user_id, UserConnection.user_id_2 == user_id)
        )
        result = await self.session.execute(stmt)
        return [
            row.user_id_2 if row.user_id_1 == user_id else row.user_id_1 for row in result.scalars().all()
        ]
