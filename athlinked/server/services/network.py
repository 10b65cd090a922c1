"""
Social graph service.

Follows are one-directional. A connection is mutual and comes from an
accepted connection request; accepting also makes both users follow each
other. The ``followers``/``following`` counters on ``users`` are kept in step
with the follow rows inside the same transaction.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError

from athlinked.core.database.entities.network import ConnectionRequest, ConnectionRequestStatus, UserConnection, UserFollow
from athlinked.core.database.entities.notifications import NotificationEntity, NotificationType
from athlinked.core.database.entities.users import User
from athlinked.core.database.repositories import (
    ConnectionRepository,
    ConnectionRequestRepository,
    FollowRepository,
    UserRepository,
    ordered_pair,
)
from athlinked.core.exceptions import DomainValidationError, NotFoundError
from athlinked.core.logging_config import get_logger
from athlinked.core.models.io.network import ConnectionRequestRead, NetworkUser
from athlinked.core.models.io.profile import ConnectionStatus

from .base import TransactionalService
from .notifications import NotificationService

logger = get_logger(__name__)


@dataclass
class ActionOutcome:
    """Result of an action that can be declined without being an error."""

    success: bool
    message: str


class NetworkService(TransactionalService):
    """Service for follows and connections."""

    def __init__(self, session):
        super().__init__(session)
        self.users = UserRepository(session)
        self.follows = FollowRepository(session)
        self.requests = ConnectionRequestRepository(session)
        self.connections = ConnectionRepository(session)
        self.notifier = NotificationService(session)

    async def _require_user(self, user_id: uuid.UUID) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    # ------------------------------------------------------------------
    # Follows
    # ------------------------------------------------------------------

    async def follow(self, follower: User, following_id: uuid.UUID) -> ActionOutcome:
        """
        Make ``follower`` follow ``following_id``.

        Returns:
            A declined outcome when the follow already exists.

        Raises:
            DomainValidationError: Following yourself.
            NotFoundError: The target user does not exist.
        """
        if follower.id == following_id:
            raise DomainValidationError("You cannot follow yourself")
        target = await self._require_user(following_id)
        if await self.follows.get_pair(follower.id, target.id):
            return ActionOutcome(False, "Already following this user")

        follower_id = follower.id
        try:
            async with self.transaction():
                await self._add_follow(follower, target)
                await self.notifier.notify(target.id, follower, NotificationType.FOLLOW, NotificationEntity.PROFILE, follower.id)
        except IntegrityError:
            logger.info(f"Concurrent follow of {following_id} by {follower_id} kept the first one")
            await self.reload(follower, target)
            return ActionOutcome(False, "Already following this user")
        logger.info(f"User {follower.id} followed {target.id}")
        return ActionOutcome(True, "User followed successfully")

    async def unfollow(self, follower: User, following_id: uuid.UUID) -> ActionOutcome:
        """
        Stop following ``following_id``.

        Unfollowing a connection also dissolves the connection, drops the
        reverse follow and clears any requests between the two users.
        """
        if follower.id == following_id:
            raise DomainValidationError("You cannot unfollow yourself")
        target = await self._require_user(following_id)
        follow = await self.follows.get_pair(follower.id, target.id)
        connection = await self.connections.get_pair(follower.id, target.id)
        if follow is None and connection is None:
            return ActionOutcome(False, "Not following this user")

        async with self.transaction():
            if follow is not None:
                await self._remove_follow(follow)
            if connection is not None:
                await self._dissolve_connection(connection, follower.id, target.id)
        logger.info(f"User {follower.id} unfollowed {target.id}")
        return ActionOutcome(True, "User unfollowed successfully")

    async def followers(self, user_id: uuid.UUID) -> List[NetworkUser]:
        rows = await self.follows.followers_of(user_id)
        return [self._network_user(user, follow.created_at) for user, follow in rows]

    async def following(self, user_id: uuid.UUID) -> List[NetworkUser]:
        """Users ``user_id`` follows, most recent follow first, then connections not followed, by name."""
        listed = {user.id: self._network_user(user, follow.created_at) for user, follow in await self.follows.followed_by(user_id)}
        missing = [other for other in await self.connections.connected_user_ids(user_id) if other not in listed]
        extra = sorted(
            (self._network_user(user) for user in await self.users.get_many(missing)),
            key=lambda item: (item.full_name or item.username or "").lower(),
        )
        return list(listed.values()) + extra

    async def follow_counts(self, user_id: uuid.UUID) -> Tuple[int, int]:
        """``(followers, following)`` from the denormalized counters."""
        user = await self._require_user(user_id)
        return user.followers, user.following

    async def is_following(self, follower_id: uuid.UUID, following_id: uuid.UUID) -> bool:
        """True when a follow row exists or the two users are connected."""
        if await self.follows.get_pair(follower_id, following_id) is not None:
            return True
        return await self.is_connected(follower_id, following_id)

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------

    async def send_connection_request(self, requester: User, receiver_id: uuid.UUID) -> ActionOutcome:
        """
        Ask ``receiver_id`` to connect.

        Declined when the users are already connected or a request is pending
        in either direction. A stale request row for the same direction is
        reopened instead of duplicated.
        """
        if requester.id == receiver_id:
            raise DomainValidationError("You cannot send a connection request to yourself")
        receiver = await self._require_user(receiver_id)
        if await self.connections.get_pair(requester.id, receiver.id):
            return ActionOutcome(False, "Already connected with this user")
        if await self.requests.pending_between(requester.id, receiver.id):
            return ActionOutcome(False, "Connection request already pending")

        requester_id = requester.id
        try:
            async with self.transaction():
                existing = await self.requests.get_pair(requester.id, receiver.id)
                if existing is not None:
                    existing.status = ConnectionRequestStatus.PENDING.value
                    await self.requests.update(existing)
                else:
                    await self.requests.create(ConnectionRequest(requester_id=requester.id, receiver_id=receiver.id))
                await self.notifier.notify(
                    receiver.id, requester, NotificationType.CONNECTION_REQUEST, NotificationEntity.PROFILE, requester.id
                )
        except IntegrityError:
            logger.info(f"Concurrent connection request from {requester_id} to {receiver_id} kept the first one")
            await self.reload(requester, receiver)
            return ActionOutcome(False, "Connection request already pending")
        logger.info(f"User {requester.id} sent a connection request to {receiver.id}")
        return ActionOutcome(True, "Connection request sent successfully")

    async def connection_requests(self, user_id: uuid.UUID) -> List[ConnectionRequestRead]:
        """Pending requests addressed to ``user_id``, newest first."""
        rows = await self.requests.incoming_pending(user_id)
        return [
            ConnectionRequestRead(
                id=request.id,
                requester_id=request.requester_id,
                receiver_id=request.receiver_id,
                status=request.status,
                created_at=request.created_at,
                requester_username=user.username,
                requester_full_name=user.full_name,
                requester_profile_url=user.profile_url,
                requester_user_type=user.user_type,
            )
            for request, user in rows
        ]

    async def accept_connection_request(self, request_id: uuid.UUID, receiver: User) -> ActionOutcome:
        """
        Accept a pending request addressed to ``receiver``.

        Creates the connection and the follows in both directions.

        Raises:
            NotFoundError: No pending request with that id for this receiver.
        """
        request = await self._pending_request_for(request_id, receiver)
        requester = await self._require_user(request.requester_id)

        async with self.transaction():
            request.status = ConnectionRequestStatus.ACCEPTED.value
            await self.requests.update(request)
            if await self.follows.get_pair(requester.id, receiver.id) is None:
                await self._add_follow(requester, receiver)
            if await self.follows.get_pair(receiver.id, requester.id) is None:
                await self._add_follow(receiver, requester)
            if await self.connections.get_pair(requester.id, receiver.id) is None:
                first, second = ordered_pair(requester.id, receiver.id)
                names = {requester.id: requester.display_name, receiver.id: receiver.display_name}
                await self.connections.create(
                    UserConnection(user_id_1=first, user_id_2=second, full_name_1=names[first], full_name_2=names[second])
                )
            await self.notifier.notify(
                requester.id, receiver, NotificationType.CONNECTION_ACCEPTED, NotificationEntity.PROFILE, receiver.id
            )
        logger.info(f"User {receiver.id} accepted connection request {request_id}")
        return ActionOutcome(True, "Connection request accepted")

    async def reject_connection_request(self, request_id: uuid.UUID, receiver: User) -> ActionOutcome:
        request = await self._pending_request_for(request_id, receiver)
        async with self.transaction():
            await self.requests.delete(request.id)
        logger.info(f"User {receiver.id} rejected connection request {request_id}")
        return ActionOutcome(True, "Connection request rejected")

    async def connection_status(self, requester_id: uuid.UUID, receiver_id: uuid.UUID) -> Tuple[bool, Optional[str]]:
        """
        State of the relationship from ``requester_id`` towards ``receiver_id``.

        Returns:
            ``(True, "connected")`` for connected users, ``(True, status)`` when
            a request row exists in this direction, otherwise ``(False, None)``
        """
        if await self.connections.get_pair(requester_id, receiver_id):
            return True, "connected"
        request = await self.requests.get_pair(requester_id, receiver_id)
        if request is not None:
            return True, request.status
        return False, None

    async def connections_of(self, user_id: uuid.UUID) -> List[NetworkUser]:
        users = await self.users.get_many(await self.connections.connected_user_ids(user_id))
        return sorted((self._network_user(user) for user in users), key=lambda item: (item.full_name or "").lower())

    async def is_connected(self, user_a: uuid.UUID, user_b: uuid.UUID) -> bool:
        return await self.connections.get_pair(user_a, user_b) is not None

    async def remove_connection(self, user: User, other_id: uuid.UUID) -> ActionOutcome:
        """Dissolve a connection and the mutual follows it created."""
        connection = await self.connections.get_pair(user.id, other_id)
        if connection is None:
            return ActionOutcome(False, "Connection not found")

        async with self.transaction():
            for follower_id, following_id in ((user.id, other_id), (other_id, user.id)):
                follow = await self.follows.get_pair(follower_id, following_id)
                if follow is not None:
                    await self._remove_follow(follow)
            await self._dissolve_connection(connection, user.id, other_id)
        logger.info(f"User {user.id} removed connection with {other_id}")
        return ActionOutcome(True, "Connection removed successfully")

    async def relationship(self, viewer_id: uuid.UUID, user_id: uuid.UUID) -> ConnectionStatus:
        """How ``viewer_id`` relates to the owner of a profile page."""
        connected = await self.is_connected(viewer_id, user_id)
        pending = await self.requests.pending_between(viewer_id, user_id)
        return ConnectionStatus(
            is_following=await self.is_following(viewer_id, user_id),
            is_connected=connected,
            request_status=pending.status if pending is not None else None,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _pending_request_for(self, request_id: uuid.UUID, receiver: User) -> ConnectionRequest:
        request = await self.requests.get_by_id(request_id)
        if (
            request is None
            or request.receiver_id != receiver.id
            or request.status != ConnectionRequestStatus.PENDING.value
        ):
            raise NotFoundError("Connection request not found")
        return request

    async def _add_follow(self, follower: User, target: User) -> None:
        await self.follows.create(
            UserFollow(
                follower_id=follower.id,
                following_id=target.id,
                follower_username=follower.display_name,
                following_username=target.display_name,
            )
        )
        await self.users.adjust_counters(follower.id, following=1)
        await self.users.adjust_counters(target.id, followers=1)

    async def _remove_follow(self, follow: UserFollow) -> None:
        follower_id, following_id = follow.follower_id, follow.following_id
        await self.follows.delete(follow.id)
        await self.users.adjust_counters(follower_id, following=-1)
        await self.users.adjust_counters(following_id, followers=-1)

    async def _dissolve_connection(self, connection: UserConnection, user_a: uuid.UUID, user_b: uuid.UUID) -> None:
        reverse = await self.follows.get_pair(user_b, user_a)
        if reverse is not None:
            await self._remove_follow(reverse)
        await self.connections.delete(connection.id)
        await self.requests.delete_between(user_a, user_b)

    @staticmethod
    def _network_user(user: User, followed_at=None) -> NetworkUser:
        return NetworkUser(
            id=user.id,
            username=user.username,
            full_name=user.full_name,
            profile_url=user.profile_url,
            user_type=user.user_type,
            primary_sport=user.primary_sport,
            followed_at=followed_at,
        )
