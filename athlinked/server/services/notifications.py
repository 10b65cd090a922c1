"""
Notification service.

Other services call ``notify`` inside their own transaction, so a
notification is stored only when the action that caused it commits. Users
are never notified about their own actions.
"""

from __future__ import annotations

import uuid
from typing import List, Optional

from athlinked.core.database.entities.notifications import Notification, NotificationEntity, NotificationType
from athlinked.core.database.entities.users import User
from athlinked.core.database.repositories import NotificationRepository
from athlinked.core.exceptions import NotFoundError
from athlinked.core.logging_config import get_logger
from athlinked.core.models.io.notifications import NotificationRead
from athlinked.server.core.constant import DEFAULT_NOTIFICATION_LIMIT, MAX_NOTIFICATION_LIMIT

from .base import TransactionalService

logger = get_logger(__name__)

NOTIFICATION_MESSAGES = {
    NotificationType.FOLLOW: "{actor} started following you",
    NotificationType.CONNECTION_REQUEST: "{actor} sent you a connection request",
    NotificationType.CONNECTION_ACCEPTED: "{actor} accepted your connection request",
    NotificationType.LIKE: "{actor} liked your clip",
    NotificationType.COMMENT: "{actor} commented on your clip",
}
REPLY_MESSAGE = "{actor} replied to your comment"


class NotificationService(TransactionalService):
    """Service for the notification inbox."""

    def __init__(self, session):
        super().__init__(session)
        self.notifications = NotificationRepository(session)

    async def notify(
        self,
        recipient_id: uuid.UUID,
        actor: User,
        kind: NotificationType,
        entity_type: NotificationEntity,
        entity_id: uuid.UUID,
        message: Optional[str] = None,
    ) -> Optional[Notification]:
        """
        Stage a notification in the caller's transaction.

        Args:
            recipient_id: User to notify
            actor: User who acted
            kind: What happened
            entity_type: Kind of object ``entity_id`` refers to
            entity_id: The profile, clip or comment acted on
            message: Text to show; defaults to the standard text for ``kind``

        Returns:
            The staged row, or None when the actor is the recipient
        """
        if recipient_id == actor.id:
            return None
        template = message or NOTIFICATION_MESSAGES[kind]
        notification = await self.notifications.create(
            Notification(
                recipient_user_id=recipient_id,
                actor_user_id=actor.id,
                actor_full_name=actor.display_name,
                type=kind.value,
                entity_type=entity_type.value,
                entity_id=entity_id,
                message=template.format(actor=actor.display_name),
            )
        )
        logger.debug(f"Notification {notification.id} ({kind.value}) for {recipient_id}")
        return notification

    async def list_for(self, user: User, limit: int = DEFAULT_NOTIFICATION_LIMIT, offset: int = 0) -> List[NotificationRead]:
        """A page of the user's notifications, newest first. ``limit`` is clamped to 1..100."""
        limit = min(max(limit, 1), MAX_NOTIFICATION_LIMIT)
        rows = await self.notifications.for_recipient(user.id, limit, max(offset, 0))
        return [NotificationRead.model_validate(row) for row in rows]

    async def unread_count(self, user: User) -> int:
        return await self.notifications.unread_count(user.id)

    async def mark_as_read(self, notification_id: uuid.UUID, user: User) -> NotificationRead:
        """
        Raises:
            NotFoundError: No such notification for this user.
        """
        notification = await self.notifications.get_for_recipient(notification_id, user.id)
        if notification is None:
            raise NotFoundError("Notification not found")
        async with self.transaction():
            notification.is_read = True
            await self.notifications.update(notification)
        return NotificationRead.model_validate(notification)

    async def mark_all_as_read(self, user: User) -> int:
        user_id = user.id
        async with self.transaction():
            updated = await self.notifications.mark_all_read(user_id)
        logger.info(f"User {user_id} marked {updated} notifications read")
        return updated

    async def delete(self, notification_id: uuid.UUID, user: User) -> None:
        """
        Raises:
            NotFoundError: No such notification for this user.
        """
        notification = await self.notifications.get_for_recipient(notification_id, user.id)
        if notification is None:
            raise NotFoundError("Notification not found")
        async with self.transaction():
            await self.notifications.delete(notification.id)
