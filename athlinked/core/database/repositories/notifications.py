"""
Notification and favorite athlete repositories.
"""

from __future__ import annotations

import uuid
from typing import List, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.favorites import FavoriteAthlete
from ..entities.notifications import Notification
from ..entities.users import User
from .base import SQLModelRepository


class NotificationRepository(SQLModelRepository[Notification]):
    """Repository for ``notifications``."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Notification)

    async def for_recipient(self, recipient_id: uuid.UUID, limit: int, offset: int) -> List[Notification]:
        """A page of the recipient's notifications, newest first."""
        return await self.list(limit=limit, offset=offset, filters={"recipient_user_id": recipient_id})

    async def unread_count(self, recipient_id: uuid.UUID) -> int:
        return await self.count(filters={"recipient_user_id": recipient_id, "is_read": False})

    async def get_for_recipient(self, notification_id: uuid.UUID, recipient_id: uuid.UUID) -> Optional[Notification]:
        """The notification, if it exists and belongs to ``recipient_id``."""
        notification = await self.get_by_id(notification_id)
        if notification is None or notification.recipient_user_id != recipient_id:
            return None
        return notification

    async def mark_all_read(self, recipient_id: uuid.UUID) -> int:
        """Flag every unread notification of the recipient as read. Returns how many changed."""
        stmt = (
            update(Notification)
            .where(Notification.recipient_user_id == recipient_id)
            .where(Notification.is_read == False)  # noqa: E712
            .values(is_read=True)
            .execution_options(synchronize_session="evaluate")
        )
        result = await self.session.execute(stmt)
        return result.rowcount


class FavoriteRepository(SQLModelRepository[FavoriteAthlete]):
    """Repository for ``favorite_athletes``."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, FavoriteAthlete)

    async def get_pair(self, coach_id: uuid.UUID, athlete_id: uuid.UUID) -> Optional[FavoriteAthlete]:
        stmt = select(FavoriteAthlete).where(
            FavoriteAthlete.coach_id == coach_id, FavoriteAthlete.athlete_id == athlete_id
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def athletes_of(self, coach_id: uuid.UUID) -> List[Tuple[User, FavoriteAthlete]]:
        """The coach's favorite athletes with their favorite row, most recently added first."""
        stmt = (
            select(User, FavoriteAthlete)
            .join(FavoriteAthlete, FavoriteAthlete.athlete_id == User.id)
            .where(FavoriteAthlete.coach_id == coach_id)
            .order_by(FavoriteAthlete.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return [(user, favorite) for user, favorite in result.all()]
