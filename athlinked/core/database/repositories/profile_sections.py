"""
Profile section repository.

Every profile section table shares the same access pattern (list a user's
rows newest first, CRUD by id), so one generic repository serves all of them.
"""

from __future__ import annotations

import uuid
from typing import List, Optional, Type

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.profile_sections import AthleticPerformance
from .base import EntityType, SQLModelRepository


class ProfileSectionRepository(SQLModelRepository[EntityType]):
    """Repository for one profile section table."""

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        super().__init__(session, model)

    async def list_for_user(self, user_id: uuid.UUID, limit: Optional[int] = None) -> List[EntityType]:
        """Rows owned by ``user_id``, newest first."""
        return await self.list(limit=limit, filters={"user_id": user_id})


class AthleticPerformanceRepository(ProfileSectionRepository[AthleticPerformance]):
    """Athletic performance rows with the primary-sport lookup used on profile cards."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, AthleticPerformance)

    async def latest_for_user(self, user_id: uuid.UUID, preferred_sport: Optional[str] = None) -> Optional[AthleticPerformance]:
        """Newest row for the user, preferring one recorded for ``preferred_sport``.

        Args:
            user_id: Owner of the rows
            preferred_sport: Sport matched case-insensitively; ignored when None

        Returns:
            The chosen row or None when the user has no performance data
        """
        if preferred_sport:
            stmt = (
                select(AthleticPerformance)
                .where(AthleticPerformance.user_id == user_id)
                .where(AthleticPerformance.sport.ilike(preferred_sport.strip()))  # type: ignore[union-attr]
                .order_by(AthleticPerformance.created_at.desc())  # type: ignore[attr-defined]
                .limit(1)
            )
            result = await self.session.execute(stmt)
            match = result.scalars().first()
            if match is not None:
                return match
        rows = await self.list_for_user(user_id, limit=1)
        return rows[0] if rows else None
