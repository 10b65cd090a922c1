"""
Clip repositories.

This module provides data access operations for clips, their comments, likes
and saves, including the visibility-filtered feed query.
"""

from __future__ import annotations

import uuid
from typing import List, Optional, Sequence, Set, Tuple

from sqlalchemy import case, delete, func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.clips import Clip, ClipComment, ClipLike, SavedClip
from ..entities.users import User
from .base import SQLModelRepository


class ClipRepository(SQLModelRepository[Clip]):
    """Repository for ``clips``."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Clip)

    def _visible_clause(self, author_ids: Optional[Sequence[uuid.UUID]]):
        """Featured authors are always visible; ``author_ids`` adds more."""
        featured = User.is_featured == True  # noqa: E712
        if not author_ids:
            return featured
        return or_(featured, Clip.user_id.in_(list(author_ids)))  # type: ignore[attr-defined]

    async def feed(
        self, author_ids: Optional[Sequence[uuid.UUID]], limit: int, offset: int
    ) -> Tuple[List[Tuple[Clip, User]], int]:
        """One page of the feed with the total number of visible clips.

        Args:
            author_ids: Extra authors visible to the viewer besides featured users
            limit: Page size
            offset: Rows to skip

        Returns:
            ``(rows, total)`` where rows pair each clip with its author
        """
        visible = self._visible_clause(author_ids)
        stmt = (
            select(Clip, User)
            .join(User, User.id == Clip.user_id)
            .where(visible)
            .order_by(Clip.created_at.desc())  # type: ignore[attr-defined]
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        rows = [(clip, user) for clip, user in result.all()]

        count_stmt = select(func.count()).select_from(Clip).join(User, User.id == Clip.user_id).where(visible)
        total = (await self.session.execute(count_stmt)).scalar_one()
        return rows, int(total)

    async def by_user(self, user_id: uuid.UUID, limit: int = 50) -> List[Tuple[Clip, User]]:
        stmt = (
            select(Clip, User)
            .join(User, User.id == Clip.user_id)
            .where(Clip.user_id == user_id)
            .order_by(Clip.created_at.desc())  # type: ignore[attr-defined]
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [(clip, user) for clip, user in result.all()]

    async def adjust_counter(self, clip_id: uuid.UUID, column: str, delta: int) -> int:
        """Add ``delta`` to ``like_count`` or ``comment_count`` (floored at 0) and return the new value."""
        target = getattr(Clip, column)
        new_value = target + delta
        stmt = (
            update(Clip)
            .where(Clip.id == clip_id)
            .values({column: case((new_value < 0, 0), else_=new_value)})
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
        clip = await self.session.get(Clip, clip_id)
        await self.session.refresh(clip)
        return getattr(clip, column)


class ClipCommentRepository(SQLModelRepository[ClipComment]):
    """Repository for ``clip_comments``."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ClipComment)

    async def for_clip(self, clip_id: uuid.UUID) -> List[Tuple[ClipComment, User]]:
        """All comments and replies on a clip with their authors, oldest first."""
        stmt = (
            select(ClipComment, User)
            .join(User, User.id == ClipComment.user_id)
            .where(ClipComment.clip_id == clip_id)
            .order_by(ClipComment.created_at.asc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return [(comment, user) for comment, user in result.all()]

    async def delete_for_clip(self, clip_id: uuid.UUID) -> None:
        # Replies first so the self-referencing foreign key never dangles
        await self.session.execute(
            delete(ClipComment).where(
                ClipComment.clip_id == clip_id, ClipComment.parent_comment_id.is_not(None)  # type: ignore[union-attr]
            )
        )
        await self.session.execute(delete(ClipComment).where(ClipComment.clip_id == clip_id))


class ClipLikeRepository(SQLModelRepository[ClipLike]):
    """Repository for ``clip_likes``."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ClipLike)

    async def get_pair(self, clip_id: uuid.UUID, user_id: uuid.UUID) -> Optional[ClipLike]:
        stmt = select(ClipLike).where(ClipLike.clip_id == clip_id, ClipLike.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def liked_clip_ids(self, user_id: uuid.UUID, clip_ids: Sequence[uuid.UUID]) -> Set[uuid.UUID]:
        if not clip_ids:
            return set()
        stmt = select(ClipLike.clip_id).where(
            ClipLike.user_id == user_id, ClipLike.clip_id.in_(list(clip_ids))  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def delete_for_clip(self, clip_id: uuid.UUID) -> None:
        await self.session.execute(delete(ClipLike).where(ClipLike.clip_id == clip_id))


class SavedClipRepository(SQLModelRepository[SavedClip]):
    """Repository for ``saved_clips``."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, SavedClip)

    async def get_pair(self, clip_id: uuid.UUID, user_id: uuid.UUID) -> Optional[SavedClip]:
        stmt = select(SavedClip).where(SavedClip.clip_id == clip_id, SavedClip.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def saved_clip_ids(self, user_id: uuid.UUID, clip_ids: Sequence[uuid.UUID]) -> Set[uuid.UUID]:
        if not clip_ids:
            return set()
        stmt = select(SavedClip.clip_id).where(
            SavedClip.user_id == user_id, SavedClip.clip_id.in_(list(clip_ids))  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def saved_by_user(self, user_id: uuid.UUID, limit: int = 50) -> List[Tuple[Clip, User]]:
        """Clips saved by ``user_id``, most recently saved first."""
        stmt = (
            select(Clip, User)
            .join(SavedClip, SavedClip.clip_id == Clip.id)
            .join(User, User.id == Clip.user_id)
            .where(SavedClip.user_id == user_id)
            .order_by(SavedClip.created_at.desc())  # type: ignore[attr-defined]
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [(clip, user) for clip, user in result.all()]

    async def delete_for_clip(self, clip_id: uuid.UUID) -> None:
        await self.session.execute(delete(SavedClip).where(SavedClip.clip_id == clip_id))
