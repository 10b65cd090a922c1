"""
User and refresh token repositories.

This module provides data access operations for member accounts, including
login lookups, counter adjustments and refresh token bookkeeping.
"""

from __future__ import annotations

import uuid
from typing import List, Optional, Sequence

from sqlalchemy import String, case, cast, func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import utc_now_naive
from ..entities.profile_sections import AcademicBackground
from ..entities.users import RefreshToken, User
from .base import SQLModelRepository

LIKE_ESCAPE = "\\"


def like_pattern(text: str) -> str:
    """Substring pattern for ``text`` with LIKE wildcards taken literally.

    Use it together with ``escape=LIKE_ESCAPE``.
    """
    escaped = text.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _contains(column, text: str):
    return column.ilike(like_pattern(text), escape=LIKE_ESCAPE)


def _directory_order(sort_by: Optional[str]):
    if sort_by == "name":
        return (User.full_name.asc(),)  # type: ignore[union-attr]
    if sort_by == "oldest":
        return (User.created_at.asc(),)  # type: ignore[attr-defined]
    if sort_by == "youngest":
        return (User.dob.desc().nulls_last(), User.created_at.desc())  # type: ignore[union-attr,attr-defined]
    return (User.created_at.desc(),)  # type: ignore[attr-defined]


class UserRepository(SQLModelRepository[User]):
    """Repository for user data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive email lookup."""
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_username(self, username: str) -> Optional[User]:
        """Case-insensitive username lookup."""
        stmt = select(User).where(func.lower(User.username) == username.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_many(self, user_ids: Sequence[uuid.UUID]) -> List[User]:
        if not user_ids:
            return []
        stmt = select(User).where(User.id.in_(list(user_ids)))  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def adjust_counters(self, user_id: uuid.UUID, followers: int = 0, following: int = 0) -> None:
        """Shift the denormalized follow counters, never letting them drop below zero.

        Args:
            user_id: User whose counters change
            followers: Delta applied to ``followers``
            following: Delta applied to ``following``
        """
        new_followers = User.followers + followers
        new_following = User.following + following
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(
                followers=case((new_followers < 0, 0), else_=new_followers),
                following=case((new_following < 0, 0), else_=new_following),
            )
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
        user = await self.session.get(User, user_id)
        if user is not None:
            await self.session.refresh(user)

    async def search_by_name(
        self, query: str, candidate_ids: Sequence[uuid.UUID], limit: int
    ) -> List[User]:
        """Users among ``candidate_ids`` whose username or full name contains ``query``.

        Args:
            query: Case-insensitive substring
            candidate_ids: Restrict the search to these users
            limit: Maximum rows to return

        Returns:
            Matching users ordered by full name
        """
        if not candidate_ids:
            return []
        stmt = (
            select(User)
            .where(User.id.in_(list(candidate_ids)))  # type: ignore[attr-defined]
            .where(or_(_contains(User.username, query), _contains(User.full_name, query)))
            .order_by(User.full_name)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def search_directory(
        self,
        query: Optional[str] = None,
        user_type: Optional[str] = None,
        school: Optional[str] = None,
        city: Optional[str] = None,
        sport: Optional[str] = None,
        sort_by: Optional[str] = None,
        limit: int = 100,
    ) -> List[User]:
        """Filter the member directory. Blank filters are ignored.

        Args:
            query: Substring of the full name or username
            user_type: Exact account kind, case-insensitive
            school: Substring of ``education``
            city: Substring of ``city``
            sport: Primary sport, or one of ``sports_played``
            sort_by: ``name``, ``latest`` (default), ``oldest`` or ``youngest``
            limit: Maximum rows to return
        """
        stmt = select(User)
        if query and query.strip():
            stmt = stmt.where(or_(_contains(User.full_name, query), _contains(User.username, query)))
        if user_type and user_type.strip():
            stmt = stmt.where(func.lower(User.user_type) == user_type.strip().lower())
        if school and school.strip():
            stmt = stmt.where(_contains(User.education, school))
        if city and city.strip():
            stmt = stmt.where(_contains(User.city, city))
        if sport and sport.strip():
            stmt = stmt.where(
                or_(
                    func.lower(User.primary_sport) == sport.strip().lower(),
                    _contains(cast(User.sports_played, String), sport),
                )
            )
        stmt = stmt.order_by(*_directory_order(sort_by)).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_directory(
        self,
        limit: int = 100,
        sort_by: Optional[str] = None,
        user_type: Optional[str] = None,
        school: Optional[str] = None,
    ) -> List[User]:
        """Browse members, optionally narrowed by kind and by a school in their academic history."""
        stmt = select(User)
        if user_type and user_type.strip():
            stmt = stmt.where(func.lower(User.user_type) == user_type.strip().lower())
        if school and school.strip():
            schooled = select(AcademicBackground.user_id).where(_contains(AcademicBackground.school, school))
            stmt = stmt.where(User.id.in_(schooled))  # type: ignore[attr-defined]
        stmt = stmt.order_by(*_directory_order(sort_by)).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class RefreshTokenRepository(SQLModelRepository[RefreshToken]):
    """Repository for refresh token persistence."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, RefreshToken)

    async def find_valid(self, token: str) -> Optional[RefreshToken]:
        """Return the token row if it is neither revoked nor expired."""
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.token == token)
            .where(RefreshToken.revoked_at.is_(None))  # type: ignore[union-attr]
            .where(RefreshToken.expires_at > utc_now_naive())
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def revoke(self, token: str) -> bool:
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.token == token)
            .where(RefreshToken.revoked_at.is_(None))  # type: ignore[union-attr]
            .values(revoked_at=utc_now_naive())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def revoke_all_for_user(self, user_id: uuid.UUID) -> int:
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id)
            .where(RefreshToken.revoked_at.is_(None))  # type: ignore[union-attr]
            .values(revoked_at=utc_now_naive())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def delete_expired(self) -> int:
        """Remove tokens whose lifetime has passed. Returns the number of rows removed."""
        stmt = select(RefreshToken).where(RefreshToken.expires_at <= utc_now_naive())
        result = await self.session.execute(stmt)
        expired = list(result.scalars().all())
        for token in expired:
            await self.session.delete(token)
        await self.session.flush()
        return len(expired)
