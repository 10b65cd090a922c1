"""
Profile sections service.

Every profile section (academic backgrounds, achievements, social handles
and so on) follows the same rules: anyone can list a user's rows, only the
owner can add, change or remove them. ``SectionDefinition`` describes one
section and ``ProfileSectionService`` applies the rules to it.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Dict, List, Tuple, Type

from athlinked.core.database.entities.profile_sections import (
    AcademicBackground,
    Achievement,
    AthleticPerformance,
    CharacterLeadership,
    CompetitionClub,
    HealthReadiness,
    ProfileSectionBase,
    SocialHandle,
    VideoMedia,
)
from athlinked.core.database.entities.users import User
from athlinked.core.database.repositories import ProfileSectionRepository
from athlinked.core.exceptions import DomainValidationError, NotFoundError, PermissionDeniedError
from athlinked.core.logging_config import get_logger
from athlinked.core.models.io import profile_sections as io
from athlinked.core.models.io.common import CamelInput, CamelModel

from .base import TransactionalService

logger = get_logger(__name__)


@dataclass(frozen=True)
class SectionDefinition:
    """Static description of one profile section.

    ``slug`` is the path segment used by the API, ``label`` the singular name
    used in messages and ``required_fields`` the columns that must stay set.
    """

    slug: str
    label: str
    entity: Type[ProfileSectionBase]
    create_schema: Type[CamelInput]
    update_schema: Type[CamelInput]
    read_schema: Type[CamelModel]
    required_fields: Tuple[str, ...] = ()


ACADEMIC_BACKGROUNDS = SectionDefinition(
    slug="academic-backgrounds",
    label="Academic background",
    entity=AcademicBackground,
    create_schema=io.AcademicBackgroundCreate,
    update_schema=io.AcademicBackgroundFields,
    read_schema=io.AcademicBackgroundRead,
    required_fields=("school",),
)
ACHIEVEMENTS = SectionDefinition(
    slug="achievements",
    label="Achievement",
    entity=Achievement,
    create_schema=io.AchievementCreate,
    update_schema=io.AchievementFields,
    read_schema=io.AchievementRead,
    required_fields=("title",),
)
ATHLETIC_PERFORMANCE = SectionDefinition(
    slug="athletic-performance",
    label="Athletic performance",
    entity=AthleticPerformance,
    create_schema=io.AthleticPerformanceCreate,
    update_schema=io.AthleticPerformanceFields,
    read_schema=io.AthleticPerformanceRead,
)
COMPETITION_CLUBS = SectionDefinition(
    slug="competition-clubs",
    label="Competition club",
    entity=CompetitionClub,
    create_schema=io.CompetitionClubCreate,
    update_schema=io.CompetitionClubFields,
    read_schema=io.CompetitionClubRead,
    required_fields=("club_or_travel_team_name",),
)
CHARACTER_LEADERSHIP = SectionDefinition(
    slug="character-leadership",
    label="Character and leadership",
    entity=CharacterLeadership,
    create_schema=io.CharacterLeadershipCreate,
    update_schema=io.CharacterLeadershipFields,
    read_schema=io.CharacterLeadershipRead,
)
HEALTH_READINESS = SectionDefinition(
    slug="health-readiness",
    label="Health and readiness",
    entity=HealthReadiness,
    create_schema=io.HealthReadinessCreate,
    update_schema=io.HealthReadinessFields,
    read_schema=io.HealthReadinessRead,
)
VIDEO_MEDIA = SectionDefinition(
    slug="video-media",
    label="Video and media",
    entity=VideoMedia,
    create_schema=io.VideoMediaCreate,
    update_schema=io.VideoMediaFields,
    read_schema=io.VideoMediaRead,
)
SOCIAL_HANDLES = SectionDefinition(
    slug="social-handles",
    label="Social handle",
    entity=SocialHandle,
    create_schema=io.SocialHandleCreate,
    update_schema=io.SocialHandleFields,
    read_schema=io.SocialHandleRead,
    required_fields=("platform", "url"),
)

SECTIONS: Dict[str, SectionDefinition] = {
    section.slug: section
    for section in (
        ACADEMIC_BACKGROUNDS,
        ACHIEVEMENTS,
        ATHLETIC_PERFORMANCE,
        COMPETITION_CLUBS,
        CHARACTER_LEADERSHIP,
        HEALTH_READINESS,
        VIDEO_MEDIA,
        SOCIAL_HANDLES,
    )
}


class ProfileSectionService(TransactionalService):
    """CRUD for the rows of one profile section."""

    def __init__(self, session, section: SectionDefinition):
        super().__init__(session)
        self.section = section
        self.repository = ProfileSectionRepository(session, section.entity)

    def _read(self, row: ProfileSectionBase) -> CamelModel:
        return self.section.read_schema.model_validate(row)

    async def list_for_user(self, user_id: uuid.UUID) -> List[CamelModel]:
        """Rows of ``user_id``, newest first. Unknown users simply have none."""
        rows = await self.repository.list_for_user(user_id)
        return [self._read(row) for row in rows]

    async def create(self, owner: User, user_id: uuid.UUID, payload: CamelInput) -> CamelModel:
        """
        Add a row to ``user_id``'s profile.

        Args:
            owner: The authenticated caller
            user_id: Profile the row is added to; must be the caller's own
            payload: An instance of the section's create schema

        Raises:
            PermissionDeniedError: ``user_id`` is not the caller.
        """
        if owner.id != user_id:
            raise PermissionDeniedError("You can only add to your own profile")

        row = self.section.entity(user_id=owner.id, **payload.model_dump(exclude_unset=True))
        async with self.transaction():
            row = await self.repository.create(row)
        logger.debug(f"Added {self.section.slug} row {row.id} for user {owner.id}")
        return self._read(row)

    async def update(self, owner: User, item_id: uuid.UUID, payload: CamelInput) -> CamelModel:
        """
        Apply a partial update. Only fields present in the request change.

        Raises:
            NotFoundError: No such row.
            PermissionDeniedError: The row belongs to someone else.
            DomainValidationError: Nothing to update, or a required field was cleared.
        """
        row = await self._owned(owner, item_id)
        changes = payload.model_dump(exclude_unset=True)
        if not changes:
            raise DomainValidationError("No fields provided to update")
        for field in self.section.required_fields:
            if field in changes and changes[field] is None:
                raise DomainValidationError(f"{field} is required")

        async with self.transaction():
            for field, value in changes.items():
                setattr(row, field, value)
            row = await self.repository.update(row)
        return self._read(row)

    async def delete(self, owner: User, item_id: uuid.UUID) -> None:
        row = await self._owned(owner, item_id)
        async with self.transaction():
            await self.repository.delete(row.id)
        logger.debug(f"Deleted {self.section.slug} row {item_id} for user {owner.id}")

    async def _owned(self, owner: User, item_id: uuid.UUID) -> ProfileSectionBase:
        row = await self.repository.get_by_id(item_id)
        if row is None:
            raise NotFoundError(f"{self.section.label} not found")
        if row.user_id != owner.id:
            raise PermissionDeniedError(f"You can only modify your own {self.section.label.lower()}")
        return row
