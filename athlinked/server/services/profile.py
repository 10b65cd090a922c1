"""
Profile service.

Reads and edits the user row behind a profile page and assembles the
aggregate profile response.
"""

from __future__ import annotations

import uuid
from typing import Optional

from athlinked.core.database.entities.users import User
from athlinked.core.database.repositories import (
    AthleticPerformanceRepository,
    ConversationRepository,
    MessageRepository,
    UserRepository,
)
from athlinked.core.exceptions import DomainValidationError, NotFoundError
from athlinked.core.logging_config import get_logger
from athlinked.core.models.io.profile import (
    FollowCounts,
    ProfileComplete,
    ProfileImagesUpdate,
    ProfileRead,
    PublicProfileRead,
    ProfileStats,
    ProfileUpdate,
)
from athlinked.core.models.io.profile_sections import AthleticPerformanceRead

from .base import TransactionalService
from .network import NetworkService
from .profile_sections import SECTIONS, ProfileSectionService

logger = get_logger(__name__)

# ProfileComplete field for each section slug
AGGREGATE_FIELDS = {
    "social-handles": "social_handles",
    "academic-backgrounds": "academic_backgrounds",
    "achievements": "achievements",
    "athletic-performance": "athletic_performance",
    "competition-clubs": "competition_clubs",
    "character-leadership": "character_leadership",
    "health-readiness": "health_readiness",
    "video-media": "video_media",
}


class ProfileService(TransactionalService):
    """Service for the user row behind a profile."""

    def __init__(self, session):
        super().__init__(session)
        self.users = UserRepository(session)
        self.performance = AthleticPerformanceRepository(session)
        self.conversations = ConversationRepository(session)
        self.messages = MessageRepository(session)

    async def get_profile(self, user_id: uuid.UUID) -> PublicProfileRead:
        return PublicProfileRead.model_validate(await self._require_user(user_id))

    async def upsert_profile(self, user: User, data: ProfileUpdate) -> ProfileRead:
        """
        Apply a partial update to the caller's profile.

        Only fields present in the request change. A new full name is also
        written to the names cached on messages and conversation participants.

        Raises:
            DomainValidationError: The request carries no fields.
        """
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise DomainValidationError("No profile fields provided to update")

        renamed = "full_name" in changes and changes["full_name"] != user.full_name
        async with self.transaction():
            for field, value in changes.items():
                setattr(user, field, value)
            user = await self.users.update(user)
            if renamed:
                await self.messages.rename_sender(user.id, user.display_name)
                await self.conversations.rename_participant(user.id, user.display_name)

        logger.info(f"Updated profile of user {user.id}: {sorted(changes)}")
        return ProfileRead.model_validate(user)

    async def update_images(self, user: User, data: ProfileImagesUpdate) -> ProfileRead:
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise DomainValidationError("No image URLs provided")

        async with self.transaction():
            if "profile_image_url" in changes:
                user.profile_url = changes["profile_image_url"]
            if "cover_image_url" in changes:
                user.cover_url = changes["cover_image_url"]
            user = await self.users.update(user)
        return ProfileRead.model_validate(user)

    async def get_stats(self, user_id: uuid.UUID) -> ProfileStats:
        """The profile card: user row plus the performance row for their primary sport."""
        user = await self._require_user(user_id)
        performance = await self.performance.latest_for_user(user.id, user.primary_sport)
        return ProfileStats(
            profile=PublicProfileRead.model_validate(user),
            athletic_performance=AthleticPerformanceRead.model_validate(performance) if performance else None,
        )

    async def get_complete(self, user_id: uuid.UUID, viewer: Optional[User] = None) -> ProfileComplete:
        """
        Everything a profile page needs in one response.

        Args:
            user_id: Owner of the profile
            viewer: Authenticated caller, if any; adds the relationship block
                when the viewer is someone else

        Raises:
            NotFoundError: Unknown user.
        """
        user = await self._require_user(user_id)
        sections = {
            AGGREGATE_FIELDS[slug]: await ProfileSectionService(self.session, section).list_for_user(user.id)
            for slug, section in SECTIONS.items()
        }

        connection_status = None
        if viewer is not None and viewer.id != user.id:
            connection_status = await NetworkService(self.session).relationship(viewer.id, user.id)

        return ProfileComplete(
            profile=PublicProfileRead.model_validate(user),
            follow_counts=FollowCounts(followers=user.followers, following=user.following),
            connection_status=connection_status,
            **sections,
        )

    async def _require_user(self, user_id: uuid.UUID) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user
