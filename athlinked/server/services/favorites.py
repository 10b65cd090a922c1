"""
Favorites service.

Coaches shortlist athletes. Adding an athlete twice or removing one that is
not on the list is declined with ``success: false`` rather than failing.
"""

from __future__ import annotations

import uuid
from typing import List

from sqlalchemy.exc import IntegrityError

from athlinked.core.database.entities.favorites import FavoriteAthlete
from athlinked.core.database.entities.users import User, UserType
from athlinked.core.database.repositories import FavoriteRepository, UserRepository
from athlinked.core.exceptions import DomainValidationError, NotFoundError
from athlinked.core.logging_config import get_logger
from athlinked.core.models.io.favorites import FavoriteAthleteRead

from .base import TransactionalService
from .network import ActionOutcome

logger = get_logger(__name__)

ALREADY_FAVORITE = "Athlete is already in favorites"


class FavoritesService(TransactionalService):
    """Service for a coach's favorite athletes."""

    def __init__(self, session):
        super().__init__(session)
        self.users = UserRepository(session)
        self.favorites = FavoriteRepository(session)

    async def add(self, coach: User, athlete_id: uuid.UUID) -> ActionOutcome:
        """
        Put an athlete on the coach's list.

        Raises:
            DomainValidationError: Adding yourself, a caller who is not a coach,
                or a target who is not an athlete.
            NotFoundError: Unknown athlete.
        """
        if coach.id == athlete_id:
            raise DomainValidationError("Cannot add yourself to favorites")
        athlete = await self.users.get_by_id(athlete_id)
        if athlete is None:
            raise NotFoundError("User not found")
        if coach.user_type != UserType.COACH.value:
            raise DomainValidationError("Only coaches can add favorites")
        if athlete.user_type != UserType.ATHLETE.value:
            raise DomainValidationError("Can only add athletes to favorites")
        if await self.favorites.get_pair(coach.id, athlete.id):
            return ActionOutcome(False, ALREADY_FAVORITE)

        coach_id = coach.id
        try:
            async with self.transaction():
                await self.favorites.create(FavoriteAthlete(coach_id=coach.id, athlete_id=athlete.id))
        except IntegrityError:
            await self.reload(coach, athlete)
            return ActionOutcome(False, ALREADY_FAVORITE)
        logger.info(f"Coach {coach_id} added athlete {athlete_id} to favorites")
        return ActionOutcome(True, "Athlete added to favorites successfully")

    async def remove(self, coach: User, athlete_id: uuid.UUID) -> ActionOutcome:
        if await self.users.get_by_id(athlete_id) is None:
            raise NotFoundError("Athlete not found")
        favorite = await self.favorites.get_pair(coach.id, athlete_id)
        if favorite is None:
            return ActionOutcome(False, "Athlete is not in favorites")
        async with self.transaction():
            await self.favorites.delete(favorite.id)
        logger.info(f"Coach {coach.id} removed athlete {athlete_id} from favorites")
        return ActionOutcome(True, "Athlete removed from favorites successfully")

    async def is_favorite(self, coach: User, athlete_id: uuid.UUID) -> bool:
        return await self.favorites.get_pair(coach.id, athlete_id) is not None

    async def list_for(self, coach: User) -> List[FavoriteAthleteRead]:
        """The coach's favorites, most recently added first."""
        rows = await self.favorites.athletes_of(coach.id)
        return [
            FavoriteAthleteRead(
                id=athlete.id,
                username=athlete.username,
                full_name=athlete.full_name,
                user_type=athlete.user_type,
                profile_url=athlete.profile_url,
                bio=athlete.bio,
                primary_sport=athlete.primary_sport,
                sports_played=athlete.sports_played,
                city=athlete.city,
                education=athlete.education,
                favorited_at=favorite.created_at,
            )
            for athlete, favorite in rows
        ]
