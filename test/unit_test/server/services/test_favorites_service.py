"""Tests for a coach's favorite athletes in ``FavoritesService``."""

import uuid
from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest

from athlinked.core.database.entities.users import UserType
from athlinked.core.exceptions import DomainValidationError, NotFoundError
from athlinked.server.services.favorites import FavoritesService

pytestmark = pytest.mark.asyncio


@pytest.fixture
def service(session) -> FavoritesService:
    return FavoritesService(session)


class TestAddFavorite:
    async def test_coach_adds_athlete_once(self, service, make_user):
        coach = await make_user(user_type=UserType.COACH)
        athlete = await make_user()

        first = await service.add(coach, athlete.id)
        second = await service.add(coach, athlete.id)

        assert (first.success, first.message) == (True, "Athlete added to favorites successfully")
        assert (second.success, second.message) == (False, "Athlete is already in favorites")
        assert await service.is_favorite(coach, athlete.id)

    @pytest.mark.parametrize(
        "caller_type, target_type, message",
        [
            (UserType.ATHLETE, UserType.ATHLETE, "Only coaches can add favorites"),
            (UserType.COACH, UserType.COACH, "Can only add athletes to favorites"),
        ],
    )
    async def test_roles_are_checked(self, service, make_user, caller_type, target_type, message):
        caller = await make_user(user_type=caller_type)
        target = await make_user(user_type=target_type)

        with pytest.raises(DomainValidationError, match=message):
            await service.add(caller, target.id)

    async def test_self_and_unknown(self, service, make_user):
        coach = await make_user(user_type=UserType.COACH)

        with pytest.raises(DomainValidationError, match="Cannot add yourself to favorites"):
            await service.add(coach, coach.id)
        with pytest.raises(NotFoundError, match="User not found"):
            await service.add(coach, uuid.uuid4())

    async def test_concurrent_duplicate_is_declined(self, service, make_user):
        coach = await make_user(user_type=UserType.COACH)
        athlete = await make_user()
        await service.add(coach, athlete.id)

        with patch.object(service.favorites, "get_pair", AsyncMock(return_value=None)):
            outcome = await service.add(coach, athlete.id)

        assert not outcome.success
        assert outcome.message == "Athlete is already in favorites"
        assert await service.favorites.count(filters={"coach_id": coach.id}) == 1


class TestListAndRemove:
    async def test_newest_first(self, service, make_user):
        coach = await make_user(user_type=UserType.COACH)
        older = await make_user(full_name="Older")
        newer = await make_user(full_name="Newer")
        await service.add(coach, older.id)
        await service.add(coach, newer.id)
        first = await service.favorites.get_pair(coach.id, older.id)
        first.created_at = first.created_at - timedelta(minutes=5)
        await service.session.commit()

        favorites = await service.list_for(coach)

        assert [item.full_name for item in favorites] == ["Newer", "Older"]
        assert favorites[0].favorited_at > favorites[1].favorited_at

    async def test_remove(self, service, make_user):
        coach = await make_user(user_type=UserType.COACH)
        athlete = await make_user()
        await service.add(coach, athlete.id)

        removed = await service.remove(coach, athlete.id)
        again = await service.remove(coach, athlete.id)

        assert (removed.success, removed.message) == (True, "Athlete removed from favorites successfully")
        assert (again.success, again.message) == (False, "Athlete is not in favorites")
        with pytest.raises(NotFoundError, match="Athlete not found"):
            await service.remove(coach, uuid.uuid4())
