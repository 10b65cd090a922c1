"""Tests for ``AuthService`` session handling."""

from datetime import timedelta

import pytest

from athlinked.core.database import utc_now_naive
from athlinked.core.database.entities.users import RefreshToken, UserType
from athlinked.core.exceptions import AuthenticationError, ConflictError
from athlinked.core.models.io.auth import SignupRequest
from athlinked.server.core.security import user_id_from_token
from athlinked.server.services.auth import AuthService

pytestmark = pytest.mark.asyncio

PASSWORD = "secret123"


@pytest.fixture
def service(session) -> AuthService:
    return AuthService(session)


def signup_request(**overrides) -> SignupRequest:
    data = {"email": "New@Example.com", "password": PASSWORD, "fullName": " New User ", "username": "NewUser"}
    data.update(overrides)
    return SignupRequest.model_validate(data)


class TestSignup:
    async def test_signup_normalizes_and_issues_tokens(self, service):
        issued = await service.signup(signup_request(), device_info="pytest", ip_address="127.0.0.1")

        assert issued.user.email == "new@example.com"
        assert issued.user.username == "newuser"
        assert issued.user.full_name == "New User"
        assert issued.user.user_type == UserType.ATHLETE.value
        assert user_id_from_token(issued.access_token) == issued.user.id
        stored = await service.tokens.find_valid(issued.refresh_token)
        assert stored.device_info == "pytest"
        assert stored.ip_address == "127.0.0.1"

    async def test_parent_account(self, service):
        issued = await service.signup(signup_request(userType="parent"))

        assert issued.user.user_type == "parent"

    async def test_duplicate_username_is_case_insensitive(self, service):
        await service.signup(signup_request())

        with pytest.raises(ConflictError, match="Username already taken"):
            await service.signup(signup_request(email="other@example.com", username="NEWUSER"))


class TestLogin:
    async def test_login_by_username(self, service):
        await service.signup(signup_request())

        issued = await service.login("newuser", PASSWORD)

        assert issued.user.email == "new@example.com"

    async def test_wrong_password_and_unknown_user_look_alike(self, service):
        await service.signup(signup_request())

        with pytest.raises(AuthenticationError) as wrong_password:
            await service.login("new@example.com", "nope")
        with pytest.raises(AuthenticationError) as unknown:
            await service.login("ghost@example.com", PASSWORD)

        assert wrong_password.value.message == unknown.value.message


class TestRefreshTokens:
    async def test_refresh_rotates_and_keeps_device(self, service):
        issued = await service.signup(signup_request(), device_info="phone")

        rotated = await service.refresh(issued.refresh_token)

        assert rotated.refresh_token != issued.refresh_token
        assert (await service.tokens.find_valid(rotated.refresh_token)).device_info == "phone"
        with pytest.raises(AuthenticationError):
            await service.refresh(issued.refresh_token)

    async def test_logout_is_idempotent(self, service):
        issued = await service.signup(signup_request())

        assert await service.logout(issued.refresh_token) is True
        assert await service.logout(issued.refresh_token) is False

    async def test_expired_token_cannot_refresh_and_is_purged(self, service, session):
        issued = await service.signup(signup_request())
        stale = RefreshToken(
            user_id=issued.user.id, token="stale", expires_at=utc_now_naive() - timedelta(minutes=1)
        )
        session.add(stale)
        await session.commit()

        with pytest.raises(AuthenticationError):
            await service.refresh("stale")
        assert await service.purge_expired_tokens() == 1
        assert await service.tokens.find_valid(issued.refresh_token) is not None
