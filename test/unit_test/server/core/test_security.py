"""Unit tests for password hashing and token helpers."""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from athlinked.core.database.entities.users import User
from athlinked.core.exceptions import AuthenticationError
from athlinked.server.core.config import AuthConfig
from athlinked.server.core.security import (
    create_access_token,
    decode_access_token,
    generate_refresh_token,
    hash_password,
    refresh_token_expiry,
    user_id_from_token,
    verify_password,
)

CONFIG = AuthConfig(jwt_secret="unit-test-secret", access_token_expire_minutes=5, refresh_token_expire_days=3)


@pytest.fixture
def user() -> User:
    return User(id=uuid.uuid4(), email="sprinter@example.com", username="sprinter", password_hash="x", user_type="athlete")


class TestPasswords:
    def test_hash_round_trip(self):
        hashed = hash_password("secret123")

        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("wrong", hashed)


class TestAccessTokens:
    def test_claims(self, user):
        payload = decode_access_token(create_access_token(user, CONFIG), CONFIG)

        assert payload["id"] == str(user.id)
        assert payload["email"] == "sprinter@example.com"
        assert payload["username"] == "sprinter"
        assert payload["user_type"] == "athlete"
        assert payload["type"] == "access"

    def test_user_id_from_token(self, user):
        assert user_id_from_token(create_access_token(user, CONFIG), CONFIG) == user.id

    def test_wrong_secret_is_rejected(self, user):
        token = create_access_token(user, CONFIG)

        with pytest.raises(AuthenticationError, match="Invalid token"):
            decode_access_token(token, AuthConfig(jwt_secret="another-secret"))

    def test_expired_token_is_rejected(self, user):
        past = datetime.now(timezone.utc) - timedelta(minutes=10)
        token = jwt.encode(
            {"id": str(user.id), "type": "access", "iat": past, "exp": past + timedelta(minutes=1)},
            CONFIG.jwt_secret,
            algorithm=CONFIG.jwt_algorithm,
        )

        with pytest.raises(AuthenticationError, match="Token expired"):
            decode_access_token(token, CONFIG)

    def test_token_of_another_type_is_rejected(self, user):
        token = jwt.encode({"id": str(user.id), "type": "refresh"}, CONFIG.jwt_secret, algorithm=CONFIG.jwt_algorithm)

        with pytest.raises(AuthenticationError):
            decode_access_token(token, CONFIG)

    def test_garbage_is_rejected(self):
        with pytest.raises(AuthenticationError):
            user_id_from_token("not-a-jwt", CONFIG)


class TestRefreshTokens:
    def test_random_and_long(self):
        first, second = generate_refresh_token(), generate_refresh_token()

        assert first != second
        assert len(first) == 128

    def test_expiry_is_naive_utc(self):
        expiry = refresh_token_expiry(CONFIG)
        expected = datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(days=3)

        assert expiry.tzinfo is None
        assert abs((expiry - expected).total_seconds()) < 5
