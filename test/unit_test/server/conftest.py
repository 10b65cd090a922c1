from __future__ import annotations

from typing import AsyncGenerator, Awaitable, Callable, Dict, Optional
from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel.pool import StaticPool

from athlinked.core.database import create_all, create_sessionmaker
from athlinked.core.database.entities.users import User, UserType
from athlinked.server.core.security import create_access_token, hash_password

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "secret123"

UserFactory = Callable[..., Awaitable[User]]


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database for every test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(test_engine) -> async_sessionmaker[AsyncSession]:
    return create_sessionmaker(test_engine)


@pytest_asyncio.fixture(name="session")
async def session_fixture(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def connection_manager():
    """A connection registry private to the test."""
    from athlinked.server.services.realtime import ConnectionManager

    return ConnectionManager()


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession, session_maker, connection_manager) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from athlinked.core.database import get_session, get_session_maker
    from athlinked.server.main import app
    from athlinked.server.services.realtime import get_connection_manager

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_session_maker] = lambda: session_maker
    app.dependency_overrides[get_connection_manager] = lambda: connection_manager

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("athlinked.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session: AsyncSession) -> UserFactory:
    """Factory persisting a user with the shared test password."""
    counter = {"n": 0}

    async def _make_user(
        full_name: Optional[str] = None,
        username: Optional[str] = None,
        email: Optional[str] = None,
        user_type: UserType = UserType.ATHLETE,
        **fields,
    ) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            email=email or f"athlete{n}@example.com",
            username=username or f"athlete{n}",
            password_hash=hash_password(TEST_PASSWORD),
            full_name=full_name or f"Athlete {n}",
            user_type=user_type.value,
            **fields,
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers() -> Callable[[User], Dict[str, str]]:
    """Build the bearer header of a user."""

    def _auth_headers(user: User) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _auth_headers


@pytest.fixture
def connect_users(session: AsyncSession) -> Callable[[User, User], Awaitable[None]]:
    """Connect two users through a request and its acceptance."""
    from athlinked.server.services.network import NetworkService

    async def _connect_users(first: User, second: User) -> None:
        service = NetworkService(session)
        await service.send_connection_request(first, second.id)
        (request,) = await service.connection_requests(second.id)
        await service.accept_connection_request(request.id, second)

    return _connect_users
