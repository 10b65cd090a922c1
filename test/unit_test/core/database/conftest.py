"""Test configuration for database unit tests.

This module provides common fixtures and utilities for testing the
centralized database layer with in-memory SQLite.
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel.pool import StaticPool

from athlinked.core.database import create_all, create_sessionmaker
from athlinked.core.database.entities.users import User


@pytest_asyncio.fixture
async def in_memory_engine() -> AsyncGenerator:
    """Create in-memory SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def in_memory_session(in_memory_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create in-memory SQLite session for testing."""
    async with create_sessionmaker(in_memory_engine)() as session:
        yield session


@pytest_asyncio.fixture
async def two_users(in_memory_session: AsyncSession) -> tuple[User, User]:
    """Two persisted users, ``alice`` and ``bob``."""
    alice = User(email="alice@example.com", username="alice", password_hash="x", full_name="Alice Runner")
    bob = User(email="bob@example.com", username="bob", password_hash="x", full_name="Bob Jumper")
    in_memory_session.add_all([alice, bob])
    await in_memory_session.commit()
    return alice, bob
