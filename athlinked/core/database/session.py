"""
Global database session and engine management.

This module manages the global AsyncEngine and async_sessionmaker instances
that are used throughout the application for database access.
"""

from __future__ import annotations

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from athlinked.core.logging_config import get_logger
from athlinked.server.core.config import settings

from .utils import create_all, create_engine, create_sessionmaker

logger = get_logger(__name__)

# Create global engine and session factory
engine = create_engine(settings.sqlalchemy_database_url)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Yields:
        AsyncSession: An asynchronous SQLAlchemy session.
    """
    async with async_session_maker() as session:
        yield session


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """
    Dependency returning the session factory.

    Long-lived handlers such as the WebSocket endpoint open one short session
    per event instead of holding a request-scoped session open.
    """
    return async_session_maker


async def init_db() -> None:
    """
    Initialize the database.

    Creates any missing tables from the ORM metadata so a fresh development
    database works without running migrations. Existing tables are left
    untouched; schema changes go through Alembic.
    """
    await create_all(engine)
    logger.debug("Database tables ensured")
