"""Unit tests for engine and session factory helpers."""

import pytest
from sqlalchemy import inspect

from athlinked.core.database import Base, create_all, create_engine, create_sessionmaker
from athlinked.core.database.utils import normalize_database_url


class TestNormalizeDatabaseUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "postgres://user:pw@db:5432/athlinked",
            "postgresql://user:pw@db:5432/athlinked",
            "postgresql+psycopg2://user:pw@db:5432/athlinked",
            "postgresql+asyncpg://user:pw@db:5432/athlinked",
        ],
    )
    def test_postgres_variants_use_asyncpg(self, url):
        assert normalize_database_url(url) == "postgresql+asyncpg://user:pw@db:5432/athlinked"

    def test_sqlite_is_untouched(self):
        assert normalize_database_url("sqlite+aiosqlite:///:memory:") == "sqlite+aiosqlite:///:memory:"


class TestEngineAndSessions:
    async def test_create_all_builds_every_table(self):
        engine = create_engine("sqlite+aiosqlite:///:memory:")
        try:
            await create_all(engine)
            async with engine.connect() as conn:
                tables = await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))
        finally:
            await engine.dispose()

        assert set(Base.metadata.tables) <= tables
        assert {"users", "refresh_tokens", "user_connections", "clips", "messages", "social_handles"} <= tables

    async def test_sessionmaker_keeps_objects_loaded_after_commit(self):
        engine = create_engine("sqlite+aiosqlite:///:memory:")
        try:
            maker = create_sessionmaker(engine)
            assert maker.kw["expire_on_commit"] is False
        finally:
            await engine.dispose()
