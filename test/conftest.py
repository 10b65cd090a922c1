from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

import httpx
import pytest
from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

TEST_ROOT = Path(__file__).resolve().parent

# Load test/.env early so the application settings pick it up on import
load_dotenv(TEST_ROOT / ".env", override=False)


class TestDatabaseConfig(BaseModel):
    """Database configuration container for tests."""

    url: str = Field(
        default="sqlite+aiosqlite:///:memory:",
        description="Test database connection URL (defaults to in-memory SQLite)",
    )


class TestSettings(BaseSettings):
    """
    Test environment settings model.

    Nested properties use ``__`` as delimiter, e.g. ``DATABASE__URL`` maps to
    ``test_settings.database.url``.
    """

    model_config = SettingsConfigDict(
        env_file=str(TEST_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    database: TestDatabaseConfig = Field(default_factory=TestDatabaseConfig, description="Test database configuration")


test_settings = TestSettings()

# The application builds its engine on import; point it at the test database
os.environ.setdefault("DATABASE_URL", test_settings.database.url)
os.environ.setdefault("LOGFIRE_ENABLED", "false")


@pytest.fixture(scope="session")
def test_config() -> TestSettings:
    """Fixture providing test configuration from Pydantic settings model."""
    return test_settings


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    allowed_prefixes: Iterable[str] = (
        "http://mock",
        "https://mock",
        "http://localhost",
        "http://testserver",
        "ws://testserver",
        "http://127.0.0.1",
        "http://0.0.0.0",
        "/",  # Allow relative paths (used by ASGI transport)
    )

    orig_sync = httpx._client.Client.request
    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {url_str}")

    async def offline_async(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url_str}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)
    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)
