"""Unit tests for server configuration settings model.

Tests verify that the Settings model correctly binds environment variables
from the .env.example file and that the grouped configuration models work.
"""

from pathlib import Path

import pytest

from athlinked.server.core.config import AuthConfig, CORSConfig, PostgreSQLConfig, Settings


@pytest.fixture
def env_example_path() -> Path:
    """Get path to .env.example file."""
    return Path(__file__).resolve().parent.parent.parent.parent.parent / ".env.example"


@pytest.fixture
def env_example_vars(env_example_path: Path) -> dict[str, str]:
    """Parse .env.example file and return environment variables."""
    env_vars = {}
    with open(env_example_path) as f:
        for line in f:
            line = line.strip()
            # Skip comments and empty lines
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, value = line.split("=", 1)
                env_vars[key.strip()] = value.strip()
    return env_vars


class TestSettingsBinding:
    """Test Settings model environment variable binding."""

    def test_server_port_binding(self, env_example_vars: dict[str, str], monkeypatch):
        port = env_example_vars.get("ATHLINKED_SERVER_PORT", "8000")
        monkeypatch.setenv("ATHLINKED_SERVER_PORT", port)

        settings = Settings()
        assert settings.server_port == int(port)

    def test_log_level_binding(self, env_example_vars: dict[str, str], monkeypatch):
        log_level = env_example_vars.get("ATHLINKED_LOG_LEVEL", "INFO")
        monkeypatch.setenv("ATHLINKED_LOG_LEVEL", log_level)

        settings = Settings()
        assert settings.log_level.upper() == log_level.upper()

    def test_token_lifetimes_binding(self, env_example_vars: dict[str, str], monkeypatch):
        monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", env_example_vars["ACCESS_TOKEN_EXPIRE_MINUTES"])
        monkeypatch.setenv("REFRESH_TOKEN_EXPIRE_DAYS", env_example_vars["REFRESH_TOKEN_EXPIRE_DAYS"])

        auth = Settings().auth
        assert isinstance(auth, AuthConfig)
        assert auth.access_token_expire_minutes == int(env_example_vars["ACCESS_TOKEN_EXPIRE_MINUTES"])
        assert auth.refresh_token_expire_days == int(env_example_vars["REFRESH_TOKEN_EXPIRE_DAYS"])

    def test_cors_lists_are_parsed_from_json(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", '["https://athlinked.app", "http://localhost:3000"]')

        cors = Settings().cors
        assert isinstance(cors, CORSConfig)
        assert cors.origins == ["https://athlinked.app", "http://localhost:3000"]


class TestDatabaseUrl:
    def test_explicit_database_url_wins(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./dev.db")

        assert Settings().sqlalchemy_database_url == "sqlite+aiosqlite:///./dev.db"

    def test_url_assembled_from_postgres_parts(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("POSTGRES_USER", "coach")
        monkeypatch.setenv("POSTGRES_PASSWORD", "pw")
        monkeypatch.setenv("POSTGRES_HOST", "db")
        monkeypatch.setenv("POSTGRES_PORT", "6543")
        monkeypatch.setenv("POSTGRES_DB", "athletes")

        settings = Settings(_env_file=None)
        assert isinstance(settings.postgres, PostgreSQLConfig)
        assert settings.sqlalchemy_database_url == "postgresql+asyncpg://coach:pw@db:6543/athletes"
