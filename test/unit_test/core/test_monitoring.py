"""
Unit tests for the Logfire monitoring module.

This test suite covers:
- Initialization with monitoring disabled, enabled without token and enabled
- Instrumentation feature flags
- Request, real-time event and error logging helpers
"""

from unittest.mock import MagicMock, patch

import pytest

from athlinked.core import monitoring


@pytest.fixture(autouse=True)
def _reset_configured():
    monitoring._configured = False
    yield
    monitoring._configured = False


class TestInitializeLogfire:
    """Test initialize_logfire under different configurations."""

    def test_disabled_does_not_configure(self):
        with patch.object(monitoring, "LOGFIRE_ENABLED", False), patch.object(monitoring, "logfire") as mock_logfire:
            assert monitoring.initialize_logfire() is False

            mock_logfire.configure.assert_not_called()
            assert monitoring.is_logfire_configured() is False

    def test_enabled_without_token_does_not_configure(self):
        with (
            patch.object(monitoring, "LOGFIRE_ENABLED", True),
            patch.object(monitoring, "LOGFIRE_TOKEN", ""),
            patch.object(monitoring, "logfire") as mock_logfire,
        ):
            assert monitoring.initialize_logfire() is False

            mock_logfire.configure.assert_not_called()

    def test_enabled_with_token_instruments_app_and_sqlalchemy(self):
        app = MagicMock()
        with (
            patch.object(monitoring, "LOGFIRE_ENABLED", True),
            patch.object(monitoring, "LOGFIRE_TOKEN", "test-token"),
            patch.object(monitoring, "logfire") as mock_logfire,
        ):
            assert monitoring.initialize_logfire(app) is True

            mock_logfire.configure.assert_called_once()
            assert mock_logfire.configure.call_args.kwargs["token"] == "test-token"
            mock_logfire.instrument_sqlalchemy.assert_called_once()
            mock_logfire.instrument_fastapi.assert_called_once_with(app=app)
            assert monitoring.is_logfire_configured() is True

    def test_fastapi_instrumentation_can_be_switched_off(self):
        with (
            patch.object(monitoring, "LOGFIRE_ENABLED", True),
            patch.object(monitoring, "LOGFIRE_TOKEN", "test-token"),
            patch.object(monitoring, "LOGFIRE_TRACE_FASTAPI", False),
            patch.object(monitoring, "logfire") as mock_logfire,
        ):
            monitoring.initialize_logfire(MagicMock())

            mock_logfire.instrument_fastapi.assert_not_called()


class TestLoggingHelpers:
    """Test the helpers used by middleware, handlers and the real-time gateway."""

    def test_log_api_request_without_logfire_uses_logger(self):
        with patch.object(monitoring, "logfire") as mock_logfire, patch.object(monitoring, "logger") as mock_logger:
            monitoring.log_api_request("GET", "/health", 200, 1.5)

            mock_logfire.info.assert_not_called()
            assert "GET /health -> 200" in mock_logger.debug.call_args[0][0]

    def test_log_api_request_with_logfire(self):
        monitoring._configured = True
        with patch.object(monitoring, "logfire") as mock_logfire:
            monitoring.log_api_request("POST", "/api/login", 401, 12.0)

            mock_logfire.info.assert_called_once_with(
                "API request completed", method="POST", path="/api/login", status_code=401, duration_ms=12.0
            )

    def test_log_realtime_event_with_context(self):
        monitoring._configured = True
        with patch.object(monitoring, "logfire") as mock_logfire:
            monitoring.log_realtime_event("send_message", "user-1", {"conversation_id": "c-1"})

            mock_logfire.info.assert_called_once_with(
                "Realtime event", realtime_event="send_message", user_id="user-1", conversation_id="c-1"
            )

    def test_log_error_is_silent_without_logfire(self):
        with patch.object(monitoring, "logfire") as mock_logfire:
            monitoring.log_error("ValueError", "boom")

            mock_logfire.error.assert_not_called()

    def test_log_error_with_logfire(self):
        monitoring._configured = True
        with patch.object(monitoring, "logfire") as mock_logfire:
            monitoring.log_error("ValueError", "boom", {"path": "/api/clips"})

            mock_logfire.error.assert_called_once_with("ValueError: boom", path="/api/clips")
