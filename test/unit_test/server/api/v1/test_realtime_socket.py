"""Tests for the ``/ws`` endpoint that need no database access."""

import uuid

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from athlinked.core.database.entities.users import User
from athlinked.server.core.security import create_access_token
from athlinked.server.main import app
from athlinked.server.services.realtime import ConnectionManager, get_connection_manager


@pytest.fixture
def manager():
    manager = ConnectionManager()
    app.dependency_overrides[get_connection_manager] = lambda: manager
    yield manager
    app.dependency_overrides.clear()


@pytest.fixture
def socket_client(manager):
    return TestClient(app)


@pytest.fixture
def user():
    return User(id=uuid.uuid4(), email="socket@example.com", username="socket", password_hash="x")


class TestSocketAuthentication:
    @pytest.mark.parametrize("query", ["", "?token=", "?token=not-a-jwt"])
    def test_rejects_missing_or_bad_token(self, socket_client: TestClient, query: str):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with socket_client.websocket_connect(f"/ws{query}"):
                pass

        assert exc_info.value.code == 1008

    def test_joins_and_leaves_user_room(self, socket_client: TestClient, manager: ConnectionManager, user: User):
        with socket_client.websocket_connect(f"/ws?token={create_access_token(user)}"):
            assert manager.is_online(user.id)

        assert not manager.is_online(user.id)


class TestSocketFrames:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("not json", "Invalid message format"),
            ('["send_message"]', "Invalid message format"),
            ('{"event": "send_message", "data": "text"}', "Invalid message format"),
            ('{"event": "typing", "data": {}}', "Unknown event"),
            ('{"event": "send_message", "data": {"message": "hi"}}', "Missing required fields"),
            ('{"event": "mark_read", "data": {"conversation_id": "nope"}}', "Missing required fields"),
        ],
    )
    def test_bad_frames_get_error_event(self, socket_client: TestClient, user: User, raw: str, expected: str):
        with socket_client.websocket_connect(f"/ws?token={create_access_token(user)}") as websocket:
            websocket.send_text(raw)
            frame = websocket.receive_json()

        assert frame == {"event": "error", "data": {"message": expected}}

    def test_socket_survives_errors(self, socket_client: TestClient, user: User):
        with socket_client.websocket_connect(f"/ws?token={create_access_token(user)}") as websocket:
            websocket.send_text("garbage")
            first = websocket.receive_json()
            websocket.send_text('{"event": "unknown"}')
            second = websocket.receive_json()

        assert first["data"]["message"] == "Invalid message format"
        assert second["data"]["message"] == "Unknown event"

    def test_binary_frame_gets_error_event(self, socket_client: TestClient, manager: ConnectionManager, user: User):
        with socket_client.websocket_connect(f"/ws?token={create_access_token(user)}") as websocket:
            websocket.send_bytes(b'{"event": "send_message"}')
            frame = websocket.receive_json()
            assert manager.is_online(user.id)

        assert frame == {"event": "error", "data": {"message": "Invalid message format"}}
