"""Tests for the socket registry and the messaging gateway.

The gateway opens its own sessions from ``session_maker``; the shared
``session`` fixture is only used to set up users and connections.
"""

import json
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.websockets import WebSocketDisconnect

from athlinked.core.models.io.messages import SendMessageRequest
from athlinked.server.services.messaging import MessagingService
from athlinked.server.services.realtime import ConnectionManager, MessagingGateway

pytestmark = pytest.mark.asyncio


def fake_socket() -> MagicMock:
    socket = MagicMock()
    socket.accept = AsyncMock()
    socket.send_json = AsyncMock()
    return socket


def frames(socket: MagicMock) -> list:
    return [call.args[0] for call in socket.send_json.await_args_list]


def events(socket: MagicMock) -> list:
    return [frame["event"] for frame in frames(socket)]


@pytest.fixture
def gateway(connection_manager, session_maker) -> MessagingGateway:
    return MessagingGateway(connection_manager, session_maker)


class TestConnectionManager:
    async def test_rooms_per_user(self):
        manager = ConnectionManager()
        user_id = uuid.uuid4()
        tab, phone = fake_socket(), fake_socket()

        await manager.connect(tab, user_id)
        await manager.connect(phone, user_id)

        tab.accept.assert_awaited_once()
        assert manager.is_online(user_id)
        assert await manager.emit_to_user(user_id, "ping", {"n": 1}) == 2

        manager.disconnect(tab, user_id)
        assert manager.is_online(user_id)
        manager.disconnect(phone, user_id)
        assert not manager.is_online(user_id)
        assert manager.rooms == {}

    async def test_failed_send_drops_socket(self):
        manager = ConnectionManager()
        user_id = uuid.uuid4()
        broken = fake_socket()
        broken.send_json.side_effect = WebSocketDisconnect(code=1006)
        await manager.connect(broken, user_id)

        delivered = await manager.emit_to_user(user_id, "ping", {})

        assert delivered == 0
        assert not manager.is_online(user_id)

    async def test_frames_are_json_encoded(self):
        manager = ConnectionManager()
        socket = fake_socket()
        ident = uuid.uuid4()

        await manager.send(socket, "event", {"id": ident})

        socket.send_json.assert_awaited_once_with({"event": "event", "data": {"id": str(ident)}})

    async def test_emit_to_offline_user(self):
        assert await ConnectionManager().emit_to_user(uuid.uuid4(), "ping", {}) == 0

    async def test_disconnect_unknown_socket(self):
        ConnectionManager().disconnect(fake_socket(), uuid.uuid4())


class TestSendMessageEvent:
    async def test_fan_out_order_with_receiver_online(
        self, gateway, connection_manager, make_user, connect_users
    ):
        sender = await make_user()
        receiver = await make_user()
        await connect_users(sender, receiver)
        origin, other_sender_tab, receiver_socket = fake_socket(), fake_socket(), fake_socket()
        await connection_manager.connect(origin, sender.id)
        await connection_manager.connect(other_sender_tab, sender.id)
        await connection_manager.connect(receiver_socket, receiver.id)

        raw = json.dumps(
            {
                "event": "send_message",
                "data": {"receiver_id": str(receiver.id), "message": "hey", "client_message_id": "c-1"},
            }
        )
        await gateway.handle_frame(origin, sender.id, raw)

        assert events(receiver_socket) == ["receive_message", "conversation_updated", "message_count_update"]
        received = frames(receiver_socket)
        assert received[0]["data"]["message"] == "hey"
        assert received[1]["data"]["unread_count"] == 1
        assert received[2]["data"] == {"count": 1}

        assert events(origin) == ["message_delivered", "receive_message", "conversation_updated"]
        delivered, echo, update = frames(origin)
        assert delivered["data"]["client_message_id"] == "c-1"
        assert delivered["data"]["message_id"] == echo["data"]["id"]
        assert echo["data"]["is_delivered"] is True
        assert update["data"]["unread_count"] == 0

        # Only the socket that sent the message gets the sender-side frames
        other_sender_tab.send_json.assert_not_awaited()

    async def test_receiver_offline(self, gateway, connection_manager, make_user, connect_users):
        sender = await make_user()
        receiver = await make_user()
        await connect_users(sender, receiver)
        origin = fake_socket()
        await connection_manager.connect(origin, sender.id)

        await gateway.handle_event(origin, sender.id, "send_message", {"receiver_id": str(receiver.id), "message": "hi"})

        assert events(origin) == ["receive_message", "conversation_updated"]
        assert frames(origin)[0]["data"]["is_delivered"] is False

    async def test_not_connected(self, gateway, connection_manager, make_user):
        sender = await make_user()
        stranger = await make_user()
        origin = fake_socket()

        await gateway.handle_event(origin, sender.id, "send_message", {"receiver_id": str(stranger.id), "message": "hi"})

        assert frames(origin) == [
            {"event": "error", "data": {"message": "You can only send messages to connected users"}}
        ]

    async def test_unknown_sender(self, gateway):
        origin = fake_socket()

        await gateway.handle_event(origin, uuid.uuid4(), "send_message", {"receiver_id": str(uuid.uuid4()), "message": "hi"})

        assert frames(origin) == [{"event": "error", "data": {"message": "User not found"}}]

    async def test_unexpected_failure(self, connection_manager, make_user):
        broken_maker = MagicMock(side_effect=RuntimeError("database down"))
        gateway = MessagingGateway(connection_manager, broken_maker)
        sender = await make_user()
        origin = fake_socket()

        await gateway.handle_event(origin, sender.id, "send_message", {"receiver_id": str(uuid.uuid4()), "message": "hi"})

        assert frames(origin) == [{"event": "error", "data": {"message": "Failed to send message"}}]

    async def test_missing_fields(self, gateway):
        origin = fake_socket()

        await gateway.handle_event(origin, uuid.uuid4(), "send_message", {"receiver_id": str(uuid.uuid4())})

        assert frames(origin) == [{"event": "error", "data": {"message": "Missing required fields"}}]


class TestMarkReadEvent:
    async def test_mark_read_notifies_both_sides(
        self, gateway, connection_manager, session, make_user, connect_users
    ):
        sender = await make_user()
        reader = await make_user()
        await connect_users(sender, reader)
        service = MessagingService(session)

        sent = await service.send_message(sender, SendMessageRequest(receiver_id=reader.id, message="one"))
        await service.send_message(sender, SendMessageRequest(receiver_id=reader.id, message="two"))
        sender_socket, reader_socket = fake_socket(), fake_socket()
        await connection_manager.connect(sender_socket, sender.id)
        await connection_manager.connect(reader_socket, reader.id)

        await gateway.handle_event(
            reader_socket, reader.id, "mark_read", {"conversation_id": str(sent.message.conversation_id)}
        )

        assert frames(sender_socket) == [
            {
                "event": "messages_read",
                "data": {"conversationId": str(sent.message.conversation_id), "readerId": str(reader.id)},
            }
        ]
        assert events(reader_socket) == ["conversation_updated", "message_count_update"]
        assert frames(reader_socket)[1]["data"] == {"count": 0}

    async def test_mark_read_unknown_conversation(self, gateway, make_user):
        reader = await make_user()
        socket = fake_socket()

        await gateway.handle_event(socket, reader.id, "mark_read", {"conversation_id": str(uuid.uuid4())})

        assert frames(socket) == [{"event": "error", "data": {"message": "Conversation not found"}}]


class TestFrameDecoding:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("{", "Invalid message format"),
            ("42", "Invalid message format"),
            ('{"data": {}}', "Invalid message format"),
            ('{"event": "send_message", "data": []}', "Invalid message format"),
            ('{"event": "typing"}', "Unknown event"),
        ],
    )
    async def test_rejected_frames(self, gateway, raw, expected):
        socket = fake_socket()

        await gateway.handle_frame(socket, uuid.uuid4(), raw)

        assert frames(socket) == [{"event": "error", "data": {"message": expected}}]

    async def test_binary_frame_is_rejected(self, gateway):
        socket = fake_socket()

        await gateway.handle_frame(socket, uuid.uuid4(), None)

        assert frames(socket) == [{"event": "error", "data": {"message": "Invalid message format"}}]

    async def test_null_data_counts_as_empty(self, gateway):
        socket = fake_socket()

        await gateway.handle_frame(socket, uuid.uuid4(), '{"event": "send_message", "data": null}')

        assert frames(socket) == [{"event": "error", "data": {"message": "Missing required fields"}}]
