"""API tests for conversations and messages."""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture
async def pair(make_user, connect_users):
    """Two connected users."""
    sender = await make_user(full_name="Sender")
    receiver = await make_user(full_name="Receiver")
    await connect_users(sender, receiver)
    return sender, receiver


def fake_socket() -> MagicMock:
    socket = MagicMock()
    socket.send_json = AsyncMock()
    return socket


def events(socket: MagicMock) -> list:
    return [call.args[0]["event"] for call in socket.send_json.await_args_list]


async def send(client: AsyncClient, auth_headers, sender, receiver, text: str = "hello", **extra):
    payload = {"receiver_id": str(receiver.id), "message": text, **extra}
    return await client.post("/api/messages/send", json=payload, headers=auth_headers(sender))


class TestConversations:
    async def test_create_conversation_is_idempotent(self, client: AsyncClient, pair, auth_headers):
        sender, receiver = pair
        payload = {"other_user_id": str(receiver.id)}

        first = await client.post("/api/messages/conversations/create", json=payload, headers=auth_headers(sender))
        second = await client.post("/api/messages/conversations/create", json=payload, headers=auth_headers(sender))

        assert first.status_code == 200
        conversation = first.json()["conversation"]
        assert conversation["other_user_name"] == "Receiver"
        assert conversation["unread_count"] == 0
        assert second.json()["conversation"]["conversation_id"] == conversation["conversation_id"]

    async def test_create_requires_connection(self, client: AsyncClient, make_user, auth_headers):
        alice = await make_user()
        bob = await make_user()

        response = await client.post(
            "/api/messages/conversations/create", json={"other_user_id": str(bob.id)}, headers=auth_headers(alice)
        )

        assert response.status_code == 403
        assert response.json()["message"] == "You can only send messages to connected users"

    async def test_list_conversations(self, client: AsyncClient, pair, auth_headers):
        sender, receiver = pair
        await send(client, auth_headers, sender, receiver, "first")
        await send(client, auth_headers, sender, receiver, "second")

        response = await client.get("/api/messages/conversations", headers=auth_headers(receiver))

        (conversation,) = response.json()["conversations"]
        assert conversation["other_user_id"] == str(sender.id)
        assert conversation["last_message"] == "second"
        assert conversation["unread_count"] == 2

    async def test_delete_conversation(self, client: AsyncClient, pair, auth_headers):
        sender, receiver = pair
        sent = await send(client, auth_headers, sender, receiver)
        conversation_id = sent.json()["message"]["conversation_id"]

        response = await client.delete(f"/api/messages/conversation/{conversation_id}", headers=auth_headers(receiver))

        assert response.json() == {"success": True, "message": "Conversation deleted successfully"}
        listed = await client.get("/api/messages/conversations", headers=auth_headers(sender))
        assert listed.json()["conversations"] == []
        unread = await client.get("/api/messages/unread-count", headers=auth_headers(receiver))
        assert unread.json()["count"] == 0

    async def test_outsider_cannot_read_conversation(self, client: AsyncClient, pair, make_user, auth_headers):
        sender, receiver = pair
        outsider = await make_user()
        sent = await send(client, auth_headers, sender, receiver)
        conversation_id = sent.json()["message"]["conversation_id"]

        response = await client.get(f"/api/messages/{conversation_id}", headers=auth_headers(outsider))

        assert response.status_code == 403
        assert response.json()["message"] == "You are not a participant in this conversation"

    async def test_unknown_conversation(self, client: AsyncClient, pair, auth_headers):
        sender, _ = pair

        response = await client.get(f"/api/messages/{uuid.uuid4()}", headers=auth_headers(sender))

        assert response.status_code == 404


class TestSendMessage:
    async def test_send(self, client: AsyncClient, pair, auth_headers):
        sender, receiver = pair

        response = await send(client, auth_headers, sender, receiver, "  hi there  ", client_message_id="tmp-1")

        assert response.status_code == 201
        message = response.json()["message"]
        assert message["message"] == "hi there"
        assert message["sender_name"] == "Sender"
        assert message["receiver_id"] == str(receiver.id)
        assert message["message_type"] == "text"
        assert message["client_message_id"] == "tmp-1"

    async def test_media_only_message(self, client: AsyncClient, pair, auth_headers):
        sender, receiver = pair

        response = await send(
            client, auth_headers, sender, receiver, "", media_url="https://cdn/g.gif", message_type="gif"
        )

        assert response.status_code == 201
        listed = await client.get("/api/messages/conversations", headers=auth_headers(sender))
        assert listed.json()["conversations"][0]["last_message"] == "GIF"

    async def test_empty_message_is_rejected(self, client: AsyncClient, pair, auth_headers):
        sender, receiver = pair

        response = await send(client, auth_headers, sender, receiver, "   ")

        assert response.status_code == 400
        assert response.json()["message"] == "Missing required fields"

    async def test_not_connected(self, client: AsyncClient, make_user, auth_headers):
        alice = await make_user()
        bob = await make_user()

        response = await send(client, auth_headers, alice, bob)

        assert response.status_code == 403

    async def test_send_notifies_open_sockets(self, client: AsyncClient, pair, auth_headers, connection_manager):
        sender, receiver = pair
        receiver_socket, sender_socket = fake_socket(), fake_socket()
        connection_manager.rooms[connection_manager.room_for(receiver.id)].add(receiver_socket)
        connection_manager.rooms[connection_manager.room_for(sender.id)].add(sender_socket)

        await send(client, auth_headers, sender, receiver)

        assert events(receiver_socket) == ["receive_message", "conversation_updated", "message_count_update"]
        assert receiver_socket.send_json.await_args_list[2].args[0]["data"] == {"count": 1}
        assert events(sender_socket) == ["message_delivered", "receive_message", "conversation_updated"]
        echo = sender_socket.send_json.await_args_list[1].args[0]["data"]
        assert echo["is_delivered"] is True


class TestReadState:
    async def test_messages_and_read_flags(self, client: AsyncClient, pair, auth_headers):
        sender, receiver = pair
        sent = await send(client, auth_headers, sender, receiver, "one")
        await send(client, auth_headers, sender, receiver, "two")
        conversation_id = sent.json()["message"]["conversation_id"]

        unread = await client.get("/api/messages/unread-count", headers=auth_headers(receiver))
        assert unread.json() == {"success": True, "count": 2}

        before = await client.get(f"/api/messages/{conversation_id}", headers=auth_headers(receiver))
        assert [row["message"] for row in before.json()["messages"]] == ["one", "two"]
        assert all(row["is_read"] is False for row in before.json()["messages"])

        marked = await client.post(f"/api/messages/{conversation_id}/read", headers=auth_headers(receiver))
        assert marked.json() == {"success": True, "message": "Marked 2 messages as read"}

        after = await client.get(f"/api/messages/{conversation_id}", headers=auth_headers(receiver))
        assert all(row["is_read"] for row in after.json()["messages"])

        seen_by_sender = await client.get(f"/api/messages/{conversation_id}", headers=auth_headers(sender))
        assert all(row["is_read_by_recipient"] for row in seen_by_sender.json()["messages"])

        unread = await client.get("/api/messages/unread-count", headers=auth_headers(receiver))
        assert unread.json()["count"] == 0

        again = await client.post(f"/api/messages/{conversation_id}/read", headers=auth_headers(receiver))
        assert again.json()["message"] == "Marked 0 messages as read"

    async def test_read_notifies_sender(self, client: AsyncClient, pair, auth_headers, connection_manager):
        sender, receiver = pair
        sent = await send(client, auth_headers, sender, receiver)
        conversation_id = sent.json()["message"]["conversation_id"]
        sender_socket = fake_socket()
        connection_manager.rooms[connection_manager.room_for(sender.id)].add(sender_socket)

        await client.post(f"/api/messages/{conversation_id}/read", headers=auth_headers(receiver))

        frame = sender_socket.send_json.await_args_list[0].args[0]
        assert frame == {
            "event": "messages_read",
            "data": {"conversationId": conversation_id, "readerId": str(receiver.id)},
        }


class TestDeleteMessage:
    async def test_delete_unread_message(self, client: AsyncClient, pair, auth_headers):
        sender, receiver = pair
        await send(client, auth_headers, sender, receiver, "keep")
        doomed = await send(client, auth_headers, sender, receiver, "oops")

        response = await client.delete(
            f"/api/messages/message/{doomed.json()['message']['id']}", headers=auth_headers(sender)
        )

        assert response.json() == {"success": True, "message": "Message deleted successfully"}
        unread = await client.get("/api/messages/unread-count", headers=auth_headers(receiver))
        assert unread.json()["count"] == 1
        listed = await client.get("/api/messages/conversations", headers=auth_headers(receiver))
        assert listed.json()["conversations"][0]["last_message"] == "keep"

    async def test_only_sender_can_delete(self, client: AsyncClient, pair, auth_headers):
        sender, receiver = pair
        sent = await send(client, auth_headers, sender, receiver)

        response = await client.delete(
            f"/api/messages/message/{sent.json()['message']['id']}", headers=auth_headers(receiver)
        )

        assert response.status_code == 403
        assert response.json()["message"] == "You can only delete your own messages"

    async def test_unknown_message(self, client: AsyncClient, pair, auth_headers):
        sender, _ = pair

        response = await client.delete(f"/api/messages/message/{uuid.uuid4()}", headers=auth_headers(sender))

        assert response.status_code == 404


class TestSearchUsers:
    async def test_search_among_connections(self, client: AsyncClient, pair, make_user, auth_headers):
        sender, receiver = pair
        await make_user(full_name="Receiver Lookalike")

        response = await client.get("/api/messages/search/users", params={"q": "recei"}, headers=auth_headers(sender))

        assert [user["id"] for user in response.json()["users"]] == [str(receiver.id)]

    async def test_blank_query(self, client: AsyncClient, pair, auth_headers):
        sender, _ = pair

        response = await client.get("/api/messages/search/users", params={"q": "  "}, headers=auth_headers(sender))

        assert response.json() == {"success": True, "users": []}
