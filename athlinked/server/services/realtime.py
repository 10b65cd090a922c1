"""
Real-time messaging over WebSockets.

``ConnectionManager`` keeps the open sockets of every user in a room named
``user:<id>``; one user may have several sockets (tabs, devices).
``MessagingGateway`` turns socket events into ``MessagingService`` calls and
fans the results out as JSON frames shaped ``{"event": ..., "data": ...}``.
The REST endpoints use the same gateway to notify connected clients.
"""

from __future__ import annotations

import json
import uuid
from collections import defaultdict
from typing import Any, Dict, Optional, Set

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.websockets import WebSocketDisconnect

from athlinked.core.database.entities.users import User
from athlinked.core.exceptions import AthLinkedError, NotFoundError
from athlinked.core.logging_config import get_logger
from athlinked.core.models.io.messages import SendMessageRequest
from athlinked.core.monitoring import log_realtime_event

from .messaging import MessagingService, ReadReceipt, SentMessage

logger = get_logger(__name__)

# Server -> client events
RECEIVE_MESSAGE = "receive_message"
CONVERSATION_UPDATED = "conversation_updated"
MESSAGE_COUNT_UPDATE = "message_count_update"
MESSAGE_DELIVERED = "message_delivered"
MESSAGES_READ = "messages_read"
ERROR = "error"

# Client -> server events
SEND_MESSAGE = "send_message"
MARK_READ = "mark_read"


class ConnectionManager:
    """Registry of open sockets grouped into one room per user."""

    def __init__(self):
        self.rooms: Dict[str, Set[WebSocket]] = defaultdict(set)

    @staticmethod
    def room_for(user_id: uuid.UUID) -> str:
        return f"user:{user_id}"

    async def connect(self, websocket: WebSocket, user_id: uuid.UUID) -> None:
        await websocket.accept()
        self.rooms[self.room_for(user_id)].add(websocket)
        logger.info(f"Socket joined {self.room_for(user_id)} ({len(self.rooms[self.room_for(user_id)])} open)")

    def disconnect(self, websocket: WebSocket, user_id: uuid.UUID) -> None:
        room = self.room_for(user_id)
        sockets = self.rooms.get(room)
        if not sockets:
            return
        sockets.discard(websocket)
        if not sockets:
            del self.rooms[room]
        logger.info(f"Socket left {room}")

    def is_online(self, user_id: uuid.UUID) -> bool:
        return bool(self.rooms.get(self.room_for(user_id)))

    async def send(self, websocket: WebSocket, event: str, data: Any) -> bool:
        """Send one frame. A socket that fails is dropped from every room."""
        try:
            await websocket.send_json({"event": event, "data": jsonable_encoder(data)})
            return True
        except (WebSocketDisconnect, RuntimeError) as e:
            logger.warning(f"Dropping socket after failed '{event}' send: {e}")
            self._forget(websocket)
            return False

    async def emit_to_user(self, user_id: uuid.UUID, event: str, data: Any) -> int:
        """Send a frame to every socket of ``user_id``; returns how many got it."""
        sockets = list(self.rooms.get(self.room_for(user_id), ()))
        delivered = 0
        for websocket in sockets:
            if await self.send(websocket, event, data):
                delivered += 1
        return delivered

    def _forget(self, websocket: WebSocket) -> None:
        for room in [name for name, sockets in self.rooms.items() if websocket in sockets]:
            self.rooms[room].discard(websocket)
            if not self.rooms[room]:
                del self.rooms[room]


manager = ConnectionManager()


def get_connection_manager() -> ConnectionManager:
    """Dependency returning the process-wide connection manager."""
    return manager


class MessagingGateway:
    """Bridges socket events and REST actions to connected clients."""

    def __init__(self, connections: ConnectionManager, session_maker: async_sessionmaker[AsyncSession]):
        self.connections = connections
        self.session_maker = session_maker

    async def handle_frame(self, websocket: WebSocket, user_id: uuid.UUID, raw: Optional[str]) -> None:
        """Decode one frame and dispatch it. ``raw`` is None for binary frames."""
        try:
            frame = json.loads(raw) if raw is not None else None
        except json.JSONDecodeError:
            frame = None
        if not isinstance(frame, dict) or not isinstance(frame.get("event"), str):
            await self.connections.send(websocket, ERROR, {"message": "Invalid message format"})
            return

        data = frame.get("data", {})
        if data is None:
            data = {}
        if not isinstance(data, dict):
            await self.connections.send(websocket, ERROR, {"message": "Invalid message format"})
            return
        await self.handle_event(websocket, user_id, frame["event"], data)

    async def handle_event(self, websocket: WebSocket, user_id: uuid.UUID, event: str, data: Dict[str, Any]) -> None:
        log_realtime_event(event, str(user_id))
        if event == SEND_MESSAGE:
            await self.on_send_message(websocket, user_id, data)
        elif event == MARK_READ:
            await self.on_mark_read(websocket, user_id, data)
        else:
            await self.connections.send(websocket, ERROR, {"message": "Unknown event"})

    async def on_send_message(self, websocket: WebSocket, user_id: uuid.UUID, data: Dict[str, Any]) -> None:
        try:
            request = SendMessageRequest.model_validate(data)
        except ValidationError:
            await self.connections.send(websocket, ERROR, {"message": "Missing required fields"})
            return

        try:
            async with self.session_maker() as session:
                sender = await self._load_user(session, user_id)
                sent = await MessagingService(session).send_message(sender, request)
        except AthLinkedError as e:
            await self.connections.send(websocket, ERROR, {"message": e.message})
            return
        except Exception:
            logger.exception(f"Failed to send message for user {user_id}")
            await self.connections.send(websocket, ERROR, {"message": "Failed to send message"})
            return

        await self.publish_message(sent, origin=websocket)

    async def on_mark_read(self, websocket: WebSocket, user_id: uuid.UUID, data: Dict[str, Any]) -> None:
        try:
            conversation_id = uuid.UUID(str(data.get("conversation_id")))
        except ValueError:
            await self.connections.send(websocket, ERROR, {"message": "Missing required fields"})
            return

        try:
            async with self.session_maker() as session:
                reader = await self._load_user(session, user_id)
                receipt = await MessagingService(session).mark_as_read(conversation_id, reader)
        except AthLinkedError as e:
            await self.connections.send(websocket, ERROR, {"message": e.message})
            return
        except Exception:
            logger.exception(f"Failed to mark conversation {conversation_id} read for user {user_id}")
            await self.connections.send(websocket, ERROR, {"message": "Failed to mark messages as read"})
            return

        await self.publish_read(receipt)

    async def publish_message(self, sent: SentMessage, origin: Optional[WebSocket] = None) -> None:
        """
        Fan a stored message out.

        The receiver's sockets get the message, their conversation view and
        their unread total. The sender gets a delivery notice when the
        receiver is online, then the echoed message and their own
        conversation view. With ``origin`` set (the message came over a
        socket) the sender-side frames go to that socket only; otherwise to
        all of the sender's sockets.
        """
        receiver_id = sent.receiver_id
        await self.connections.emit_to_user(receiver_id, RECEIVE_MESSAGE, sent.message)
        await self.connections.emit_to_user(receiver_id, CONVERSATION_UPDATED, sent.receiver_update)
        await self.connections.emit_to_user(receiver_id, MESSAGE_COUNT_UPDATE, {"count": sent.receiver_unread_total})

        delivered = self.connections.is_online(receiver_id)
        echo = sent.message.model_copy(update={"is_delivered": delivered})

        async def to_sender(event: str, payload: Any) -> None:
            if origin is not None:
                await self.connections.send(origin, event, payload)
            else:
                await self.connections.emit_to_user(sent.sender_id, event, payload)

        if delivered:
            await to_sender(
                MESSAGE_DELIVERED,
                {
                    "message_id": sent.message.id,
                    "conversation_id": sent.message.conversation_id,
                    "client_message_id": sent.message.client_message_id,
                },
            )
        await to_sender(RECEIVE_MESSAGE, echo)
        await to_sender(CONVERSATION_UPDATED, sent.sender_update)

    async def publish_read(self, receipt: ReadReceipt) -> None:
        """Tell the other participant their messages were read and refresh the reader's badges."""
        await self.connections.emit_to_user(
            receipt.other_user_id,
            MESSAGES_READ,
            {"conversationId": receipt.conversation_id, "readerId": receipt.reader_id},
        )
        await self.connections.emit_to_user(receipt.reader_id, CONVERSATION_UPDATED, receipt.reader_update)
        await self.connections.emit_to_user(
            receipt.reader_id, MESSAGE_COUNT_UPDATE, {"count": receipt.reader_unread_total}
        )

    async def publish_conversation_changed(self, service: MessagingService, conversation_id: uuid.UUID, *user_ids: Optional[uuid.UUID]) -> None:
        """Push fresh ``conversation_updated`` and unread totals to the given users."""
        for user_id in user_ids:
            if user_id is None or not self.connections.is_online(user_id):
                continue
            update = await service.conversation_update(conversation_id, user_id)
            await self.connections.emit_to_user(user_id, CONVERSATION_UPDATED, update)
            await self.connections.emit_to_user(user_id, MESSAGE_COUNT_UPDATE, {"count": await service.unread_count(user_id)})

    @staticmethod
    async def _load_user(session: AsyncSession, user_id: uuid.UUID) -> User:
        user = await session.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user
