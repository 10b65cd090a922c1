"""
Real-time WebSocket Endpoint.

Clients connect to ``/ws?token=<access token>`` and exchange JSON frames of
the form ``{"event": "...", "data": {...}}``. Connections without a valid
access token are closed with policy-violation code 1008 before being
accepted.
"""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, WebSocket, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.websockets import WebSocketDisconnect

from athlinked.core.database import get_session_maker
from athlinked.core.exceptions import AuthenticationError
from athlinked.core.logging_config import get_logger
from athlinked.server.core.security import user_id_from_token
from athlinked.server.services.realtime import ConnectionManager, MessagingGateway, get_connection_manager

logger = get_logger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def realtime_socket(
    websocket: WebSocket,
    connections: Annotated[ConnectionManager, Depends(get_connection_manager)],
    session_maker: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_maker)],
    token: Optional[str] = Query(default=None),
):
    """
    Messaging socket.

    Client events: ``send_message``, ``mark_read``. Server events:
    ``receive_message``, ``conversation_updated``, ``message_count_update``,
    ``message_delivered``, ``messages_read`` and ``error``.
    """
    try:
        user_id = user_id_from_token(token or "")
    except AuthenticationError as e:
        logger.info(f"Rejected socket: {e.message}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=e.message)
        return

    await connections.connect(websocket, user_id)
    gateway = MessagingGateway(connections, session_maker)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", status.WS_1000_NORMAL_CLOSURE))
            # binary frames carry "bytes" instead of "text"
            await gateway.handle_frame(websocket, user_id, message.get("text"))
    except WebSocketDisconnect:
        logger.debug(f"Socket of user {user_id} disconnected")
    finally:
        connections.disconnect(websocket, user_id)
