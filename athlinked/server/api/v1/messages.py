"""
Messages API Endpoints.

Conversations and messages between connected users. Actions that change
what other clients display (sending, reading, deleting) are also pushed to
the affected users' open WebSockets.
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Query, status

from athlinked.core.logging_config import get_logger
from athlinked.core.models.io.messages import (
    ConversationListResponse,
    ConversationResponse,
    CreateConversationRequest,
    MessageListResponse,
    MessageResponse,
    SearchUsersResponse,
    SendMessageRequest,
    UnreadCountResponse,
)
from athlinked.core.models.io.network import ActionResult
from athlinked.server.services.deps import CurrentUserDep, MessagingGatewayDep, MessagingServiceDep

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/conversations",
    response_model=ConversationListResponse,
    summary="List Conversations",
    description="The caller's conversations, most recent activity first.",
)
async def list_conversations(current_user: CurrentUserDep, service: MessagingServiceDep) -> ConversationListResponse:
    return ConversationListResponse(conversations=await service.conversations_for(current_user))


@router.post(
    "/conversations/create",
    response_model=ConversationResponse,
    summary="Open Conversation",
    description="Return the conversation with a connected user, creating it if needed.",
    responses={
        403: {"description": "Users are not connected"},
        404: {"description": "User not found"},
    },
)
async def create_conversation(
    payload: CreateConversationRequest, current_user: CurrentUserDep, service: MessagingServiceDep
) -> ConversationResponse:
    conversation = await service.get_or_create_conversation(current_user, payload.other_user_id)
    return ConversationResponse(conversation=conversation)


@router.post(
    "/send",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send Message",
    description="Send a message without a WebSocket. Connected clients are notified as if it came over the socket.",
    responses={
        400: {"description": "Missing required fields"},
        403: {"description": "Users are not connected"},
        404: {"description": "Receiver not found"},
    },
)
async def send_message(
    payload: SendMessageRequest,
    current_user: CurrentUserDep,
    service: MessagingServiceDep,
    gateway: MessagingGatewayDep,
) -> MessageResponse:
    """
    Send a message.

    - **receiver_id**: A connected user.
    - **message**: Text; may be empty when media_url or post_data is set.
    - **media_url**: Attachment location.
    - **message_type**: text, image, video, gif, file or post.
    - **post_data**: Shared post payload.
    - **client_message_id**: Opaque id echoed back for optimistic UI updates.
    """
    sent = await service.send_message(current_user, payload)
    await gateway.publish_message(sent)
    return MessageResponse(message=sent.message)


@router.get(
    "/unread-count",
    response_model=UnreadCountResponse,
    summary="Get Unread Count",
    description="Total unread messages across the caller's conversations.",
)
async def unread_count(current_user: CurrentUserDep, service: MessagingServiceDep) -> UnreadCountResponse:
    return UnreadCountResponse(count=await service.unread_count(current_user.id))


@router.get(
    "/search/users",
    response_model=SearchUsersResponse,
    summary="Search Connected Users",
    description="Connected users whose username or full name contains the query. Blank queries return nothing.",
)
async def search_users(
    current_user: CurrentUserDep,
    service: MessagingServiceDep,
    q: Optional[str] = Query(default=None, description="Case-insensitive name fragment"),
) -> SearchUsersResponse:
    return SearchUsersResponse(users=await service.search_network_users(current_user, q))


@router.post(
    "/{conversation_id}/read",
    response_model=ActionResult,
    summary="Mark Conversation Read",
    description="Mark every message from the other participant as read and reset the caller's unread counter.",
    responses={
        403: {"description": "Not a participant"},
        404: {"description": "Conversation not found"},
    },
)
async def mark_as_read(
    conversation_id: uuid.UUID,
    current_user: CurrentUserDep,
    service: MessagingServiceDep,
    gateway: MessagingGatewayDep,
) -> ActionResult:
    receipt = await service.mark_as_read(conversation_id, current_user)
    await gateway.publish_read(receipt)
    return ActionResult(success=True, message=f"Marked {receipt.marked} messages as read")


@router.get(
    "/{conversation_id}",
    response_model=MessageListResponse,
    summary="List Messages",
    description="Messages of a conversation in chronological order with read flags.",
    responses={
        403: {"description": "Not a participant"},
        404: {"description": "Conversation not found"},
    },
)
async def list_messages(
    conversation_id: uuid.UUID, current_user: CurrentUserDep, service: MessagingServiceDep
) -> MessageListResponse:
    return MessageListResponse(messages=await service.messages_for(conversation_id, current_user))


@router.delete(
    "/message/{message_id}",
    response_model=ActionResult,
    summary="Delete Message",
    responses={
        403: {"description": "Message sent by someone else"},
        404: {"description": "Message not found"},
    },
)
async def delete_message(
    message_id: uuid.UUID,
    current_user: CurrentUserDep,
    service: MessagingServiceDep,
    gateway: MessagingGatewayDep,
) -> ActionResult:
    conversation_id, other_user_id = await service.delete_message(message_id, current_user)
    await gateway.publish_conversation_changed(service, conversation_id, current_user.id, other_user_id)
    return ActionResult(success=True, message="Message deleted successfully")


@router.delete(
    "/conversation/{conversation_id}",
    response_model=ActionResult,
    summary="Delete Conversation",
    description="Delete a conversation with all its messages for both participants.",
    responses={
        403: {"description": "Not a participant"},
        404: {"description": "Conversation not found"},
    },
)
async def delete_conversation(
    conversation_id: uuid.UUID, current_user: CurrentUserDep, service: MessagingServiceDep
) -> ActionResult:
    await service.delete_conversation(conversation_id, current_user)
    return ActionResult(success=True, message="Conversation deleted successfully")
