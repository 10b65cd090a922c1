"""
Messaging I/O models.

Schemas shared by the REST endpoints and the real-time channel. Keys are
snake_case; the same ``MessageRead`` shape is pushed over the socket as the
``receive_message`` payload.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from athlinked.core.database.entities.messages import MessageType


class SendMessageRequest(BaseModel):
    """A message to a connected user.

    ``client_message_id`` is an opaque id the client attached to its optimistic
    copy of the message; it is echoed back so the client can replace that copy.
    """

    receiver_id: uuid.UUID
    message: Optional[str] = Field(default=None, max_length=5000)
    media_url: Optional[str] = None
    message_type: MessageType = MessageType.TEXT
    post_data: Optional[Dict[str, Any]] = None
    client_message_id: Optional[str] = Field(default=None, max_length=100)

    @model_validator(mode="after")
    def _has_content(self) -> "SendMessageRequest":
        self.message = (self.message or "").strip()
        if not self.message and not self.media_url and not self.post_data:
            raise ValueError("Missing required fields")
        return self


class CreateConversationRequest(BaseModel):
    other_user_id: uuid.UUID


class MessageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    conversation_id: uuid.UUID
    sender_id: uuid.UUID
    sender_name: str
    receiver_id: Optional[uuid.UUID] = None
    message: str
    media_url: Optional[str] = None
    message_type: str
    post_data: Optional[Dict[str, Any]] = None
    created_at: datetime
    is_read: bool = False
    is_read_by_recipient: bool = False
    is_delivered: Optional[bool] = None
    client_message_id: Optional[str] = None


class ConversationRead(BaseModel):
    """A conversation from the caller's point of view."""

    conversation_id: uuid.UUID
    other_user_id: uuid.UUID
    other_user_name: str
    other_user_username: Optional[str] = None
    other_user_profile_image: Optional[str] = None
    last_message: Optional[str] = None
    last_message_time: Optional[datetime] = None
    unread_count: int = 0


class ConversationUpdate(BaseModel):
    """Payload of the ``conversation_updated`` event."""

    conversation_id: uuid.UUID
    last_message: Optional[str] = None
    last_message_time: Optional[datetime] = None
    unread_count: int = 0


class SearchUser(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: Optional[str] = None
    full_name: Optional[str] = None
    profile_url: Optional[str] = None
    user_type: str


class ConversationListResponse(BaseModel):
    success: bool = True
    conversations: List[ConversationRead]


class MessageListResponse(BaseModel):
    success: bool = True
    messages: List[MessageRead]


class MessageResponse(BaseModel):
    success: bool = True
    message: MessageRead


class ConversationResponse(BaseModel):
    success: bool = True
    conversation: ConversationRead


class UnreadCountResponse(BaseModel):
    success: bool = True
    count: int


class SearchUsersResponse(BaseModel):
    success: bool = True
    users: List[SearchUser]
