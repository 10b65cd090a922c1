"""
Messaging entity models.

A conversation joins exactly two participants. Each participant row caches
the member's display name and an ``unread_count``; the conversation caches a
preview of its newest message. ``message_reads`` holds one read receipt per
message and reader.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from sqlalchemy import JSON, UniqueConstraint
from sqlmodel import Field

from ..base import Base, utc_now_naive


class MessageType(str, Enum):
    """Kind of payload carried by a message."""

    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    GIF = "gif"
    FILE = "file"
    POST = "post"


class Conversation(Base, table=True):
    """Conversation between two users.

    ``pair_key`` is ``"<smaller id>:<larger id>"`` of the two participants; its
    unique index keeps a single conversation per pair.

    Table: conversations
    """

    __tablename__ = "conversations"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    pair_key: str = Field(max_length=80, unique=True, index=True)
    last_message: Optional[str] = Field(default=None)
    last_message_at: Optional[datetime] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utc_now_naive, index=True)
    updated_at: datetime = Field(default_factory=utc_now_naive, sa_column_kwargs={"onupdate": utc_now_naive})

    def __repr__(self) -> str:
        return f"Conversation(id={self.id}, last_message_at={self.last_message_at})"


class ConversationParticipant(Base, table=True):
    """
    Table: conversation_participants
    """

    __tablename__ = "conversation_participants"
    __table_args__ = (
        UniqueConstraint("conversation_id", "user_id", name="uq_conversation_participants_pair"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    conversation_id: uuid.UUID = Field(foreign_key="conversations.id", index=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    user_name: str = Field(max_length=255)
    unread_count: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now_naive)

    def __repr__(self) -> str:
        return f"ConversationParticipant(conversation_id={self.conversation_id}, user_id={self.user_id})"


class Message(Base, table=True):
    """
    Table: messages
    """

    __tablename__ = "messages"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    conversation_id: uuid.UUID = Field(foreign_key="conversations.id", index=True)
    sender_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    sender_name: str = Field(max_length=255)
    message: str = Field(default="")
    media_url: Optional[str] = Field(default=None)
    message_type: str = Field(default=MessageType.TEXT.value, max_length=20)
    post_data: Optional[dict[str, Any]] = Field(default=None, sa_type=JSON)
    created_at: datetime = Field(default_factory=utc_now_naive, index=True)

    def __repr__(self) -> str:
        return f"Message(id={self.id}, conversation_id={self.conversation_id}, type={self.message_type})"


class MessageRead(Base, table=True):
    """
    Table: message_reads
    """

    __tablename__ = "message_reads"
    __table_args__ = (
        UniqueConstraint("message_id", "user_id", name="uq_message_reads_pair"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    message_id: uuid.UUID = Field(foreign_key="messages.id", index=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    read_at: datetime = Field(default_factory=utc_now_naive)
