"""
Notification entity models.

A notification tells its recipient that someone acted on them or on their
content: a follow, a connection request or acceptance, a like or a comment.
The actor's name is copied onto the row so the list reads correctly even
after the actor renames or deletes their account.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field

from ..base import Base, utc_now_naive


class NotificationType(str, Enum):
    FOLLOW = "follow"
    CONNECTION_REQUEST = "connection_request"
    CONNECTION_ACCEPTED = "connection_accepted"
    LIKE = "like"
    COMMENT = "comment"


class NotificationEntity(str, Enum):
    """What ``entity_id`` points at."""

    PROFILE = "profile"
    CLIP = "clip"
    COMMENT = "comment"


class Notification(Base, table=True):
    """
    Table: notifications
    """

    __tablename__ = "notifications"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    recipient_user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    actor_user_id: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id")
    actor_full_name: str = Field(max_length=255)
    type: str = Field(max_length=30)
    entity_type: str = Field(max_length=20)
    entity_id: uuid.UUID
    message: str
    is_read: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utc_now_naive, index=True)

    def __repr__(self) -> str:
        return f"Notification(id={self.id}, recipient_user_id={self.recipient_user_id}, type={self.type})"
