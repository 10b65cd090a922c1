"""
Social graph entity models.

Following is one-directional (``user_follows``). A connection is mutual and is
established through a ``connection_requests`` row that the receiver accepts;
accepted pairs live in ``user_connections`` with the smaller id first so each
pair has exactly one row.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlmodel import Field

from ..base import Base, utc_now_naive


class ConnectionRequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"


class UserFollow(Base, table=True):
    """
    Table: user_follows
    """

    __tablename__ = "user_follows"
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_user_follows_pair"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    follower_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    following_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    follower_username: Optional[str] = Field(default=None, max_length=255)
    following_username: Optional[str] = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=utc_now_naive, index=True)

    def __repr__(self) -> str:
        return f"UserFollow(follower_id={self.follower_id}, following_id={self.following_id})"


class ConnectionRequest(Base, table=True):
    """
    Table: connection_requests
    """

    __tablename__ = "connection_requests"
    __table_args__ = (
        UniqueConstraint("requester_id", "receiver_id", name="uq_connection_requests_pair"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    requester_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    receiver_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    status: str = Field(default=ConnectionRequestStatus.PENDING.value, max_length=20)
    created_at: datetime = Field(default_factory=utc_now_naive, index=True)
    updated_at: datetime = Field(default_factory=utc_now_naive, sa_column_kwargs={"onupdate": utc_now_naive})

    def __repr__(self) -> str:
        return f"ConnectionRequest(id={self.id}, requester_id={self.requester_id}, status={self.status})"


class UserConnection(Base, table=True):
    """Accepted mutual connection, stored once per pair with ``user_id_1 < user_id_2``.

    Table: user_connections
    """

    __tablename__ = "user_connections"
    __table_args__ = (
        UniqueConstraint("user_id_1", "user_id_2", name="uq_user_connections_pair"),
        CheckConstraint("user_id_1 < user_id_2", name="ck_user_connections_order"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id_1: uuid.UUID = Field(foreign_key="users.id", index=True)
    user_id_2: uuid.UUID = Field(foreign_key="users.id", index=True)
    full_name_1: Optional[str] = Field(default=None, max_length=255)
    full_name_2: Optional[str] = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=utc_now_naive)

    def __repr__(self) -> str:
        return f"UserConnection(user_id_1={self.user_id_1}, user_id_2={self.user_id_2})"
