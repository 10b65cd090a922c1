"""
Clip entity models.

Clips are short videos posted by users. ``like_count`` and ``comment_count``
are denormalized counters kept in step with ``clip_likes`` and
``clip_comments`` by the clips service.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, utc_now_naive


class Clip(Base, table=True):
    """
    Table: clips
    """

    __tablename__ = "clips"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    username: str = Field(max_length=255, description="Author display name at posting time")
    user_profile_url: Optional[str] = Field(default=None)
    video_url: str = Field(description="Location of the uploaded video")
    description: Optional[str] = Field(default=None)
    like_count: int = Field(default=0)
    comment_count: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now_naive, index=True)
    updated_at: datetime = Field(default_factory=utc_now_naive, sa_column_kwargs={"onupdate": utc_now_naive})

    def __repr__(self) -> str:
        return f"Clip(id={self.id}, user_id={self.user_id}, likes={self.like_count})"


class ClipComment(Base, table=True):
    """Comment on a clip; replies point at their parent through ``parent_comment_id``.

    Table: clip_comments
    """

    __tablename__ = "clip_comments"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    clip_id: uuid.UUID = Field(foreign_key="clips.id", index=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    comment: str
    parent_comment_id: Optional[uuid.UUID] = Field(default=None, foreign_key="clip_comments.id", index=True)
    created_at: datetime = Field(default_factory=utc_now_naive, index=True)

    def __repr__(self) -> str:
        return f"ClipComment(id={self.id}, clip_id={self.clip_id}, parent={self.parent_comment_id})"


class ClipLike(Base, table=True):
    """
    Table: clip_likes
    """

    __tablename__ = "clip_likes"
    __table_args__ = (
        UniqueConstraint("clip_id", "user_id", name="uq_clip_likes_pair"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    clip_id: uuid.UUID = Field(foreign_key="clips.id", index=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now_naive)


class SavedClip(Base, table=True):
    """
    Table: saved_clips
    """

    __tablename__ = "saved_clips"
    __table_args__ = (
        UniqueConstraint("clip_id", "user_id", name="uq_saved_clips_pair"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    clip_id: uuid.UUID = Field(foreign_key="clips.id", index=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now_naive, index=True)
