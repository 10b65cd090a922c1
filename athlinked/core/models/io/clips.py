"""
Clip I/O models.

Schemas for posting clips, the paginated feed, threaded comments, likes and
saves. Keys are snake_case.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClipCreate(BaseModel):
    video_url: str = Field(min_length=1, description="Location of the already uploaded video")
    description: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("video_url")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("video_url is required")
        return value


class ClipRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    username: str
    user_profile_url: Optional[str] = None
    user_type: Optional[str] = None
    video_url: str
    description: Optional[str] = None
    like_count: int = 0
    comment_count: int = 0
    is_liked: bool = False
    is_saved: bool = False
    created_at: datetime


class Pagination(BaseModel):
    page: int
    limit: int
    totalClips: int
    totalPages: int
    hasNext: bool
    hasPrev: bool


class ClipFeedResponse(BaseModel):
    success: bool = True
    clips: List[ClipRead]
    pagination: Pagination


class ClipListResponse(BaseModel):
    success: bool = True
    clips: List[ClipRead]


class ClipResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    clip: ClipRead


class CommentCreate(BaseModel):
    comment: str = Field(min_length=1, max_length=2000)

    @field_validator("comment")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("comment is required")
        return value


class CommentRead(BaseModel):
    """A comment with its nested replies."""

    id: uuid.UUID
    clip_id: uuid.UUID
    user_id: uuid.UUID
    username: Optional[str] = None
    user_profile_url: Optional[str] = None
    comment: str
    parent_comment_id: Optional[uuid.UUID] = None
    created_at: datetime
    replies: List["CommentRead"] = Field(default_factory=list)


class CommentResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    comment: CommentRead


class CommentListResponse(BaseModel):
    success: bool = True
    comments: List[CommentRead]


class LikeResponse(BaseModel):
    success: bool = True
    message: str
    like_count: int


class SaveRequest(BaseModel):
    """Save or unsave an item. Only clips can be saved."""

    type: Literal["clip"] = "clip"
    id: uuid.UUID


class SavedItemsResponse(BaseModel):
    success: bool = True
    clips: List[ClipRead]


CommentRead.model_rebuild()
