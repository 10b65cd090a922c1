"""
Network I/O models.

Follower lists, connection requests and relationship status. These payloads
use snake_case keys.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class NetworkUser(BaseModel):
    """A user as listed in follower, following and connection lists."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: Optional[str] = None
    full_name: Optional[str] = None
    profile_url: Optional[str] = None
    user_type: str
    primary_sport: Optional[str] = None
    followed_at: Optional[datetime] = None


class UserListResponse(BaseModel):
    success: bool = True
    users: List[NetworkUser]
    count: int


class FollowCountsResponse(BaseModel):
    success: bool = True
    followers: int
    following: int


class IsFollowingResponse(BaseModel):
    success: bool = True
    is_following: bool


class ConnectionRequestRead(BaseModel):
    """Pending request with the requester's public details."""

    id: uuid.UUID
    requester_id: uuid.UUID
    receiver_id: uuid.UUID
    status: str
    created_at: datetime
    requester_username: Optional[str] = None
    requester_full_name: Optional[str] = None
    requester_profile_url: Optional[str] = None
    requester_user_type: Optional[str] = None


class ConnectionRequestsResponse(BaseModel):
    success: bool = True
    requests: List[ConnectionRequestRead]


class ConnectionStatusResponse(BaseModel):
    """``status`` is ``connected``, ``pending``, ``accepted`` or None when nothing exists."""

    success: bool = True
    exists: bool
    status: Optional[str] = None


class ActionResult(BaseModel):
    """Outcome of an action that may be declined for a business reason."""

    success: bool
    message: str
