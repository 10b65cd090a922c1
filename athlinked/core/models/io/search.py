"""
Member directory I/O models.

Search results are public: email and date of birth are never included.
These payloads use snake_case keys.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class DirectoryUser(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    full_name: Optional[str] = None
    username: Optional[str] = None
    user_type: str
    profile_url: Optional[str] = None
    bio: Optional[str] = None
    city: Optional[str] = None
    education: Optional[str] = None
    primary_sport: Optional[str] = None
    sports_played: Optional[List[str]] = None
    created_at: datetime


class DirectoryResponse(BaseModel):
    success: bool = True
    users: List[DirectoryUser]
    count: int


class DirectoryUserResponse(BaseModel):
    success: bool = True
    user: DirectoryUser
