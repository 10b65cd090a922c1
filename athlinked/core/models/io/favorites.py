"""
Favorite athlete I/O models. These payloads use snake_case keys.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class FavoriteAthleteRead(BaseModel):
    """An athlete on a coach's shortlist."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: Optional[str] = None
    full_name: Optional[str] = None
    user_type: str
    profile_url: Optional[str] = None
    bio: Optional[str] = None
    primary_sport: Optional[str] = None
    sports_played: Optional[List[str]] = None
    city: Optional[str] = None
    education: Optional[str] = None
    favorited_at: datetime


class FavoriteListResponse(BaseModel):
    success: bool = True
    favorites: List[FavoriteAthleteRead]


class FavoriteStatusResponse(BaseModel):
    success: bool = True
    is_favorite: bool
