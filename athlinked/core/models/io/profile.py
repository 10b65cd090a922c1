"""
Profile I/O models for API requests and responses.

This module contains the schemas for editing the caller's own profile and for
the read-only aggregate shown on a profile page.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, field_validator

from .common import CamelInput, CamelModel, split_csv
from .profile_sections import (
    AcademicBackgroundRead,
    AchievementRead,
    AthleticPerformanceRead,
    CharacterLeadershipRead,
    CompetitionClubRead,
    HealthReadinessRead,
    SocialHandleRead,
    VideoMediaRead,
)


class ProfileUpdate(CamelInput):
    """Schema for a partial update of the caller's profile. Only sent fields change."""

    full_name: Optional[str] = Field(default=None, max_length=255)
    profile_url: Optional[str] = None
    cover_url: Optional[str] = None
    bio: Optional[str] = None
    education: Optional[str] = None
    city: Optional[str] = Field(default=None, max_length=255)
    primary_sport: Optional[str] = Field(default=None, max_length=100)
    sports_played: Optional[List[str]] = Field(default=None, description="Comma separated string or list")
    dob: Optional[date] = None

    @field_validator("sports_played", mode="before")
    @classmethod
    def _split_sports(cls, value):
        return split_csv(value)


class ProfileImagesUpdate(CamelInput):
    """New image locations. Uploading the files themselves happens elsewhere."""

    profile_image_url: Optional[str] = None
    cover_image_url: Optional[str] = None


class PublicProfileRead(CamelModel):
    """Profile of a user as anyone may see it. Email and date of birth are left out."""

    id: uuid.UUID
    full_name: Optional[str] = None
    username: Optional[str] = None
    user_type: str
    profile_url: Optional[str] = None
    cover_url: Optional[str] = None
    bio: Optional[str] = None
    education: Optional[str] = None
    city: Optional[str] = None
    primary_sport: Optional[str] = None
    sports_played: Optional[List[str]] = None
    is_featured: bool = False
    followers: int = 0
    following: int = 0
    created_at: datetime


class ProfileRead(PublicProfileRead):
    """The caller's own profile, private fields included."""

    email: str
    dob: Optional[date] = None


class ProfileStats(CamelModel):
    """Profile card: the user plus their most relevant athletic performance row."""

    profile: PublicProfileRead
    athletic_performance: Optional[AthleticPerformanceRead] = None


class FollowCounts(CamelModel):
    followers: int = 0
    following: int = 0


class ConnectionStatus(CamelModel):
    """Relationship between the viewer and the profile owner."""

    is_following: bool = False
    is_connected: bool = False
    request_status: Optional[str] = Field(default=None, description="pending, accepted or None")


class ProfileComplete(CamelModel):
    """Everything a profile page shows, in one response."""

    profile: PublicProfileRead
    follow_counts: FollowCounts
    connection_status: Optional[ConnectionStatus] = None
    social_handles: List[SocialHandleRead] = Field(default_factory=list)
    academic_backgrounds: List[AcademicBackgroundRead] = Field(default_factory=list)
    achievements: List[AchievementRead] = Field(default_factory=list)
    athletic_performance: List[AthleticPerformanceRead] = Field(default_factory=list)
    competition_clubs: List[CompetitionClubRead] = Field(default_factory=list)
    character_leadership: List[CharacterLeadershipRead] = Field(default_factory=list)
    health_readiness: List[HealthReadinessRead] = Field(default_factory=list)
    video_media: List[VideoMediaRead] = Field(default_factory=list)
