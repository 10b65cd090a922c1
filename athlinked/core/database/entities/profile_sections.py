"""
Profile section entity models.

Each table here is a list of records owned by one user and shown on their
profile page: academic history, achievements, athletic measurements, club
teams, character traits, health readiness, highlight media and social
handles. All of them share the ``ProfileSectionBase`` columns.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import JSON
from sqlmodel import Field

from ..base import Base, utc_now_naive


class ProfileSectionBase(Base):
    """Columns common to every profile section table."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now_naive, index=True)
    updated_at: datetime = Field(default_factory=utc_now_naive, sa_column_kwargs={"onupdate": utc_now_naive})


class AcademicBackground(ProfileSectionBase, table=True):
    """
    Table: academic_backgrounds
    """

    __tablename__ = "academic_backgrounds"
    __table_args__ = ({"extend_existing": True},)

    school: str = Field(max_length=255)
    degree: Optional[str] = Field(default=None, max_length=255)
    qualification: Optional[str] = Field(default=None, max_length=255)
    start_date: Optional[date] = Field(default=None)
    end_date: Optional[date] = Field(default=None)
    degree_pdf: Optional[str] = Field(default=None)
    academic_gpa: Optional[str] = Field(default=None, max_length=20)
    sat_act_score: Optional[str] = Field(default=None, max_length=20)
    academic_honors: Optional[str] = Field(default=None)
    college_eligibility_status: Optional[str] = Field(default=None, max_length=100)
    graduation_year: Optional[str] = Field(default=None, max_length=10)
    primary_state_region: Optional[str] = Field(default=None, max_length=100)
    preferred_college_regions: Optional[str] = Field(default=None)
    willingness_to_relocate: Optional[str] = Field(default=None, max_length=20)
    gender: Optional[str] = Field(default=None, max_length=20)

    def __repr__(self) -> str:
        return f"AcademicBackground(id={self.id}, user_id={self.user_id}, school={self.school})"


class Achievement(ProfileSectionBase, table=True):
    """
    Table: achievements
    """

    __tablename__ = "achievements"
    __table_args__ = ({"extend_existing": True},)

    title: str = Field(max_length=255)
    organization: Optional[str] = Field(default=None, max_length=255)
    date_awarded: Optional[date] = Field(default=None)
    sport: Optional[str] = Field(default=None, max_length=100)
    position_event: Optional[str] = Field(default=None, max_length=255)
    achievement_type: Optional[str] = Field(default=None, max_length=100)
    level: Optional[str] = Field(default=None, max_length=100)
    location: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None)
    media_pdf: Optional[str] = Field(default=None)

    def __repr__(self) -> str:
        return f"Achievement(id={self.id}, user_id={self.user_id}, title={self.title})"


class AthleticPerformance(ProfileSectionBase, table=True):
    """Physical measurements and sport-specific attributes.

    Table: athletic_performance
    """

    __tablename__ = "athletic_performance"
    __table_args__ = ({"extend_existing": True},)

    height: Optional[str] = Field(default=None, max_length=20)
    weight: Optional[str] = Field(default=None, max_length=20)
    sport: Optional[str] = Field(default=None, max_length=100, index=True)
    athlete_handedness: Optional[str] = Field(default=None, max_length=20)
    dominant_side_or_foot: Optional[str] = Field(default=None, max_length=20)
    jersey_number: Optional[str] = Field(default=None, max_length=10)
    training_hours_per_week: Optional[str] = Field(default=None, max_length=10)
    multi_sport_athlete: Optional[str] = Field(default=None, max_length=10)
    coach_verified_profile: Optional[str] = Field(default=None, max_length=10)
    hand: Optional[str] = Field(default=None, max_length=20)
    arm: Optional[str] = Field(default=None, max_length=20)

    def __repr__(self) -> str:
        return f"AthleticPerformance(id={self.id}, user_id={self.user_id}, sport={self.sport})"


class CompetitionClub(ProfileSectionBase, table=True):
    """
    Table: competition_clubs
    """

    __tablename__ = "competition_clubs"
    __table_args__ = ({"extend_existing": True},)

    club_or_travel_team_name: str = Field(max_length=255)
    team_level: Optional[str] = Field(default=None, max_length=100)
    league_or_organization_name: Optional[str] = Field(default=None, max_length=255)
    tournament_participation: Optional[str] = Field(default=None)

    def __repr__(self) -> str:
        return f"CompetitionClub(id={self.id}, user_id={self.user_id}, name={self.club_or_travel_team_name})"


class CharacterLeadership(ProfileSectionBase, table=True):
    """
    Table: character_leadership
    """

    __tablename__ = "character_leadership"
    __table_args__ = ({"extend_existing": True},)

    team_captain: Optional[str] = Field(default=None, max_length=10)
    leadership_roles: Optional[str] = Field(default=None)
    languages_spoken: Optional[List[str]] = Field(default=None, sa_type=JSON)
    community_service: Optional[str] = Field(default=None)

    def __repr__(self) -> str:
        return f"CharacterLeadership(id={self.id}, user_id={self.user_id})"


class HealthReadiness(ProfileSectionBase, table=True):
    """
    Table: health_readiness
    """

    __tablename__ = "health_readiness"
    __table_args__ = ({"extend_existing": True},)

    injury_history: Optional[str] = Field(default=None)
    resting_heart_rate: Optional[str] = Field(default=None, max_length=20)
    endurance_metric: Optional[str] = Field(default=None, max_length=100)

    def __repr__(self) -> str:
        return f"HealthReadiness(id={self.id}, user_id={self.user_id})"


class VideoMedia(ProfileSectionBase, table=True):
    """
    Table: video_media
    """

    __tablename__ = "video_media"
    __table_args__ = ({"extend_existing": True},)

    highlight_video_link: Optional[str] = Field(default=None)
    video_status: Optional[str] = Field(default=None, max_length=50)
    verified_media_profile: Optional[str] = Field(default=None, max_length=255)

    def __repr__(self) -> str:
        return f"VideoMedia(id={self.id}, user_id={self.user_id})"


class SocialHandle(ProfileSectionBase, table=True):
    """Link to the user's account on another platform.

    Table: social_handles
    """

    __tablename__ = "social_handles"
    __table_args__ = ({"extend_existing": True},)

    platform: str = Field(max_length=50)
    url: str = Field(max_length=500)

    def __repr__(self) -> str:
        return f"SocialHandle(id={self.id}, user_id={self.user_id}, platform={self.platform})"
