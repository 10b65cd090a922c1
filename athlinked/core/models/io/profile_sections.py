"""
Profile section I/O models.

For every section there is a ``...Fields`` model with all columns optional
(used for partial updates), a ``...Create`` model that makes the section's
key column required and a ``...Read`` model for responses. All of them speak
camelCase on the wire.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import List, Optional

from pydantic import field_validator

from .common import CamelInput, CamelModel, split_csv


class SectionRead(CamelModel):
    """Columns shared by every section response."""

    id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------
# Academic backgrounds
# ---------------------------------------------------------------------


class AcademicBackgroundFields(CamelInput):
    school: Optional[str] = None
    degree: Optional[str] = None
    qualification: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    degree_pdf: Optional[str] = None
    academic_gpa: Optional[str] = None
    sat_act_score: Optional[str] = None
    academic_honors: Optional[str] = None
    college_eligibility_status: Optional[str] = None
    graduation_year: Optional[str] = None
    primary_state_region: Optional[str] = None
    preferred_college_regions: Optional[str] = None
    willingness_to_relocate: Optional[str] = None
    gender: Optional[str] = None

    @field_validator("academic_gpa", "sat_act_score", "graduation_year", mode="before")
    @classmethod
    def _numbers_as_text(cls, value):
        return str(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else value


class AcademicBackgroundCreate(AcademicBackgroundFields):
    school: str


class AcademicBackgroundRead(SectionRead, AcademicBackgroundFields):
    school: str


# ---------------------------------------------------------------------
# Achievements
# ---------------------------------------------------------------------


class AchievementFields(CamelInput):
    title: Optional[str] = None
    organization: Optional[str] = None
    date_awarded: Optional[date] = None
    sport: Optional[str] = None
    position_event: Optional[str] = None
    achievement_type: Optional[str] = None
    level: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    media_pdf: Optional[str] = None


class AchievementCreate(AchievementFields):
    title: str


class AchievementRead(SectionRead, AchievementFields):
    title: str


# ---------------------------------------------------------------------
# Athletic performance
# ---------------------------------------------------------------------


class AthleticPerformanceFields(CamelInput):
    height: Optional[str] = None
    weight: Optional[str] = None
    sport: Optional[str] = None
    athlete_handedness: Optional[str] = None
    dominant_side_or_foot: Optional[str] = None
    jersey_number: Optional[str] = None
    training_hours_per_week: Optional[str] = None
    multi_sport_athlete: Optional[str] = None
    coach_verified_profile: Optional[str] = None
    hand: Optional[str] = None
    arm: Optional[str] = None

    @field_validator(
        "height",
        "weight",
        "jersey_number",
        "training_hours_per_week",
        "multi_sport_athlete",
        "coach_verified_profile",
        mode="before",
    )
    @classmethod
    def _scalars_as_text(cls, value):
        if isinstance(value, bool):
            return "Yes" if value else "No"
        return str(value) if isinstance(value, (int, float)) else value


class AthleticPerformanceCreate(AthleticPerformanceFields):
    pass


class AthleticPerformanceRead(SectionRead, AthleticPerformanceFields):
    pass


# ---------------------------------------------------------------------
# Competition clubs
# ---------------------------------------------------------------------


class CompetitionClubFields(CamelInput):
    club_or_travel_team_name: Optional[str] = None
    team_level: Optional[str] = None
    league_or_organization_name: Optional[str] = None
    tournament_participation: Optional[str] = None


class CompetitionClubCreate(CompetitionClubFields):
    club_or_travel_team_name: str


class CompetitionClubRead(SectionRead, CompetitionClubFields):
    club_or_travel_team_name: str


# ---------------------------------------------------------------------
# Character & leadership
# ---------------------------------------------------------------------


class CharacterLeadershipFields(CamelInput):
    team_captain: Optional[str] = None
    leadership_roles: Optional[str] = None
    languages_spoken: Optional[List[str]] = None
    community_service: Optional[str] = None

    @field_validator("languages_spoken", mode="before")
    @classmethod
    def _split_languages(cls, value):
        return split_csv(value)

    @field_validator("team_captain", mode="before")
    @classmethod
    def _flag_as_text(cls, value):
        if isinstance(value, bool):
            return "Yes" if value else "No"
        return value


class CharacterLeadershipCreate(CharacterLeadershipFields):
    pass


class CharacterLeadershipRead(SectionRead, CharacterLeadershipFields):
    pass


# ---------------------------------------------------------------------
# Health & readiness
# ---------------------------------------------------------------------


class HealthReadinessFields(CamelInput):
    injury_history: Optional[str] = None
    resting_heart_rate: Optional[str] = None
    endurance_metric: Optional[str] = None

    @field_validator("resting_heart_rate", "endurance_metric", mode="before")
    @classmethod
    def _numbers_as_text(cls, value):
        return str(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else value


class HealthReadinessCreate(HealthReadinessFields):
    pass


class HealthReadinessRead(SectionRead, HealthReadinessFields):
    pass


# ---------------------------------------------------------------------
# Video & media
# ---------------------------------------------------------------------


class VideoMediaFields(CamelInput):
    highlight_video_link: Optional[str] = None
    video_status: Optional[str] = None
    verified_media_profile: Optional[str] = None


class VideoMediaCreate(VideoMediaFields):
    pass


class VideoMediaRead(SectionRead, VideoMediaFields):
    pass


# ---------------------------------------------------------------------
# Social handles
# ---------------------------------------------------------------------


class SocialHandleFields(CamelInput):
    platform: Optional[str] = None
    url: Optional[str] = None


class SocialHandleCreate(SocialHandleFields):
    platform: str
    url: str


class SocialHandleRead(SectionRead, SocialHandleFields):
    platform: str
    url: str
