"""
Favorite athlete entity models.

Coaches keep a shortlist of athletes they are scouting. Each row pairs one
coach with one athlete.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, utc_now_naive


class FavoriteAthlete(Base, table=True):
    """
    Table: favorite_athletes
    """

    __tablename__ = "favorite_athletes"
    __table_args__ = (
        UniqueConstraint("coach_id", "athlete_id", name="uq_favorite_athletes_pair"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    coach_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    athlete_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now_naive, index=True)

    def __repr__(self) -> str:
        return f"FavoriteAthlete(coach_id={self.coach_id}, athlete_id={self.athlete_id})"
