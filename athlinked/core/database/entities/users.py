"""
User and credential entity models.

This module contains the ``users`` table, which holds both the account and the
public profile of every member, and the ``refresh_tokens`` table backing
long-lived sessions.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import JSON
from sqlmodel import Field

from ..base import Base, utc_now_naive


class UserType(str, Enum):
    """Kind of account."""

    ATHLETE = "athlete"
    COACH = "coach"
    PARENT = "parent"
    ORGANIZATION = "organization"


class User(Base, table=True):
    """Member account and public profile.

    ``followers`` and ``following`` are denormalized counters maintained by the
    network service alongside ``user_follows`` rows.

    Table: users
    """

    __tablename__ = "users"
    __table_args__ = ({"extend_existing": True},)

    # Primary key
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    # Account
    email: str = Field(max_length=255, unique=True, index=True, description="Login email, stored lower-cased")
    username: Optional[str] = Field(default=None, max_length=50, unique=True, index=True)
    password_hash: str = Field(description="passlib hash of the password")
    user_type: str = Field(default=UserType.ATHLETE.value, max_length=20)
    parent_email: Optional[str] = Field(default=None, max_length=255, description="Guardian email for minors")

    # Public profile
    full_name: Optional[str] = Field(default=None, max_length=255)
    profile_url: Optional[str] = Field(default=None)
    cover_url: Optional[str] = Field(default=None)
    bio: Optional[str] = Field(default=None)
    education: Optional[str] = Field(default=None)
    city: Optional[str] = Field(default=None, max_length=255)
    primary_sport: Optional[str] = Field(default=None, max_length=100)
    sports_played: Optional[List[str]] = Field(default=None, sa_type=JSON)
    dob: Optional[date] = Field(default=None)
    is_featured: bool = Field(default=False, index=True)

    # Network counters
    followers: int = Field(default=0)
    following: int = Field(default=0)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now_naive, index=True)
    updated_at: datetime = Field(default_factory=utc_now_naive, sa_column_kwargs={"onupdate": utc_now_naive})

    @property
    def display_name(self) -> str:
        return self.full_name or self.username or "User"

    def __repr__(self) -> str:
        return f"User(id={self.id}, username={self.username}, user_type={self.user_type})"


class RefreshToken(Base, table=True):
    """Opaque refresh token issued at login.

    A token is usable while ``revoked_at`` is null and ``expires_at`` lies in
    the future.

    Table: refresh_tokens
    """

    __tablename__ = "refresh_tokens"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    token: str = Field(max_length=255, unique=True, index=True)
    expires_at: datetime = Field(index=True)
    revoked_at: Optional[datetime] = Field(default=None)
    device_info: Optional[str] = Field(default=None)
    ip_address: Optional[str] = Field(default=None, max_length=64)
    created_at: datetime = Field(default_factory=utc_now_naive)

    def __repr__(self) -> str:
        return f"RefreshToken(id={self.id}, user_id={self.user_id}, revoked={self.revoked_at is not None})"
