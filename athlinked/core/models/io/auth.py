"""
Authentication I/O models.

Schemas for signup, login and refresh-token rotation.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Optional

from pydantic import Field, field_validator

from athlinked.core.database.entities.users import UserType

from .common import CamelInput, CamelModel


class SignupRequest(CamelInput):
    """Schema for creating an account."""

    email: str = Field(max_length=255, description="Login email; stored lower-cased")
    password: str = Field(min_length=6, max_length=128)
    full_name: str = Field(min_length=1, max_length=255)
    user_type: UserType = Field(default=UserType.ATHLETE)
    username: Optional[str] = Field(default=None, max_length=50)
    parent_email: Optional[str] = Field(default=None, max_length=255)
    dob: Optional[date] = None

    @field_validator("email", "parent_email")
    @classmethod
    def _normalize_email(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip().lower()
        if "@" not in value or value.startswith("@") or value.endswith("@"):
            raise ValueError("must be a valid email address")
        return value

    @field_validator("username")
    @classmethod
    def _normalize_username(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip().lower()
        if "@" in value or " " in value:
            raise ValueError("may not contain spaces or '@'")
        return value


class LoginRequest(CamelModel):
    """Login with either an email address or a username in ``email``."""

    email: str = Field(min_length=1, description="Email address or username")
    password: str = Field(min_length=1)


class RefreshRequest(CamelModel):
    refresh_token: str = Field(min_length=1)


class UserPublic(CamelModel):
    """Account summary returned with tokens."""

    id: uuid.UUID
    email: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    user_type: str
    profile_url: Optional[str] = None


class AuthResponse(CamelModel):
    """Token pair with the authenticated user."""

    success: bool = True
    message: Optional[str] = None
    access_token: str
    refresh_token: str
    user: UserPublic
