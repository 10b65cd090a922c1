"""
Database entity models.

This package contains all database entity models organized by business domain
and table relationships.

Modules:
- users: Accounts, public profile columns and refresh tokens
- profile_sections: Per-user profile records and social handles
- network: Follows, connection requests and connections
- clips: Clips, comments, likes and saves
- messages: Conversations, participants, messages and read receipts
- notifications: Activity notifications addressed to a user
- favorites: Athletes shortlisted by coaches
"""

from . import (
    clips,
    favorites,
    messages,
    network,
    notifications,
    profile_sections,
    users,
)

__all__ = [
    "clips",
    "favorites",
    "messages",
    "network",
    "notifications",
    "profile_sections",
    "users",
]
