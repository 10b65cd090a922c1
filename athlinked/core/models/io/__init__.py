"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities to allow independent evolution of API contracts.

Modules:
- common: Response envelope and camelCase base models
- auth: Signup, login and token models
- profile: Profile edit and aggregate models
- profile_sections: Per-section create/update/read models
- network: Follow and connection models
- clips: Clip, comment, like and save models
- messages: Conversation and message models
- notifications: Notification list and counters
- favorites: Coach shortlist models
- search: Member directory models
"""

from .common import ApiResponse, CamelInput, CamelModel

__all__ = [
    "ApiResponse",
    "CamelInput",
    "CamelModel",
]
