"""
Repository layer.

Data access objects organized by business domain. Each repository wraps one
table (or a tightly coupled group) and exposes async query helpers on top of
the generic CRUD contract in ``base``.
"""

from .base import AsyncBaseRepository, QueryBuilder, SQLModelRepository
from .clips import ClipCommentRepository, ClipLikeRepository, ClipRepository, SavedClipRepository
from .messages import ConversationRepository, MessageRepository, conversation_key
from .network import ConnectionRepository, ConnectionRequestRepository, FollowRepository, ordered_pair
from .notifications import FavoriteRepository, NotificationRepository
from .profile_sections import AthleticPerformanceRepository, ProfileSectionRepository
from .users import RefreshTokenRepository, UserRepository

__all__ = [
    "AsyncBaseRepository",
    "AthleticPerformanceRepository",
    "ClipCommentRepository",
    "ClipLikeRepository",
    "ClipRepository",
    "ConnectionRepository",
    "ConnectionRequestRepository",
    "ConversationRepository",
    "FavoriteRepository",
    "FollowRepository",
    "MessageRepository",
    "NotificationRepository",
    "ProfileSectionRepository",
    "QueryBuilder",
    "RefreshTokenRepository",
    "SQLModelRepository",
    "SavedClipRepository",
    "UserRepository",
    "conversation_key",
    "ordered_pair",
]
