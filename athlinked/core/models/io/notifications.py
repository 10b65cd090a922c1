"""
Notification I/O models.

Notifications travel in camelCase like profile payloads.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List

from pydantic import BaseModel

from .common import CamelModel


class NotificationRead(CamelModel):
    id: uuid.UUID
    actor_full_name: str
    type: str
    message: str
    entity_type: str
    entity_id: uuid.UUID
    is_read: bool = False
    created_at: datetime


class NotificationListResponse(BaseModel):
    success: bool = True
    notifications: List[NotificationRead]
    count: int


class UnreadCountResponse(CamelModel):
    success: bool = True
    unread_count: int


class ReadAllResponse(CamelModel):
    success: bool = True
    message: str = "All notifications marked as read"
    updated_count: int
