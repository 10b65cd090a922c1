"""
Notification API Endpoints.

The caller's notification inbox. Clients poll ``/unread-count`` for the
badge.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Query

from athlinked.core.models.io.common import ApiResponse
from athlinked.core.models.io.network import ActionResult
from athlinked.core.models.io.notifications import (
    NotificationListResponse,
    NotificationRead,
    ReadAllResponse,
    UnreadCountResponse,
)
from athlinked.server.core.constant import DEFAULT_NOTIFICATION_LIMIT
from athlinked.server.services.deps import CurrentUserDep, NotificationServiceDep

router = APIRouter()


@router.get(
    "",
    response_model=NotificationListResponse,
    summary="List Notifications",
    description="The caller's notifications, newest first.",
)
async def list_notifications(
    current_user: CurrentUserDep,
    service: NotificationServiceDep,
    limit: int = Query(default=DEFAULT_NOTIFICATION_LIMIT, description="Page size, clamped to 1..100"),
    offset: int = Query(default=0, description="Rows to skip"),
) -> NotificationListResponse:
    notifications = await service.list_for(current_user, limit=limit, offset=offset)
    return NotificationListResponse(notifications=notifications, count=len(notifications))


@router.get("/unread-count", response_model=UnreadCountResponse, summary="Count Unread Notifications")
async def unread_count(current_user: CurrentUserDep, service: NotificationServiceDep) -> UnreadCountResponse:
    return UnreadCountResponse(unread_count=await service.unread_count(current_user))


@router.post("/read-all", response_model=ReadAllResponse, summary="Mark All Notifications Read")
async def mark_all_read(current_user: CurrentUserDep, service: NotificationServiceDep) -> ReadAllResponse:
    return ReadAllResponse(updated_count=await service.mark_all_as_read(current_user))


@router.post(
    "/{notification_id}/read",
    response_model=ApiResponse[NotificationRead],
    summary="Mark Notification Read",
    responses={404: {"description": "Notification not found"}},
)
async def mark_read(
    notification_id: uuid.UUID, current_user: CurrentUserDep, service: NotificationServiceDep
) -> ApiResponse[NotificationRead]:
    notification = await service.mark_as_read(notification_id, current_user)
    return ApiResponse(message="Notification marked as read", data=notification)


@router.delete(
    "/{notification_id}",
    response_model=ActionResult,
    summary="Delete Notification",
    responses={404: {"description": "Notification not found"}},
)
async def delete_notification(
    notification_id: uuid.UUID, current_user: CurrentUserDep, service: NotificationServiceDep
) -> ActionResult:
    await service.delete(notification_id, current_user)
    return ActionResult(success=True, message="Notification deleted")
