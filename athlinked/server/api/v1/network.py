"""
Network API Endpoints.

Follows and connections between users. Declined actions (already following,
request already pending...) answer 200 with ``success: false``.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter

from athlinked.core.models.io.network import (
    ActionResult,
    ConnectionRequestsResponse,
    ConnectionStatusResponse,
    FollowCountsResponse,
    IsFollowingResponse,
    UserListResponse,
)
from athlinked.server.services.deps import CurrentUserDep, NetworkServiceDep
from athlinked.server.services.network import ActionOutcome

router = APIRouter()


def _result(outcome: ActionOutcome) -> ActionResult:
    return ActionResult(success=outcome.success, message=outcome.message)


@router.post(
    "/follow/{user_id}",
    response_model=ActionResult,
    summary="Follow User",
    description="Follow another user. Following someone already followed is declined with success false.",
    responses={
        400: {"description": "Attempt to follow yourself"},
        404: {"description": "User not found"},
    },
)
async def follow_user(user_id: uuid.UUID, current_user: CurrentUserDep, service: NetworkServiceDep) -> ActionResult:
    return _result(await service.follow(current_user, user_id))


@router.post(
    "/unfollow/{user_id}",
    response_model=ActionResult,
    summary="Unfollow User",
    description="Stop following a user. Unfollowing a connection also removes the connection.",
    responses={404: {"description": "User not found"}},
)
async def unfollow_user(user_id: uuid.UUID, current_user: CurrentUserDep, service: NetworkServiceDep) -> ActionResult:
    return _result(await service.unfollow(current_user, user_id))


@router.get(
    "/followers/{user_id}",
    response_model=UserListResponse,
    summary="List Followers",
    description="Users following the given user, most recent first.",
)
async def list_followers(user_id: uuid.UUID, service: NetworkServiceDep) -> UserListResponse:
    users = await service.followers(user_id)
    return UserListResponse(users=users, count=len(users))


@router.get(
    "/following/{user_id}",
    response_model=UserListResponse,
    summary="List Following",
    description="Users the given user follows, most recent follow first, followed by connections not followed.",
)
async def list_following(user_id: uuid.UUID, service: NetworkServiceDep) -> UserListResponse:
    users = await service.following(user_id)
    return UserListResponse(users=users, count=len(users))


@router.get(
    "/counts/{user_id}",
    response_model=FollowCountsResponse,
    summary="Get Follow Counts",
    responses={404: {"description": "User not found"}},
)
async def follow_counts(user_id: uuid.UUID, service: NetworkServiceDep) -> FollowCountsResponse:
    followers, following = await service.follow_counts(user_id)
    return FollowCountsResponse(followers=followers, following=following)


@router.get(
    "/is-following/{user_id}",
    response_model=IsFollowingResponse,
    summary="Check Following",
    description="Whether the caller follows, or is connected with, the given user.",
)
async def is_following(user_id: uuid.UUID, current_user: CurrentUserDep, service: NetworkServiceDep) -> IsFollowingResponse:
    return IsFollowingResponse(is_following=await service.is_following(current_user.id, user_id))


@router.post(
    "/connect/{user_id}",
    response_model=ActionResult,
    summary="Send Connection Request",
    description="Ask a user to connect. Declined when already connected or a request is pending.",
    responses={
        400: {"description": "Attempt to connect with yourself"},
        404: {"description": "User not found"},
    },
)
async def send_connection_request(
    user_id: uuid.UUID, current_user: CurrentUserDep, service: NetworkServiceDep
) -> ActionResult:
    return _result(await service.send_connection_request(current_user, user_id))


@router.get(
    "/connection-requests",
    response_model=ConnectionRequestsResponse,
    summary="List Connection Requests",
    description="Pending requests addressed to the caller, newest first.",
)
async def list_connection_requests(
    current_user: CurrentUserDep, service: NetworkServiceDep
) -> ConnectionRequestsResponse:
    return ConnectionRequestsResponse(requests=await service.connection_requests(current_user.id))


@router.post(
    "/connection-requests/{request_id}/accept",
    response_model=ActionResult,
    summary="Accept Connection Request",
    description="Accept a pending request. Both users end up following each other.",
    responses={404: {"description": "No pending request with that id for the caller"}},
)
async def accept_connection_request(
    request_id: uuid.UUID, current_user: CurrentUserDep, service: NetworkServiceDep
) -> ActionResult:
    return _result(await service.accept_connection_request(request_id, current_user))


@router.post(
    "/connection-requests/{request_id}/reject",
    response_model=ActionResult,
    summary="Reject Connection Request",
    responses={404: {"description": "No pending request with that id for the caller"}},
)
async def reject_connection_request(
    request_id: uuid.UUID, current_user: CurrentUserDep, service: NetworkServiceDep
) -> ActionResult:
    return _result(await service.reject_connection_request(request_id, current_user))


@router.get(
    "/connection-status/{user_id}",
    response_model=ConnectionStatusResponse,
    summary="Get Connection Status",
    description="State of the relationship from the caller towards the given user.",
)
async def connection_status(
    user_id: uuid.UUID, current_user: CurrentUserDep, service: NetworkServiceDep
) -> ConnectionStatusResponse:
    """
    Connection status.

    - **exists**: Whether a connection or a request from the caller exists.
    - **status**: ``connected``, ``pending``, ``accepted`` or null.
    """
    exists, state = await service.connection_status(current_user.id, user_id)
    return ConnectionStatusResponse(exists=exists, status=state)


@router.get(
    "/connections/{user_id}",
    response_model=UserListResponse,
    summary="List Connections",
)
async def list_connections(user_id: uuid.UUID, service: NetworkServiceDep) -> UserListResponse:
    users = await service.connections_of(user_id)
    return UserListResponse(users=users, count=len(users))


@router.delete(
    "/connections/{user_id}",
    response_model=ActionResult,
    summary="Remove Connection",
    description="Dissolve the connection with a user together with the mutual follows.",
)
async def remove_connection(user_id: uuid.UUID, current_user: CurrentUserDep, service: NetworkServiceDep) -> ActionResult:
    return _result(await service.remove_connection(current_user, user_id))
