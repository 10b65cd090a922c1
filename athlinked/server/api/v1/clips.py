"""
Clips API Endpoints.

Posting clips, the paginated feed, comments with replies and likes. Video
files are uploaded elsewhere; clips only reference them by URL.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from athlinked.core.models.io.clips import (
    ClipCreate,
    ClipFeedResponse,
    ClipListResponse,
    ClipResponse,
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    LikeResponse,
)
from athlinked.core.models.io.network import ActionResult
from athlinked.server.core.constant import DEFAULT_PAGE_SIZE
from athlinked.server.services.deps import ClipsServiceDep, CurrentUserDep, OptionalUserDep

router = APIRouter()


@router.post(
    "",
    response_model=ClipResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Post Clip",
    description="Publish a clip that points to an already uploaded video.",
    responses={
        201: {"description": "Clip created"},
        400: {"description": "Missing video_url"},
    },
)
async def create_clip(payload: ClipCreate, current_user: CurrentUserDep, service: ClipsServiceDep) -> ClipResponse:
    """
    Create a clip.

    - **video_url**: Location of the uploaded video.
    - **description**: Optional caption.
    """
    clip = await service.create_clip(current_user, payload)
    return ClipResponse(message="Clip created successfully", clip=clip)


@router.get(
    "",
    response_model=ClipFeedResponse,
    summary="Get Clips Feed",
    description="Newest clips visible to the caller. Anonymous callers see featured users only.",
)
async def get_feed(
    viewer: OptionalUserDep,
    service: ClipsServiceDep,
    page: int = Query(default=1, description="1-based page number"),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, description="Page size, clamped to 1..100"),
) -> ClipFeedResponse:
    clips, pagination = await service.feed(page=page, limit=limit, viewer=viewer)
    return ClipFeedResponse(clips=clips, pagination=pagination)


@router.get(
    "/user/{user_id}",
    response_model=ClipListResponse,
    summary="List User Clips",
)
async def list_user_clips(user_id: uuid.UUID, viewer: OptionalUserDep, service: ClipsServiceDep) -> ClipListResponse:
    return ClipListResponse(clips=await service.user_clips(user_id, viewer))


@router.post(
    "/comments/{comment_id}/reply",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Reply to Comment",
    responses={404: {"description": "Comment not found"}},
)
async def reply_to_comment(
    comment_id: uuid.UUID, payload: CommentCreate, current_user: CurrentUserDep, service: ClipsServiceDep
) -> CommentResponse:
    comment = await service.reply(comment_id, current_user, payload.comment)
    return CommentResponse(message="Reply added successfully", comment=comment)


@router.post(
    "/{clip_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on Clip",
    responses={404: {"description": "Clip not found"}},
)
async def add_comment(
    clip_id: uuid.UUID, payload: CommentCreate, current_user: CurrentUserDep, service: ClipsServiceDep
) -> CommentResponse:
    comment = await service.add_comment(clip_id, current_user, payload.comment)
    return CommentResponse(message="Comment added successfully", comment=comment)


@router.get(
    "/{clip_id}/comments",
    response_model=CommentListResponse,
    summary="List Clip Comments",
    description="Root comments in chronological order, each with nested replies.",
    responses={404: {"description": "Clip not found"}},
)
async def list_comments(clip_id: uuid.UUID, service: ClipsServiceDep) -> CommentListResponse:
    return CommentListResponse(comments=await service.comments_for(clip_id))


@router.post(
    "/{clip_id}/like",
    response_model=LikeResponse,
    summary="Like Clip",
    responses={
        404: {"description": "Clip not found"},
        409: {"description": "Clip already liked by this user"},
    },
)
async def like_clip(clip_id: uuid.UUID, current_user: CurrentUserDep, service: ClipsServiceDep) -> LikeResponse:
    count = await service.like(clip_id, current_user)
    return LikeResponse(message="Clip liked successfully", like_count=count)


@router.post(
    "/{clip_id}/unlike",
    response_model=LikeResponse,
    summary="Unlike Clip",
    responses={404: {"description": "Clip not found"}},
)
async def unlike_clip(clip_id: uuid.UUID, current_user: CurrentUserDep, service: ClipsServiceDep) -> LikeResponse:
    count = await service.unlike(clip_id, current_user)
    return LikeResponse(message="Clip unliked successfully", like_count=count)


@router.delete(
    "/{clip_id}",
    response_model=ActionResult,
    summary="Delete Clip",
    description="Delete a clip with its comments, likes and saves. Allowed for the author and the author's parent account.",
    responses={
        403: {"description": "Not allowed to delete this clip"},
        404: {"description": "Clip not found"},
    },
)
async def delete_clip(clip_id: uuid.UUID, current_user: CurrentUserDep, service: ClipsServiceDep) -> ActionResult:
    await service.delete_clip(clip_id, current_user)
    return ActionResult(success=True, message="Clip deleted successfully")
