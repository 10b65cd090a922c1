"""
Profile API Endpoints.

The caller's own profile, image URLs, the aggregate profile page and the
profile card stats. Payloads use camelCase keys.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter

from athlinked.core.models.io.common import ApiResponse
from athlinked.core.models.io.profile import (
    ProfileComplete,
    ProfileImagesUpdate,
    ProfileRead,
    ProfileStats,
    ProfileUpdate,
)
from athlinked.server.services.deps import CurrentUserDep, OptionalUserDep, ProfileServiceDep

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[ProfileRead],
    summary="Get My Profile",
    description="Retrieve the profile of the authenticated user.",
    responses={401: {"description": "Access token missing or invalid"}},
)
async def get_my_profile(current_user: CurrentUserDep) -> ApiResponse[ProfileRead]:
    return ApiResponse(data=ProfileRead.model_validate(current_user))


@router.post(
    "",
    response_model=ApiResponse[ProfileRead],
    summary="Update My Profile",
    description="Partially update the authenticated user's profile. Only the fields sent are changed.",
    response_description="The updated profile.",
    responses={
        200: {"description": "Profile updated"},
        400: {"description": "No fields provided or invalid values"},
        401: {"description": "Access token missing or invalid"},
    },
)
async def upsert_profile(
    payload: ProfileUpdate, current_user: CurrentUserDep, service: ProfileServiceDep
) -> ApiResponse[ProfileRead]:
    """
    Update the caller's profile.

    - **fullName**: Display name; also updates names shown in conversations.
    - **bio**, **education**, **city**: Free text.
    - **primarySport**: Main sport.
    - **sportsPlayed**: Comma separated string or list of sports.
    - **dob**: Date of birth (YYYY-MM-DD).

    Empty strings clear the stored value.
    """
    profile = await service.upsert_profile(current_user, payload)
    return ApiResponse(message="Profile updated successfully", data=profile)


@router.post(
    "/images",
    response_model=ApiResponse[ProfileRead],
    summary="Update Profile Images",
    description="Set the profile and/or cover image URL of the authenticated user.",
    responses={
        200: {"description": "Images updated"},
        400: {"description": "No image URL provided"},
    },
)
async def update_profile_images(
    payload: ProfileImagesUpdate, current_user: CurrentUserDep, service: ProfileServiceDep
) -> ApiResponse[ProfileRead]:
    """
    Update image URLs.

    - **profileImageUrl**: New avatar location.
    - **coverImageUrl**: New cover image location.
    """
    profile = await service.update_images(current_user, payload)
    return ApiResponse(message="Profile images updated successfully", data=profile)


@router.get(
    "/{user_id}",
    response_model=ApiResponse[ProfileComplete],
    summary="Get Complete Profile",
    description="Everything a profile page shows: the user, follow counts, relationship with the viewer and every profile section.",
    responses={
        200: {"description": "Profile found"},
        404: {"description": "User not found"},
    },
)
async def get_profile_complete(
    user_id: uuid.UUID, viewer: OptionalUserDep, service: ProfileServiceDep
) -> ApiResponse[ProfileComplete]:
    """
    Aggregate profile.

    ``connectionStatus`` is filled only when an authenticated viewer looks at
    someone else's profile.
    """
    return ApiResponse(data=await service.get_complete(user_id, viewer))


@router.get(
    "/{user_id}/stats",
    response_model=ApiResponse[ProfileStats],
    summary="Get Profile Stats",
    description="The user row plus the latest athletic performance, preferring the user's primary sport.",
    responses={404: {"description": "User not found"}},
)
async def get_profile_stats(user_id: uuid.UUID, service: ProfileServiceDep) -> ApiResponse[ProfileStats]:
    return ApiResponse(data=await service.get_stats(user_id))
