"""
Favorites API Endpoints.

A coach's shortlist of athletes. Payloads use snake_case keys.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter

from athlinked.core.models.io.favorites import FavoriteListResponse, FavoriteStatusResponse
from athlinked.core.models.io.network import ActionResult
from athlinked.server.services.deps import CurrentUserDep, FavoritesServiceDep

router = APIRouter()


@router.get("", response_model=FavoriteListResponse, summary="List Favorite Athletes")
async def list_favorites(current_user: CurrentUserDep, service: FavoritesServiceDep) -> FavoriteListResponse:
    return FavoriteListResponse(favorites=await service.list_for(current_user))


@router.post(
    "/{athlete_id}",
    response_model=ActionResult,
    summary="Add Favorite Athlete",
    description="Coaches only. Adding an athlete already on the list is declined with success false.",
    responses={
        400: {"description": "Caller is not a coach, target is not an athlete, or target is the caller"},
        404: {"description": "User not found"},
    },
)
async def add_favorite(athlete_id: uuid.UUID, current_user: CurrentUserDep, service: FavoritesServiceDep) -> ActionResult:
    outcome = await service.add(current_user, athlete_id)
    return ActionResult(success=outcome.success, message=outcome.message)


@router.delete(
    "/{athlete_id}",
    response_model=ActionResult,
    summary="Remove Favorite Athlete",
    responses={404: {"description": "Athlete not found"}},
)
async def remove_favorite(
    athlete_id: uuid.UUID, current_user: CurrentUserDep, service: FavoritesServiceDep
) -> ActionResult:
    outcome = await service.remove(current_user, athlete_id)
    return ActionResult(success=outcome.success, message=outcome.message)


@router.get("/{athlete_id}/status", response_model=FavoriteStatusResponse, summary="Check Favorite Status")
async def favorite_status(
    athlete_id: uuid.UUID, current_user: CurrentUserDep, service: FavoritesServiceDep
) -> FavoriteStatusResponse:
    return FavoriteStatusResponse(is_favorite=await service.is_favorite(current_user, athlete_id))
