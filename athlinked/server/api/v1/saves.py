"""
Saved Items API Endpoints.

Bookmarking clips. Requests name the item kind in ``type``; only ``clip`` is
supported.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter

from athlinked.core.exceptions import PermissionDeniedError
from athlinked.core.models.io.clips import SaveRequest, SavedItemsResponse
from athlinked.core.models.io.network import ActionResult
from athlinked.server.services.deps import ClipsServiceDep, CurrentUserDep

router = APIRouter()


@router.post(
    "",
    response_model=ActionResult,
    summary="Save Item",
    responses={
        404: {"description": "Clip not found"},
        409: {"description": "Clip already saved"},
    },
)
async def save_item(payload: SaveRequest, current_user: CurrentUserDep, service: ClipsServiceDep) -> ActionResult:
    await service.save(payload.id, current_user)
    return ActionResult(success=True, message="Clip saved successfully")


@router.post(
    "/unsave",
    response_model=ActionResult,
    summary="Unsave Item",
    responses={404: {"description": "Clip was not saved"}},
)
async def unsave_item(payload: SaveRequest, current_user: CurrentUserDep, service: ClipsServiceDep) -> ActionResult:
    await service.unsave(payload.id, current_user)
    return ActionResult(success=True, message="Clip removed from saved items")


@router.get(
    "/saved/{user_id}",
    response_model=SavedItemsResponse,
    summary="List Saved Items",
    description="Clips saved by the caller, most recently saved first. Saved lists are private.",
    responses={403: {"description": "Requested another user's saved items"}},
)
async def list_saved(user_id: uuid.UUID, current_user: CurrentUserDep, service: ClipsServiceDep) -> SavedItemsResponse:
    if user_id != current_user.id:
        raise PermissionDeniedError("You can only view your own saved items")
    return SavedItemsResponse(clips=await service.saved_clips(current_user))
