"""
Search API Endpoints.

Public member directory with filters. Results never include email or date
of birth.
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Query

from athlinked.core.models.io.search import DirectoryResponse, DirectoryUserResponse
from athlinked.server.core.constant import DIRECTORY_LIMIT
from athlinked.server.services.deps import SearchServiceDep

router = APIRouter()

SORT_DESCRIPTION = "name, latest (default), oldest or youngest"


@router.get("", response_model=DirectoryResponse, summary="Search Users")
async def search_users(
    service: SearchServiceDep,
    search_query: Optional[str] = Query(default=None, alias="searchQuery", description="Name or username fragment"),
    search_type: Optional[str] = Query(default=None, alias="searchType", description="athlete, coach, parent or organization"),
    college_school: Optional[str] = Query(default=None, alias="collegeSchool", description="Education fragment"),
    location: Optional[str] = Query(default=None, description="City fragment"),
    sport_specialization: Optional[str] = Query(default=None, alias="sportSpecialization", description="Sport name"),
    sort_by: Optional[str] = Query(default=None, alias="sortBy", description=SORT_DESCRIPTION),
) -> DirectoryResponse:
    users = await service.search(
        query=search_query,
        user_type=search_type,
        school=college_school,
        city=location,
        sport=sport_specialization,
        sort_by=sort_by,
    )
    return DirectoryResponse(users=users, count=len(users))


@router.get("/users", response_model=DirectoryResponse, summary="Browse Users")
async def browse_users(
    service: SearchServiceDep,
    limit: int = Query(default=DIRECTORY_LIMIT, ge=1, le=DIRECTORY_LIMIT),
    sort_by: Optional[str] = Query(default=None, alias="sortBy", description=SORT_DESCRIPTION),
    search_type: Optional[str] = Query(default=None, alias="searchType"),
    college_school: Optional[str] = Query(default=None, alias="collegeSchool", description="School in the user's academic history"),
) -> DirectoryResponse:
    users = await service.browse(limit=limit, sort_by=sort_by, user_type=search_type, school=college_school)
    return DirectoryResponse(users=users, count=len(users))


@router.get(
    "/user/{user_id}",
    response_model=DirectoryUserResponse,
    summary="Get Directory Entry",
    responses={404: {"description": "User not found"}},
)
async def get_directory_user(user_id: uuid.UUID, service: SearchServiceDep) -> DirectoryUserResponse:
    return DirectoryUserResponse(user=await service.get_user(user_id))
