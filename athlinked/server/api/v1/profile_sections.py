"""
Profile Section API Endpoints.

Every profile section gets the same four routes under ``/api/profile``:

- ``GET  /{user_id}/<section>``: list a user's rows, newest first
- ``POST /{user_id}/<section>``: add a row to the caller's own profile
- ``PUT  /<section>/{item_id}``: partially update one of the caller's rows
- ``DELETE /<section>/{item_id}``: delete one of the caller's rows

The routers are built from ``SECTIONS`` so all sections behave identically.
"""

import uuid
from typing import List

from fastapi import APIRouter, status

from athlinked.core.models.io.common import ApiResponse
from athlinked.server.services.deps import CurrentUserDep, SessionDep
from athlinked.server.services.profile_sections import SECTIONS, ProfileSectionService, SectionDefinition


def build_section_router(section: SectionDefinition) -> APIRouter:
    """Create the list/create/update/delete routes of one section."""
    router = APIRouter(tags=[section.slug])
    create_schema = section.create_schema
    update_schema = section.update_schema
    read_schema = section.read_schema
    name = section.slug.replace("-", "_")

    @router.get(
        f"/{{user_id}}/{section.slug}",
        response_model=ApiResponse[List[read_schema]],
        name=f"list_{name}",
        summary=f"List {section.label} Entries",
        description=f"List a user's {section.label.lower()} entries, newest first.",
    )
    async def list_entries(user_id: uuid.UUID, session: SessionDep):
        rows = await ProfileSectionService(session, section).list_for_user(user_id)
        return ApiResponse(data=rows)

    @router.post(
        f"/{{user_id}}/{section.slug}",
        response_model=ApiResponse[read_schema],
        status_code=status.HTTP_201_CREATED,
        name=f"create_{name}",
        summary=f"Add {section.label} Entry",
        description=f"Add a {section.label.lower()} entry to the caller's own profile.",
        responses={
            201: {"description": "Entry created"},
            400: {"description": "Missing required field"},
            403: {"description": "Not the caller's profile"},
        },
    )
    async def create_entry(user_id: uuid.UUID, payload: create_schema, current_user: CurrentUserDep, session: SessionDep):
        row = await ProfileSectionService(session, section).create(current_user, user_id, payload)
        return ApiResponse(message=f"{section.label} saved successfully", data=row)

    @router.put(
        f"/{section.slug}/{{item_id}}",
        response_model=ApiResponse[read_schema],
        name=f"update_{name}",
        summary=f"Update {section.label} Entry",
        description="Partially update an entry; only the fields sent change and empty strings clear values.",
        responses={
            403: {"description": "Entry belongs to another user"},
            404: {"description": "Entry not found"},
        },
    )
    async def update_entry(item_id: uuid.UUID, payload: update_schema, current_user: CurrentUserDep, session: SessionDep):
        row = await ProfileSectionService(session, section).update(current_user, item_id, payload)
        return ApiResponse(message=f"{section.label} updated successfully", data=row)

    @router.delete(
        f"/{section.slug}/{{item_id}}",
        response_model=ApiResponse[None],
        name=f"delete_{name}",
        summary=f"Delete {section.label} Entry",
        responses={
            403: {"description": "Entry belongs to another user"},
            404: {"description": "Entry not found"},
        },
    )
    async def delete_entry(item_id: uuid.UUID, current_user: CurrentUserDep, session: SessionDep):
        await ProfileSectionService(session, section).delete(current_user, item_id)
        return ApiResponse(message=f"{section.label} deleted successfully")

    return router


router = APIRouter()
for _section in SECTIONS.values():
    router.include_router(build_section_router(_section))
