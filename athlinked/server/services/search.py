"""
Member directory.

Anyone may search the directory; results carry public profile fields only.
"""

from __future__ import annotations

import uuid
from typing import List, Optional

from athlinked.core.database.repositories import UserRepository
from athlinked.core.exceptions import NotFoundError
from athlinked.core.logging_config import get_logger
from athlinked.core.models.io.search import DirectoryUser
from athlinked.server.core.constant import DIRECTORY_LIMIT

from .base import TransactionalService

logger = get_logger(__name__)


class SearchService(TransactionalService):
    """Read-only queries over the member directory."""

    def __init__(self, session):
        super().__init__(session)
        self.users = UserRepository(session)

    async def search(
        self,
        query: Optional[str] = None,
        user_type: Optional[str] = None,
        school: Optional[str] = None,
        city: Optional[str] = None,
        sport: Optional[str] = None,
        sort_by: Optional[str] = None,
    ) -> List[DirectoryUser]:
        users = await self.users.search_directory(
            query=query, user_type=user_type, school=school, city=city, sport=sport, sort_by=sort_by, limit=DIRECTORY_LIMIT
        )
        logger.debug(f"Directory search matched {len(users)} users")
        return [DirectoryUser.model_validate(user) for user in users]

    async def browse(
        self,
        limit: int = DIRECTORY_LIMIT,
        sort_by: Optional[str] = None,
        user_type: Optional[str] = None,
        school: Optional[str] = None,
    ) -> List[DirectoryUser]:
        users = await self.users.list_directory(limit=limit, sort_by=sort_by, user_type=user_type, school=school)
        return [DirectoryUser.model_validate(user) for user in users]

    async def get_user(self, user_id: uuid.UUID) -> DirectoryUser:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return DirectoryUser.model_validate(user)
