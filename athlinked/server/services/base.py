"""
Service base class.

Services own the unit of work: repositories only flush, and a service method
wraps its writes in ``transaction()`` so they commit together or not at all.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession


class TransactionalService:
    """Base for services working on one ``AsyncSession``."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Commit on success, roll back and re-raise on any error."""
        try:
            yield
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def reload(self, *instances) -> None:
        """Refresh instances a rollback expired, so they can be read again."""
        for instance in instances:
            if instance in self.session:
                await self.session.refresh(instance)
