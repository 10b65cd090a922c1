"""
Messaging repositories.

This module provides data access operations for conversations, their
participants, messages and read receipts.
"""

from __future__ import annotations

import uuid
from typing import List, Optional, Sequence, Set, Tuple

from sqlalchemy import delete, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased
from sqlmodel import select

from ..entities.messages import Conversation, ConversationParticipant, Message, MessageRead
from ..entities.users import User
from .base import SQLModelRepository
from .network import ordered_pair


def conversation_key(user_a: uuid.UUID, user_b: uuid.UUID) -> str:
    """Key shared by both orderings of a pair of users."""
    first, second = ordered_pair(user_a, user_b)
    return f"{first}:{second}"


class ConversationRepository(SQLModelRepository[Conversation]):
    """Repository for conversations and their participants."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Conversation)

    async def find_between(self, user_a: uuid.UUID, user_b: uuid.UUID) -> Optional[Conversation]:
        """The conversation of the two users, if any."""
        stmt = select(Conversation).where(Conversation.pair_key == conversation_key(user_a, user_b))
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def add_participant(self, conversation_id: uuid.UUID, user_id: uuid.UUID, user_name: str) -> ConversationParticipant:
        participant = ConversationParticipant(conversation_id=conversation_id, user_id=user_id, user_name=user_name)
        self.session.add(participant)
        await self.session.flush()
        return participant

    async def get_participant(
        self, conversation_id: uuid.UUID, user_id: uuid.UUID
    ) -> Optional[ConversationParticipant]:
        stmt = select(ConversationParticipant).where(
            ConversationParticipant.conversation_id == conversation_id,
            ConversationParticipant.user_id == user_id,
        ).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def other_participant(
        self, conversation_id: uuid.UUID, user_id: uuid.UUID
    ) -> Optional[ConversationParticipant]:
        stmt = select(ConversationParticipant).where(
            ConversationParticipant.conversation_id == conversation_id,
            ConversationParticipant.user_id != user_id,
        ).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_for_user(
        self, user_id: uuid.UUID
    ) -> List[Tuple[Conversation, ConversationParticipant, ConversationParticipant, User]]:
        """Conversations of ``user_id`` with both participant rows and the other user.

        Ordered by newest activity, conversations without messages last.
        """
        mine = aliased(ConversationParticipant)
        theirs = aliased(ConversationParticipant)
        stmt = (
            select(Conversation, mine, theirs, User)
            .join(mine, mine.conversation_id == Conversation.id)
            .join(theirs, theirs.conversation_id == Conversation.id)
            .join(User, User.id == theirs.user_id)
            .where(mine.user_id == user_id, theirs.user_id != user_id)
            .order_by(
                Conversation.last_message_at.desc().nulls_last(),  # type: ignore[union-attr]
                Conversation.created_at.desc(),  # type: ignore[attr-defined]
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return [tuple(row) for row in result.all()]  # type: ignore[misc]

    async def increment_unread(self, conversation_id: uuid.UUID, user_id: uuid.UUID) -> None:
        stmt = (
            update(ConversationParticipant)
            .where(
                ConversationParticipant.conversation_id == conversation_id,
                ConversationParticipant.user_id == user_id,
            )
            .values(unread_count=ConversationParticipant.unread_count + 1)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    async def decrement_unread(self, conversation_id: uuid.UUID, user_id: uuid.UUID) -> None:
        stmt = (
            update(ConversationParticipant)
            .where(
                ConversationParticipant.conversation_id == conversation_id,
                ConversationParticipant.user_id == user_id,
                ConversationParticipant.unread_count > 0,
            )
            .values(unread_count=ConversationParticipant.unread_count - 1)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    async def reset_unread(self, conversation_id: uuid.UUID, user_id: uuid.UUID) -> None:
        stmt = (
            update(ConversationParticipant)
            .where(
                ConversationParticipant.conversation_id == conversation_id,
                ConversationParticipant.user_id == user_id,
            )
            .values(unread_count=0)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    async def total_unread(self, user_id: uuid.UUID) -> int:
        stmt = select(func.coalesce(func.sum(ConversationParticipant.unread_count), 0)).where(
            ConversationParticipant.user_id == user_id
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def rename_participant(self, user_id: uuid.UUID, user_name: str) -> None:
        stmt = (
            update(ConversationParticipant)
            .where(ConversationParticipant.user_id == user_id)
            .values(user_name=user_name)
        )
        await self.session.execute(stmt)

    async def delete_cascade(self, conversation_id: uuid.UUID) -> None:
        """Remove the conversation with its receipts, messages and participants."""
        message_ids = select(Message.id).where(Message.conversation_id == conversation_id)
        await self.session.execute(delete(MessageRead).where(MessageRead.message_id.in_(message_ids)))  # type: ignore[attr-defined]
        await self.session.execute(delete(Message).where(Message.conversation_id == conversation_id))
        await self.session.execute(
            delete(ConversationParticipant).where(ConversationParticipant.conversation_id == conversation_id)
        )
        await self.session.execute(delete(Conversation).where(Conversation.id == conversation_id))


class MessageRepository(SQLModelRepository[Message]):
    """Repository for messages and read receipts."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Message)

    async def for_conversation(self, conversation_id: uuid.UUID) -> List[Message]:
        """Messages in chronological order."""
        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.asc())  # type: ignore[attr-defined]
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def latest(self, conversation_id: uuid.UUID) -> Optional[Message]:
        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.desc())  # type: ignore[attr-defined]
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def read_message_ids(self, user_id: uuid.UUID, message_ids: Sequence[uuid.UUID]) -> Set[uuid.UUID]:
        """Subset of ``message_ids`` that ``user_id`` has a read receipt for."""
        if not message_ids:
            return set()
        stmt = select(MessageRead.message_id).where(
            MessageRead.user_id == user_id, MessageRead.message_id.in_(list(message_ids))  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def unread_from(self, conversation_id: uuid.UUID, sender_id: uuid.UUID, reader_id: uuid.UUID) -> List[uuid.UUID]:
        """Ids of messages from ``sender_id`` that ``reader_id`` has not read yet."""
        read_ids = select(MessageRead.message_id).where(MessageRead.user_id == reader_id)
        stmt = select(Message.id).where(
            Message.conversation_id == conversation_id,
            Message.sender_id == sender_id,
            Message.id.not_in(read_ids),  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_reads(self, message_ids: Sequence[uuid.UUID], user_id: uuid.UUID) -> None:
        for message_id in message_ids:
            self.session.add(MessageRead(message_id=message_id, user_id=user_id))
        await self.session.flush()

    async def delete_with_reads(self, message_id: uuid.UUID) -> None:
        await self.session.execute(delete(MessageRead).where(MessageRead.message_id == message_id))
        await self.session.execute(delete(Message).where(Message.id == message_id))

    async def rename_sender(self, sender_id: uuid.UUID, sender_name: str) -> None:
        stmt = (
            update(Message)
            .where(Message.sender_id == sender_id)
            .values(sender_name=sender_name)
        )
        await self.session.execute(stmt)
