"""
Messaging service.

One-to-one conversations between connected users. A conversation exists at
most once per pair of users; each participant row caches the user's display
name and their unread counter. Read state is tracked per message in
``message_reads``.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError

from athlinked.core.database.entities.messages import Conversation, Message, MessageType
from athlinked.core.database.entities.users import User
from athlinked.core.database.repositories import (
    ConnectionRepository,
    ConversationRepository,
    MessageRepository,
    UserRepository,
    conversation_key,
)
from athlinked.core.exceptions import DomainValidationError, NotFoundError, PermissionDeniedError
from athlinked.core.logging_config import get_logger
from athlinked.core.models.io.messages import (
    ConversationRead,
    ConversationUpdate,
    MessageRead,
    SearchUser,
    SendMessageRequest,
)
from athlinked.server.core.constant import USER_SEARCH_LIMIT

from .base import TransactionalService

logger = get_logger(__name__)

NOT_CONNECTED = "You can only send messages to connected users"


@dataclass
class SentMessage:
    """Everything the transport needs to fan a new message out."""

    message: MessageRead
    sender_id: uuid.UUID
    receiver_id: uuid.UUID
    sender_update: ConversationUpdate
    receiver_update: ConversationUpdate
    receiver_unread_total: int


@dataclass
class ReadReceipt:
    """Outcome of marking a conversation as read."""

    conversation_id: uuid.UUID
    reader_id: uuid.UUID
    other_user_id: uuid.UUID
    marked: int
    reader_update: ConversationUpdate
    reader_unread_total: int


def last_message_preview(message: Optional[Message]) -> Optional[str]:
    """Text shown in the conversation list for ``message``.

    The text itself when there is any, otherwise ``"GIF"`` for gifs and
    ``"Media"`` for other attachments.
    """
    if message is None:
        return None
    if message.message:
        return message.message
    if message.message_type == MessageType.GIF.value:
        return "GIF"
    return "Media"


class MessagingService(TransactionalService):
    """Service for conversations and messages."""

    def __init__(self, session):
        super().__init__(session)
        self.users = UserRepository(session)
        self.connections = ConnectionRepository(session)
        self.conversations = ConversationRepository(session)
        self.messages = MessageRepository(session)

    async def _require_connected(self, user_a: uuid.UUID, user_b: uuid.UUID) -> None:
        if await self.connections.get_pair(user_a, user_b) is None:
            raise PermissionDeniedError(NOT_CONNECTED)

    async def _require_participant(self, conversation_id: uuid.UUID, user_id: uuid.UUID) -> Conversation:
        conversation = await self.conversations.get_by_id(conversation_id)
        if conversation is None:
            raise NotFoundError("Conversation not found")
        if await self.conversations.get_participant(conversation_id, user_id) is None:
            raise PermissionDeniedError("You are not a participant in this conversation")
        return conversation

    async def _find_or_open(self, user: User, other: User) -> Tuple[Conversation, bool]:
        conversation = await self.conversations.find_between(user.id, other.id)
        if conversation is not None:
            return conversation, False
        conversation = await self.conversations.create(Conversation(pair_key=conversation_key(user.id, other.id)))
        await self.conversations.add_participant(conversation.id, user.id, user.display_name)
        await self.conversations.add_participant(conversation.id, other.id, other.display_name)
        return conversation, True

    # ------------------------------------------------------------------
    # Conversations
    # ------------------------------------------------------------------

    async def get_or_create_conversation(self, user: User, other_user_id: uuid.UUID) -> ConversationRead:
        """
        The conversation between ``user`` and ``other_user_id``, opened if needed.

        Raises:
            DomainValidationError: Messaging yourself.
            NotFoundError: Unknown user.
            PermissionDeniedError: The users are not connected.
        """
        if user.id == other_user_id:
            raise DomainValidationError("You cannot start a conversation with yourself")
        other = await self.users.get_by_id(other_user_id)
        if other is None:
            raise NotFoundError("User not found")
        await self._require_connected(user.id, other.id)

        user_id, other_id = user.id, other.id
        try:
            async with self.transaction():
                conversation, created = await self._find_or_open(user, other)
        except IntegrityError:
            # the pair was opened concurrently; its unique key kept the first one
            logger.info(f"Conversation between {user_id} and {other_id} already opened, reusing it")
            await self.reload(user, other)
            conversation = await self.conversations.find_between(user_id, other_id)
            if conversation is None:
                raise
            created = False
        if created:
            logger.info(f"Opened conversation {conversation.id} between {user.id} and {other.id}")
        return await self._conversation_read(conversation, user.id, other)

    async def conversations_for(self, user: User) -> List[ConversationRead]:
        """The caller's conversations, most recent activity first."""
        rows = await self.conversations.list_for_user(user.id)
        return [
            ConversationRead(
                conversation_id=conversation.id,
                other_user_id=other.id,
                other_user_name=other.full_name or theirs.user_name or other.username or "User",
                other_user_username=other.username,
                other_user_profile_image=other.profile_url,
                last_message=conversation.last_message,
                last_message_time=conversation.last_message_at,
                unread_count=mine.unread_count,
            )
            for conversation, mine, theirs, other in rows
        ]

    async def conversation_update(self, conversation_id: uuid.UUID, user_id: uuid.UUID) -> ConversationUpdate:
        """The ``conversation_updated`` payload from ``user_id``'s point of view."""
        conversation = await self.conversations.get_by_id(conversation_id)
        participant = await self.conversations.get_participant(conversation_id, user_id)
        return ConversationUpdate(
            conversation_id=conversation_id,
            last_message=conversation.last_message if conversation else None,
            last_message_time=conversation.last_message_at if conversation else None,
            unread_count=participant.unread_count if participant else 0,
        )

    async def delete_conversation(self, conversation_id: uuid.UUID, user: User) -> Optional[uuid.UUID]:
        """Remove a conversation for both sides. Returns the other participant's id."""
        await self._require_participant(conversation_id, user.id)
        other = await self.conversations.other_participant(conversation_id, user.id)
        other_id = other.user_id if other else None
        async with self.transaction():
            await self.conversations.delete_cascade(conversation_id)
        logger.info(f"User {user.id} deleted conversation {conversation_id}")
        return other_id

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def send_message(self, sender: User, request: SendMessageRequest) -> SentMessage:
        """
        Send a message to a connected user.

        The conversation is opened if needed, the message stored, the
        conversation's last message refreshed and the receiver's unread
        counter bumped, all in one transaction.

        Args:
            sender: Authenticated caller
            request: Validated message payload

        Returns:
            The stored message with the per-side conversation updates

        Raises:
            NotFoundError: Unknown receiver.
            DomainValidationError: Messaging yourself.
            PermissionDeniedError: The users are not connected.
        """
        if request.receiver_id == sender.id:
            raise DomainValidationError("You cannot send a message to yourself")
        receiver = await self.users.get_by_id(request.receiver_id)
        if receiver is None:
            raise NotFoundError("Receiver not found")
        await self._require_connected(sender.id, receiver.id)

        sender_id, receiver_id = sender.id, receiver.id
        try:
            conversation, message = await self._store_message(sender, receiver, request)
        except IntegrityError:
            # lost the race to open the conversation; the retry finds it
            logger.info(f"Conversation between {sender_id} and {receiver_id} opened concurrently, retrying send")
            await self.reload(sender, receiver)
            conversation, message = await self._store_message(sender, receiver, request)

        logger.debug(f"Message {message.id} from {sender.id} to {receiver.id} in {conversation.id}")
        read = MessageRead.model_validate(message).model_copy(
            update={"receiver_id": receiver.id, "client_message_id": request.client_message_id}
        )
        return SentMessage(
            message=read,
            sender_id=sender.id,
            receiver_id=receiver.id,
            sender_update=await self.conversation_update(conversation.id, sender.id),
            receiver_update=await self.conversation_update(conversation.id, receiver.id),
            receiver_unread_total=await self.unread_count(receiver.id),
        )

    async def _store_message(self, sender: User, receiver: User, request: SendMessageRequest) -> Tuple[Conversation, Message]:
        async with self.transaction():
            conversation, _ = await self._find_or_open(sender, receiver)
            message = await self.messages.create(
                Message(
                    conversation_id=conversation.id,
                    sender_id=sender.id,
                    sender_name=sender.display_name,
                    message=request.message or "",
                    media_url=request.media_url,
                    message_type=request.message_type.value,
                    post_data=request.post_data,
                )
            )
            conversation.last_message = last_message_preview(message)
            conversation.last_message_at = message.created_at
            await self.conversations.update(conversation)
            await self.conversations.increment_unread(conversation.id, receiver.id)
        return conversation, message

    async def messages_for(self, conversation_id: uuid.UUID, user: User) -> List[MessageRead]:
        """
        Messages of a conversation in chronological order.

        ``is_read`` says whether the caller has read the message;
        ``is_read_by_recipient`` whether the other side has read one of the
        caller's own messages.
        """
        await self._require_participant(conversation_id, user.id)
        other = await self.conversations.other_participant(conversation_id, user.id)
        rows = await self.messages.for_conversation(conversation_id)
        ids = [row.id for row in rows]
        read_by_me = await self.messages.read_message_ids(user.id, ids)
        read_by_other = await self.messages.read_message_ids(other.user_id, ids) if other else set()

        result = []
        for row in rows:
            mine = row.sender_id == user.id
            receiver_id = (other.user_id if other else None) if mine else user.id
            result.append(
                MessageRead.model_validate(row).model_copy(
                    update={
                        "receiver_id": receiver_id,
                        "is_read": row.id in read_by_me,
                        "is_read_by_recipient": mine and row.id in read_by_other,
                    }
                )
            )
        return result

    async def mark_as_read(self, conversation_id: uuid.UUID, reader: User) -> ReadReceipt:
        """Read everything the other participant sent and reset the reader's counter."""
        await self._require_participant(conversation_id, reader.id)
        other = await self.conversations.other_participant(conversation_id, reader.id)
        if other is None:
            raise NotFoundError("Conversation not found")

        async with self.transaction():
            unread = await self.messages.unread_from(conversation_id, other.user_id, reader.id)
            await self.messages.add_reads(unread, reader.id)
            await self.conversations.reset_unread(conversation_id, reader.id)

        return ReadReceipt(
            conversation_id=conversation_id,
            reader_id=reader.id,
            other_user_id=other.user_id,
            marked=len(unread),
            reader_update=await self.conversation_update(conversation_id, reader.id),
            reader_unread_total=await self.unread_count(reader.id),
        )

    async def unread_count(self, user_id: uuid.UUID) -> int:
        return await self.conversations.total_unread(user_id)

    async def delete_message(self, message_id: uuid.UUID, user: User) -> Tuple[uuid.UUID, Optional[uuid.UUID]]:
        """
        Delete one of the caller's messages.

        The conversation's last message is recomputed, and the receiver's
        unread counter drops if they had not read the message yet.

        Returns:
            ``(conversation_id, other_user_id)``

        Raises:
            NotFoundError: Unknown message.
            PermissionDeniedError: The message was sent by someone else.
        """
        message = await self.messages.get_by_id(message_id)
        if message is None:
            raise NotFoundError("Message not found")
        if message.sender_id != user.id:
            raise PermissionDeniedError("You can only delete your own messages")

        conversation_id = message.conversation_id
        other = await self.conversations.other_participant(conversation_id, user.id)
        async with self.transaction():
            if other is not None and message.id not in await self.messages.read_message_ids(other.user_id, [message.id]):
                await self.conversations.decrement_unread(conversation_id, other.user_id)
            await self.messages.delete_with_reads(message.id)
            conversation = await self.conversations.get_by_id(conversation_id)
            latest = await self.messages.latest(conversation_id)
            conversation.last_message = last_message_preview(latest)
            conversation.last_message_at = latest.created_at if latest else None
            await self.conversations.update(conversation)
        return conversation_id, other.user_id if other else None

    async def search_network_users(self, user: User, query: Optional[str]) -> List[SearchUser]:
        """Connected users whose username or full name contains ``query``."""
        if not query or not query.strip():
            return []
        candidates = await self.connections.connected_user_ids(user.id)
        users = await self.users.search_by_name(query, candidates, USER_SEARCH_LIMIT)
        return [SearchUser.model_validate(found) for found in users]

    async def _conversation_read(self, conversation: Conversation, user_id: uuid.UUID, other: User) -> ConversationRead:
        mine = await self.conversations.get_participant(conversation.id, user_id)
        return ConversationRead(
            conversation_id=conversation.id,
            other_user_id=other.id,
            other_user_name=other.display_name,
            other_user_username=other.username,
            other_user_profile_image=other.profile_url,
            last_message=conversation.last_message,
            last_message_time=conversation.last_message_at,
            unread_count=mine.unread_count if mine else 0,
        )
