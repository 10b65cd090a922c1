"""
Clips service.

Posting clips, the visibility-filtered feed, threaded comments, likes, saves
and deletion.
"""

from __future__ import annotations

import math
import uuid
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.exc import IntegrityError

from athlinked.core.database.entities.clips import Clip, ClipComment, ClipLike, SavedClip
from athlinked.core.database.entities.notifications import NotificationEntity, NotificationType
from athlinked.core.database.entities.users import User, UserType
from athlinked.core.database.repositories import (
    ClipCommentRepository,
    ClipLikeRepository,
    ClipRepository,
    ConnectionRepository,
    FollowRepository,
    SavedClipRepository,
    UserRepository,
)
from athlinked.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from athlinked.core.logging_config import get_logger
from athlinked.core.models.io.clips import ClipCreate, ClipRead, CommentRead, Pagination
from athlinked.server.core.constant import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

from .base import TransactionalService
from .notifications import REPLY_MESSAGE, NotificationService

logger = get_logger(__name__)

USER_CLIPS_LIMIT = 50


class ClipsService(TransactionalService):
    """Service for clips and the interactions on them."""

    def __init__(self, session):
        super().__init__(session)
        self.users = UserRepository(session)
        self.clips = ClipRepository(session)
        self.comments = ClipCommentRepository(session)
        self.likes = ClipLikeRepository(session)
        self.saves = SavedClipRepository(session)
        self.follows = FollowRepository(session)
        self.connections = ConnectionRepository(session)
        self.notifier = NotificationService(session)

    async def _require_clip(self, clip_id: uuid.UUID) -> Clip:
        clip = await self.clips.get_by_id(clip_id)
        if clip is None:
            raise NotFoundError("Clip not found")
        return clip

    async def create_clip(self, author: User, data: ClipCreate) -> ClipRead:
        clip = Clip(
            user_id=author.id,
            username=author.full_name or "User",
            user_profile_url=author.profile_url,
            video_url=data.video_url,
            description=data.description,
        )
        async with self.transaction():
            clip = await self.clips.create(clip)
        logger.info(f"User {author.id} posted clip {clip.id}")
        return self._clip_read(clip, author)

    async def feed(self, page: int = 1, limit: int = DEFAULT_PAGE_SIZE, viewer: Optional[User] = None) -> Tuple[List[ClipRead], Pagination]:
        """
        One page of the clip feed, newest first.

        Anonymous viewers see featured users only. A signed-in viewer also
        sees their own clips and those of users they follow or are connected
        with.

        Args:
            page: 1-based page number; values below 1 mean the first page
            limit: Page size, clamped to ``[1, MAX_PAGE_SIZE]``
            viewer: Authenticated caller, if any

        Returns:
            ``(clips, pagination)``
        """
        page = max(1, page)
        limit = min(max(1, limit), MAX_PAGE_SIZE)

        author_ids: Optional[List[uuid.UUID]] = None
        if viewer is not None:
            author_ids = [viewer.id]
            author_ids += await self.follows.following_ids(viewer.id)
            author_ids += await self.connections.connected_user_ids(viewer.id)

        rows, total = await self.clips.feed(author_ids, limit=limit, offset=(page - 1) * limit)
        clips = await self._clip_reads(rows, viewer)
        total_pages = math.ceil(total / limit) if total else 0
        pagination = Pagination(
            page=page,
            limit=limit,
            totalClips=total,
            totalPages=total_pages,
            hasNext=page < total_pages,
            hasPrev=page > 1,
        )
        return clips, pagination

    async def user_clips(self, user_id: uuid.UUID, viewer: Optional[User] = None, limit: int = USER_CLIPS_LIMIT) -> List[ClipRead]:
        rows = await self.clips.by_user(user_id, limit=limit)
        return await self._clip_reads(rows, viewer)

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    async def add_comment(self, clip_id: uuid.UUID, author: User, text: str) -> CommentRead:
        clip = await self._require_clip(clip_id)
        return await self._add_comment(clip.id, author, text, None, (clip.user_id, NotificationEntity.CLIP, clip.id, None))

    async def reply(self, comment_id: uuid.UUID, author: User, text: str) -> CommentRead:
        """Reply to a comment; the reply lands on the parent's clip."""
        parent = await self.comments.get_by_id(comment_id)
        if parent is None:
            raise NotFoundError("Comment not found")
        return await self._add_comment(
            parent.clip_id, author, text, parent.id, (parent.user_id, NotificationEntity.COMMENT, parent.id, REPLY_MESSAGE)
        )

    async def comments_for(self, clip_id: uuid.UUID) -> List[CommentRead]:
        """
        Comment tree of a clip.

        Root comments come first in chronological order, each with its
        replies nested (also chronological). A reply whose parent is gone is
        shown as a root comment.
        """
        await self._require_clip(clip_id)
        rows = await self.comments.for_clip(clip_id)
        nodes: Dict[uuid.UUID, CommentRead] = {
            comment.id: self._comment_read(comment, user) for comment, user in rows
        }
        roots: List[CommentRead] = []
        for node in nodes.values():
            parent = nodes.get(node.parent_comment_id) if node.parent_comment_id else None
            if parent is not None:
                parent.replies.append(node)
            else:
                roots.append(node)
        return roots

    async def _add_comment(
        self,
        clip_id: uuid.UUID,
        author: User,
        text: str,
        parent_id: Optional[uuid.UUID],
        notice: Tuple[uuid.UUID, NotificationEntity, uuid.UUID, Optional[str]],
    ) -> CommentRead:
        recipient_id, entity_type, entity_id, message = notice
        comment = ClipComment(clip_id=clip_id, user_id=author.id, comment=text, parent_comment_id=parent_id)
        async with self.transaction():
            comment = await self.comments.create(comment)
            await self.clips.adjust_counter(clip_id, "comment_count", 1)
            await self.notifier.notify(recipient_id, author, NotificationType.COMMENT, entity_type, entity_id, message)
        return self._comment_read(comment, author)

    # ------------------------------------------------------------------
    # Likes and saves
    # ------------------------------------------------------------------

    async def like(self, clip_id: uuid.UUID, user: User) -> int:
        """
        Like a clip and return its new like count.

        Raises:
            ConflictError: The user already likes this clip.
        """
        clip = await self._require_clip(clip_id)
        if await self.likes.get_pair(clip.id, user.id):
            raise ConflictError("Clip already liked by this user")
        try:
            async with self.transaction():
                await self.likes.create(ClipLike(clip_id=clip.id, user_id=user.id))
                count = await self.clips.adjust_counter(clip.id, "like_count", 1)
                await self.notifier.notify(clip.user_id, user, NotificationType.LIKE, NotificationEntity.CLIP, clip.id)
        except IntegrityError:
            await self.reload(clip, user)
            raise ConflictError("Clip already liked by this user")
        return count

    async def unlike(self, clip_id: uuid.UUID, user: User) -> int:
        """Remove a like; unliking a clip that is not liked changes nothing."""
        clip = await self._require_clip(clip_id)
        like = await self.likes.get_pair(clip.id, user.id)
        if like is None:
            return clip.like_count
        async with self.transaction():
            await self.likes.delete(like.id)
            count = await self.clips.adjust_counter(clip.id, "like_count", -1)
        return count

    async def save(self, clip_id: uuid.UUID, user: User) -> None:
        clip = await self._require_clip(clip_id)
        if await self.saves.get_pair(clip.id, user.id):
            raise ConflictError("Clip already saved")
        try:
            async with self.transaction():
                await self.saves.create(SavedClip(clip_id=clip.id, user_id=user.id))
        except IntegrityError:
            await self.reload(clip, user)
            raise ConflictError("Clip already saved")

    async def unsave(self, clip_id: uuid.UUID, user: User) -> None:
        saved = await self.saves.get_pair(clip_id, user.id)
        if saved is None:
            raise NotFoundError("Saved clip not found")
        async with self.transaction():
            await self.saves.delete(saved.id)

    async def saved_clips(self, user: User) -> List[ClipRead]:
        rows = await self.saves.saved_by_user(user.id)
        return await self._clip_reads(rows, user)

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    async def delete_clip(self, clip_id: uuid.UUID, user: User) -> None:
        """
        Delete a clip with its comments, likes and saves.

        Allowed for the author, and for a parent account whose email is the
        author's registered parent email.

        Raises:
            NotFoundError: Unknown clip.
            PermissionDeniedError: Anyone else.
        """
        clip = await self._require_clip(clip_id)
        if clip.user_id != user.id:
            author = await self.users.get_by_id(clip.user_id)
            if not self._is_guardian_of(user, author):
                raise PermissionDeniedError("You do not have permission to delete this clip")

        async with self.transaction():
            await self.comments.delete_for_clip(clip.id)
            await self.likes.delete_for_clip(clip.id)
            await self.saves.delete_for_clip(clip.id)
            await self.clips.delete(clip.id)
        logger.info(f"User {user.id} deleted clip {clip_id}")

    @staticmethod
    def _is_guardian_of(user: User, author: Optional[User]) -> bool:
        if author is None or not author.parent_email or user.user_type != UserType.PARENT.value:
            return False
        return author.parent_email.strip().lower() == user.email.strip().lower()

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    async def _clip_reads(self, rows: Sequence[Tuple[Clip, User]], viewer: Optional[User]) -> List[ClipRead]:
        liked, saved = set(), set()
        if viewer is not None and rows:
            clip_ids = [clip.id for clip, _ in rows]
            liked = await self.likes.liked_clip_ids(viewer.id, clip_ids)
            saved = await self.saves.saved_clip_ids(viewer.id, clip_ids)
        return [
            self._clip_read(clip, author, is_liked=clip.id in liked, is_saved=clip.id in saved)
            for clip, author in rows
        ]

    @staticmethod
    def _clip_read(clip: Clip, author: User, is_liked: bool = False, is_saved: bool = False) -> ClipRead:
        return ClipRead(
            id=clip.id,
            user_id=clip.user_id,
            username=clip.username,
            user_profile_url=author.profile_url or clip.user_profile_url,
            user_type=author.user_type,
            video_url=clip.video_url,
            description=clip.description,
            like_count=clip.like_count,
            comment_count=clip.comment_count,
            is_liked=is_liked,
            is_saved=is_saved,
            created_at=clip.created_at,
        )

    @staticmethod
    def _comment_read(comment: ClipComment, author: User) -> CommentRead:
        return CommentRead(
            id=comment.id,
            clip_id=comment.clip_id,
            user_id=comment.user_id,
            username=author.full_name or author.username or "User",
            user_profile_url=author.profile_url,
            comment=comment.comment,
            parent_comment_id=comment.parent_comment_id,
            created_at=comment.created_at,
        )
