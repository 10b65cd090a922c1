"""Tests for notifications raised by network and clip actions."""

import uuid

import pytest

from athlinked.core.database.entities.notifications import NotificationType
from athlinked.core.exceptions import NotFoundError
from athlinked.core.models.io.clips import ClipCreate
from athlinked.server.services.clips import ClipsService
from athlinked.server.services.network import NetworkService
from athlinked.server.services.notifications import NotificationService

pytestmark = pytest.mark.asyncio


@pytest.fixture
def service(session) -> NotificationService:
    return NotificationService(session)


class TestNotificationsFromActions:
    async def test_follow_notifies_the_followed_user(self, service, session, make_user):
        fan = await make_user(full_name="Fan One")
        star = await make_user()

        await NetworkService(session).follow(fan, star.id)

        (notification,) = await service.list_for(star)
        assert notification.type == NotificationType.FOLLOW.value
        assert notification.message == "Fan One started following you"
        assert notification.entity_id == fan.id
        assert await service.list_for(fan) == []

    async def test_connection_request_and_acceptance(self, service, session, make_user):
        alice = await make_user(full_name="Alice")
        bob = await make_user(full_name="Bob")
        network = NetworkService(session)

        await network.send_connection_request(alice, bob.id)
        (request,) = await network.connection_requests(bob.id)
        await network.accept_connection_request(request.id, bob)

        assert [n.message for n in await service.list_for(bob)] == ["Alice sent you a connection request"]
        assert [n.message for n in await service.list_for(alice)] == ["Bob accepted your connection request"]

    async def test_like_and_comment_notify_the_clip_author(self, service, session, make_user):
        author = await make_user(full_name="Author")
        fan = await make_user(full_name="Fan")
        clips = ClipsService(session)
        clip = await clips.create_clip(author, ClipCreate(video_url="https://cdn/v.mp4"))

        await clips.like(clip.id, fan)
        await clips.add_comment(clip.id, fan, "great run")

        messages = {n.message for n in await service.list_for(author)}
        assert messages == {"Fan liked your clip", "Fan commented on your clip"}

    async def test_reply_notifies_the_parent_comment_author(self, service, session, make_user):
        author = await make_user(full_name="Author")
        commenter = await make_user(full_name="Commenter")
        replier = await make_user(full_name="Replier")
        clips = ClipsService(session)
        clip = await clips.create_clip(author, ClipCreate(video_url="https://cdn/v.mp4"))
        comment = await clips.add_comment(clip.id, commenter, "first")

        await clips.reply(comment.id, replier, "second")

        (notification,) = await service.list_for(commenter)
        assert notification.message == "Replier replied to your comment"
        assert notification.entity_type == "comment"
        assert notification.entity_id == comment.id

    async def test_own_actions_are_not_notified(self, service, session, make_user):
        author = await make_user()
        clips = ClipsService(session)
        clip = await clips.create_clip(author, ClipCreate(video_url="https://cdn/v.mp4"))

        await clips.like(clip.id, author)
        await clips.add_comment(clip.id, author, "mine")

        assert await service.unread_count(author) == 0


class TestInbox:
    async def test_read_state(self, service, session, make_user):
        star = await make_user()
        network = NetworkService(session)
        for _ in range(3):
            await network.follow(await make_user(), star.id)

        first, *_ = await service.list_for(star)
        await service.mark_as_read(first.id, star)
        assert await service.unread_count(star) == 2

        assert await service.mark_all_as_read(star) == 2
        assert await service.unread_count(star) == 0
        assert all(n.is_read for n in await service.list_for(star))

    async def test_limit_is_clamped(self, service, session, make_user):
        star = await make_user()
        network = NetworkService(session)
        for _ in range(2):
            await network.follow(await make_user(), star.id)

        assert len(await service.list_for(star, limit=0)) == 1
        assert len(await service.list_for(star, limit=500, offset=1)) == 1

    async def test_other_users_notification_is_not_found(self, service, session, make_user):
        star = await make_user()
        stranger = await make_user()
        await NetworkService(session).follow(await make_user(), star.id)
        (notification,) = await service.list_for(star)

        with pytest.raises(NotFoundError, match="Notification not found"):
            await service.mark_as_read(notification.id, stranger)
        with pytest.raises(NotFoundError):
            await service.delete(uuid.uuid4(), star)

        await service.delete(notification.id, star)
        assert await service.list_for(star) == []
