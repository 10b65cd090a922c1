"""API tests for follows and connections."""

import uuid

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


class TestFollowApi:
    async def test_follow_and_counts(self, client: AsyncClient, make_user, auth_headers):
        fan = await make_user()
        star = await make_user()

        response = await client.post(f"/api/network/follow/{star.id}", headers=auth_headers(fan))

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "User followed successfully"}

        counts = await client.get(f"/api/network/counts/{star.id}")
        assert counts.json() == {"success": True, "followers": 1, "following": 0}

        is_following = await client.get(f"/api/network/is-following/{star.id}", headers=auth_headers(fan))
        assert is_following.json()["is_following"] is True

    async def test_follow_twice_is_declined(self, client: AsyncClient, make_user, auth_headers):
        fan = await make_user()
        star = await make_user()
        await client.post(f"/api/network/follow/{star.id}", headers=auth_headers(fan))

        response = await client.post(f"/api/network/follow/{star.id}", headers=auth_headers(fan))

        assert response.status_code == 200
        assert response.json() == {"success": False, "message": "Already following this user"}
        counts = await client.get(f"/api/network/counts/{star.id}")
        assert counts.json()["followers"] == 1

    async def test_follow_self_is_rejected(self, client: AsyncClient, make_user, auth_headers):
        user = await make_user()

        response = await client.post(f"/api/network/follow/{user.id}", headers=auth_headers(user))

        assert response.status_code == 400
        assert response.json()["message"] == "You cannot follow yourself"

    async def test_follow_unknown_user(self, client: AsyncClient, make_user, auth_headers):
        user = await make_user()

        response = await client.post(f"/api/network/follow/{uuid.uuid4()}", headers=auth_headers(user))

        assert response.status_code == 404

    async def test_follow_requires_token(self, client: AsyncClient):
        response = await client.post(f"/api/network/follow/{uuid.uuid4()}")

        assert response.status_code == 401

    async def test_unfollow(self, client: AsyncClient, make_user, auth_headers):
        fan = await make_user()
        star = await make_user()
        await client.post(f"/api/network/follow/{star.id}", headers=auth_headers(fan))

        response = await client.post(f"/api/network/unfollow/{star.id}", headers=auth_headers(fan))
        again = await client.post(f"/api/network/unfollow/{star.id}", headers=auth_headers(fan))

        assert response.json() == {"success": True, "message": "User unfollowed successfully"}
        assert again.json() == {"success": False, "message": "Not following this user"}
        counts = await client.get(f"/api/network/counts/{fan.id}")
        assert counts.json()["following"] == 0

    async def test_follower_and_following_lists_are_public(self, client: AsyncClient, make_user, auth_headers):
        fan = await make_user(full_name="Zed Fan")
        star = await make_user(full_name="Amy Star")
        await client.post(f"/api/network/follow/{star.id}", headers=auth_headers(fan))

        followers = await client.get(f"/api/network/followers/{star.id}")
        following = await client.get(f"/api/network/following/{fan.id}")

        assert followers.json()["count"] == 1
        assert followers.json()["users"][0]["full_name"] == "Zed Fan"
        assert followers.json()["users"][0]["followed_at"] is not None
        assert [user["id"] for user in following.json()["users"]] == [str(star.id)]


class TestConnectionApi:
    async def test_request_accept_flow(self, client: AsyncClient, make_user, auth_headers):
        alice = await make_user(full_name="Alice")
        bob = await make_user(full_name="Bob")

        sent = await client.post(f"/api/network/connect/{bob.id}", headers=auth_headers(alice))
        assert sent.json() == {"success": True, "message": "Connection request sent successfully"}

        status = await client.get(f"/api/network/connection-status/{bob.id}", headers=auth_headers(alice))
        assert status.json() == {"success": True, "exists": True, "status": "pending"}

        pending = await client.get("/api/network/connection-requests", headers=auth_headers(bob))
        (request,) = pending.json()["requests"]
        assert request["requester_full_name"] == "Alice"

        accepted = await client.post(
            f"/api/network/connection-requests/{request['id']}/accept", headers=auth_headers(bob)
        )
        assert accepted.json() == {"success": True, "message": "Connection request accepted"}

        connections = await client.get(f"/api/network/connections/{alice.id}")
        assert [user["full_name"] for user in connections.json()["users"]] == ["Bob"]

        status = await client.get(f"/api/network/connection-status/{bob.id}", headers=auth_headers(alice))
        assert status.json()["status"] == "connected"

        counts = await client.get(f"/api/network/counts/{alice.id}")
        assert counts.json() == {"success": True, "followers": 1, "following": 1}

    async def test_duplicate_request_is_declined_both_ways(self, client: AsyncClient, make_user, auth_headers):
        alice = await make_user()
        bob = await make_user()
        await client.post(f"/api/network/connect/{bob.id}", headers=auth_headers(alice))

        again = await client.post(f"/api/network/connect/{bob.id}", headers=auth_headers(alice))
        reverse = await client.post(f"/api/network/connect/{alice.id}", headers=auth_headers(bob))

        assert again.json() == {"success": False, "message": "Connection request already pending"}
        assert reverse.json() == {"success": False, "message": "Connection request already pending"}

    async def test_request_to_connected_user_is_declined(
        self, client: AsyncClient, make_user, auth_headers, connect_users
    ):
        alice = await make_user()
        bob = await make_user()
        await connect_users(alice, bob)

        response = await client.post(f"/api/network/connect/{bob.id}", headers=auth_headers(alice))

        assert response.json() == {"success": False, "message": "Already connected with this user"}

    async def test_reject(self, client: AsyncClient, make_user, auth_headers):
        alice = await make_user()
        bob = await make_user()
        await client.post(f"/api/network/connect/{bob.id}", headers=auth_headers(alice))
        pending = await client.get("/api/network/connection-requests", headers=auth_headers(bob))
        request_id = pending.json()["requests"][0]["id"]

        response = await client.post(
            f"/api/network/connection-requests/{request_id}/reject", headers=auth_headers(bob)
        )

        assert response.json() == {"success": True, "message": "Connection request rejected"}
        status = await client.get(f"/api/network/connection-status/{bob.id}", headers=auth_headers(alice))
        assert status.json() == {"success": True, "exists": False, "status": None}

    async def test_only_receiver_can_accept(self, client: AsyncClient, make_user, auth_headers):
        alice = await make_user()
        bob = await make_user()
        await client.post(f"/api/network/connect/{bob.id}", headers=auth_headers(alice))
        pending = await client.get("/api/network/connection-requests", headers=auth_headers(bob))
        request_id = pending.json()["requests"][0]["id"]

        response = await client.post(
            f"/api/network/connection-requests/{request_id}/accept", headers=auth_headers(alice)
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Connection request not found"

    async def test_remove_connection(self, client: AsyncClient, make_user, auth_headers, connect_users):
        alice = await make_user()
        bob = await make_user()
        await connect_users(alice, bob)

        response = await client.delete(f"/api/network/connections/{bob.id}", headers=auth_headers(alice))
        missing = await client.delete(f"/api/network/connections/{bob.id}", headers=auth_headers(alice))

        assert response.json() == {"success": True, "message": "Connection removed successfully"}
        assert missing.json() == {"success": False, "message": "Connection not found"}
        counts = await client.get(f"/api/network/counts/{bob.id}")
        assert counts.json() == {"success": True, "followers": 0, "following": 0}
        connections = await client.get(f"/api/network/connections/{bob.id}")
        assert connections.json()["count"] == 0
