"""API tests for saved clips."""

import uuid

import pytest
import pytest_asyncio
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture
async def owner(make_user):
    return await make_user()


@pytest_asyncio.fixture
async def clip_id(client: AsyncClient, owner, auth_headers) -> str:
    response = await client.post("/api/clips", json={"video_url": "https://cdn/s.mp4"}, headers=auth_headers(owner))
    return response.json()["clip"]["id"]


class TestSaves:
    async def test_save_and_list(self, client: AsyncClient, owner, clip_id, auth_headers):
        response = await client.post("/api/save", json={"type": "clip", "id": clip_id}, headers=auth_headers(owner))

        assert response.json() == {"success": True, "message": "Clip saved successfully"}
        saved = await client.get(f"/api/save/saved/{owner.id}", headers=auth_headers(owner))
        (clip,) = saved.json()["clips"]
        assert clip["id"] == clip_id
        assert clip["is_saved"] is True

    async def test_save_twice_conflicts(self, client: AsyncClient, owner, clip_id, auth_headers):
        await client.post("/api/save", json={"type": "clip", "id": clip_id}, headers=auth_headers(owner))

        response = await client.post("/api/save", json={"type": "clip", "id": clip_id}, headers=auth_headers(owner))

        assert response.status_code == 409
        assert response.json()["message"] == "Clip already saved"

    async def test_only_clips_can_be_saved(self, client: AsyncClient, owner, clip_id, auth_headers):
        response = await client.post("/api/save", json={"type": "post", "id": clip_id}, headers=auth_headers(owner))

        assert response.status_code == 400
        assert response.json()["message"].startswith("type:")

    async def test_save_unknown_clip(self, client: AsyncClient, owner, auth_headers):
        response = await client.post(
            "/api/save", json={"type": "clip", "id": str(uuid.uuid4())}, headers=auth_headers(owner)
        )

        assert response.status_code == 404

    async def test_unsave(self, client: AsyncClient, owner, clip_id, auth_headers):
        await client.post("/api/save", json={"type": "clip", "id": clip_id}, headers=auth_headers(owner))

        response = await client.post("/api/save/unsave", json={"type": "clip", "id": clip_id}, headers=auth_headers(owner))
        again = await client.post("/api/save/unsave", json={"type": "clip", "id": clip_id}, headers=auth_headers(owner))

        assert response.json() == {"success": True, "message": "Clip removed from saved items"}
        assert again.status_code == 404
        assert again.json()["message"] == "Saved clip not found"

    async def test_saved_items_are_private(self, client: AsyncClient, owner, make_user, auth_headers):
        other = await make_user()

        response = await client.get(f"/api/save/saved/{owner.id}", headers=auth_headers(other))

        assert response.status_code == 403
        assert response.json()["message"] == "You can only view your own saved items"
