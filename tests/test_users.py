import pytest
from httpx import AsyncClient

from conftest import register_user, create_writing


class TestProfile:

    @pytest.mark.asyncio
    async def test_profile_with_stats(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        ben = await register_user(client, "ben")
        await create_writing(client, ann)
        await create_writing(client, ann)
        await client.post(f"/api/users/{ann['id']}/follow", headers=ben["headers"])

        anonymous = (await client.get(f"/api/users/{ann['id']}")).json()
        assert anonymous["stats"] == {"writingsCount": 2, "followersCount": 1, "followingCount": 0}
        assert anonymous["isFollowing"] is False
        assert "password" not in anonymous

        as_ben = (await client.get(f"/api/users/{ann['id']}", headers=ben["headers"])).json()
        assert as_ben["isFollowing"] is True

    @pytest.mark.asyncio
    async def test_unknown_profile(self, client: AsyncClient):
        response = await client.get("/api/users/999")
        assert response.status_code == 404
        assert response.json()["detail"] == "User not found"

    @pytest.mark.asyncio
    async def test_update_own_profile(self, client: AsyncClient):
        ann = await register_user(client, "ann")

        response = await client.put(
            "/api/users/profile",
            json={"bio": "Poet.", "profileImage": "https://img.example/ann.png"},
            headers=ann["headers"],
        )
        assert response.status_code == 200
        data = response.json()
        assert data["bio"] == "Poet."
        assert data["profileImage"] == "https://img.example/ann.png"
        assert data["fullName"] == "Ann"


class TestFollows:

    @pytest.mark.asyncio
    async def test_follow_twice(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        ben = await register_user(client, "ben", full_name="Ben Marsh")
        url = f"/api/users/{ann['id']}/follow"

        first = await client.post(url, headers=ben["headers"])
        assert first.status_code == 201
        assert first.json()["followerId"] == ben["id"]

        second = await client.post(url, headers=ben["headers"])
        assert second.status_code == 400
        assert second.json()["detail"] == "Already following"

        followers = (await client.get(f"/api/users/{ann['id']}/followers")).json()
        assert [f["id"] for f in followers] == [ben["id"]]

        notes = (await client.get("/api/notifications", headers=ann["headers"])).json()
        assert len(notes) == 1
        assert notes[0]["type"] == "follow"
        assert notes[0]["message"] == "Ben Marsh started following you"

    @pytest.mark.asyncio
    async def test_cannot_follow_self(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        response = await client.post(f"/api/users/{ann['id']}/follow", headers=ann["headers"])
        assert response.status_code == 400
        assert response.json()["detail"] == "You cannot follow yourself"

    @pytest.mark.asyncio
    async def test_follow_unknown_user(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        response = await client.post("/api/users/999/follow", headers=ann["headers"])
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unfollow(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        ben = await register_user(client, "ben")
        url = f"/api/users/{ann['id']}/follow"
        await client.post(url, headers=ben["headers"])

        following = (await client.get(f"/api/users/{ben['id']}/following")).json()
        assert [f["username"] for f in following] == ["ann"]

        assert (await client.delete(url, headers=ben["headers"])).status_code == 204
        assert (await client.get(f"/api/users/{ben['id']}/following")).json() == []

        missing = await client.delete(url, headers=ben["headers"])
        assert missing.status_code == 404
        assert missing.json()["detail"] == "Follow not found"
