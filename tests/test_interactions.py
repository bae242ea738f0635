import pytest
from httpx import AsyncClient

from conftest import register_user, create_writing


class TestComments:

    @pytest.mark.asyncio
    async def test_comment_notifies_author(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        ben = await register_user(client, "ben", full_name="Ben Marsh")
        writing = await create_writing(client, ann, title="Glass Orchard")

        response = await client.post(
            f"/api/writings/{writing['id']}/comments",
            json={"content": "Lovely."},
            headers=ben["headers"],
        )
        assert response.status_code == 201
        comment = response.json()
        assert comment["author"]["username"] == "ben"

        listed = (await client.get(f"/api/writings/{writing['id']}/comments")).json()
        assert [c["id"] for c in listed] == [comment["id"]]

        [note] = (await client.get("/api/notifications", headers=ann["headers"])).json()
        assert note["type"] == "comment"
        assert note["message"] == 'Ben Marsh commented on your writing "Glass Orchard"'
        assert note["metadata"]["commentId"] == comment["id"]

    @pytest.mark.asyncio
    async def test_commenting_on_own_writing_is_silent(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        writing = await create_writing(client, ann)

        await client.post(f"/api/writings/{writing['id']}/comments", json={"content": "Note to self"}, headers=ann["headers"])
        assert (await client.get("/api/notifications", headers=ann["headers"])).json() == []

    @pytest.mark.asyncio
    async def test_comment_on_missing_writing(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        response = await client.post("/api/writings/999/comments", json={"content": "?"}, headers=ann["headers"])
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_only_author_deletes_comment(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        ben = await register_user(client, "ben")
        writing = await create_writing(client, ann)
        comment = (await client.post(
            f"/api/writings/{writing['id']}/comments", json={"content": "hm"}, headers=ben["headers"]
        )).json()

        assert (await client.delete(f"/api/comments/{comment['id']}", headers=ann["headers"])).status_code == 403
        assert (await client.delete(f"/api/comments/{comment['id']}", headers=ben["headers"])).status_code == 204
        assert (await client.get(f"/api/writings/{writing['id']}/comments")).json() == []


class TestLikes:

    @pytest.mark.asyncio
    async def test_like_flow(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        ben = await register_user(client, "ben")
        writing = await create_writing(client, ann)
        url = f"/api/writings/{writing['id']}"

        like = await client.post(f"{url}/like", headers=ben["headers"])
        assert like.status_code == 201

        detail = (await client.get(url, headers=ben["headers"])).json()
        assert detail["stats"]["likes"] == 1
        assert detail["userInteraction"]["liked"] is True

        again = await client.post(f"{url}/like", headers=ben["headers"])
        assert again.status_code == 400
        assert again.json()["detail"] == "Already liked"

        notes = (await client.get("/api/notifications", headers=ann["headers"])).json()
        assert [n["type"] for n in notes] == ["like"]

        assert (await client.delete(f"{url}/like", headers=ben["headers"])).status_code == 204
        detail = (await client.get(url, headers=ben["headers"])).json()
        assert detail["stats"]["likes"] == 0
        assert detail["userInteraction"]["liked"] is False

        missing = await client.delete(f"{url}/like", headers=ben["headers"])
        assert missing.status_code == 404
        assert missing.json()["detail"] == "Like not found"

    @pytest.mark.asyncio
    async def test_like_requires_auth(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        writing = await create_writing(client, ann)
        assert (await client.post(f"/api/writings/{writing['id']}/like")).status_code == 401


class TestBookmarks:

    @pytest.mark.asyncio
    async def test_bookmark_flow(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        ben = await register_user(client, "ben")
        writing = await create_writing(client, ann)
        url = f"/api/writings/{writing['id']}/bookmark"

        assert (await client.post(url, headers=ben["headers"])).status_code == 201
        again = await client.post(url, headers=ben["headers"])
        assert again.status_code == 400
        assert again.json()["detail"] == "Already bookmarked"

        [saved] = (await client.get("/api/bookmarks", headers=ben["headers"])).json()
        assert saved["writing"]["id"] == writing["id"]
        assert saved["writing"]["author"]["username"] == "ann"

        detail = (await client.get(f"/api/writings/{writing['id']}", headers=ben["headers"])).json()
        assert detail["userInteraction"]["bookmarked"] is True

        assert (await client.delete(url, headers=ben["headers"])).status_code == 204
        assert (await client.delete(url, headers=ben["headers"])).status_code == 404

    @pytest.mark.asyncio
    async def test_bookmarks_skip_deleted_writings(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        ben = await register_user(client, "ben")
        kept = await create_writing(client, ann, title="Kept")
        gone = await create_writing(client, ann, title="Gone")

        await client.post(f"/api/writings/{kept['id']}/bookmark", headers=ben["headers"])
        await client.post(f"/api/writings/{gone['id']}/bookmark", headers=ben["headers"])
        await client.delete(f"/api/writings/{gone['id']}", headers=ann["headers"])

        saved = (await client.get("/api/bookmarks", headers=ben["headers"])).json()
        assert [b["writing"]["title"] for b in saved] == ["Kept"]
