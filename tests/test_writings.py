import pytest
from httpx import AsyncClient

from conftest import register_user, make_admin, create_writing, writing_payload


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_requires_auth(self, client: AsyncClient):
        response = await client.post("/api/writings", json=writing_payload())
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_create_sets_owner_and_defaults(self, client: AsyncClient):
        author = await register_user(client, "marlow")
        writing = await create_writing(client, author, isFeatured=True)

        assert writing["userId"] == author["id"]
        assert writing["isFeatured"] is False
        assert writing["tags"] == ["Surreal", "Nature"]
        assert writing["readTime"] == 3
        assert writing["createdAt"] and writing["updatedAt"]

    @pytest.mark.asyncio
    async def test_read_time_is_estimated_when_missing(self, client: AsyncClient):
        author = await register_user(client, "marlow")
        payload = writing_payload(content=" ".join(["word"] * 500))
        payload.pop("readTime")

        response = await client.post("/api/writings", json=payload, headers=author["headers"])
        assert response.status_code == 201
        assert response.json()["readTime"] == 3

    @pytest.mark.asyncio
    async def test_missing_title_is_a_validation_error(self, client: AsyncClient):
        author = await register_user(client, "marlow")
        payload = writing_payload()
        payload.pop("title")

        response = await client.post("/api/writings", json=payload, headers=author["headers"])
        assert response.status_code == 400
        assert response.json()["detail"] == "Validation error"


class TestRead:

    @pytest.mark.asyncio
    async def test_detail_for_anonymous_viewer(self, client: AsyncClient):
        author = await register_user(client, "marlow", full_name="Marlow Reed")
        writing = await create_writing(client, author)

        response = await client.get(f"/api/writings/{writing['id']}")
        assert response.status_code == 200
        data = response.json()
        assert data["author"]["fullName"] == "Marlow Reed"
        assert data["stats"] == {"likes": 0, "comments": 0}
        assert data["userInteraction"] == {"liked": False, "bookmarked": False}

    @pytest.mark.asyncio
    async def test_missing_writing(self, client: AsyncClient):
        response = await client.get("/api/writings/999")
        assert response.status_code == 404
        assert response.json()["detail"] == "Writing not found"

    @pytest.mark.asyncio
    async def test_non_numeric_id(self, client: AsyncClient):
        response = await client.get("/api/writings/abc")
        assert response.status_code == 400


class TestFilters:

    @pytest.mark.asyncio
    async def test_list_filters(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        ben = await register_user(client, "ben")
        poem = await create_writing(client, ann, title="Sea Psalm", category="Poetry", tags=["Sea"])
        essay = await create_writing(client, ben, title="On Maps", category="Essays", tags=["Travel"])

        async def ids(**params):
            response = await client.get("/api/writings", params=params)
            assert response.status_code == 200
            return [w["id"] for w in response.json()]

        assert await ids() == [poem["id"], essay["id"]]
        assert await ids(category="poetry") == [poem["id"]]
        assert await ids(tag="travel") == [essay["id"]]
        assert await ids(userId=ben["id"]) == [essay["id"]]
        assert await ids(search="psalm") == [poem["id"]]
        assert await ids(featured="true") == []

    @pytest.mark.asyncio
    async def test_first_filter_wins(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        poem = await create_writing(client, ann, category="Poetry")
        await create_writing(client, ann, category="Essays", title="Poetry of Maps")

        # category is applied, search is ignored
        response = await client.get("/api/writings", params={"category": "Poetry", "search": "maps"})
        assert [w["id"] for w in response.json()] == [poem["id"]]

    @pytest.mark.asyncio
    async def test_list_items_carry_author_and_stats(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        await create_writing(client, ann)

        [item] = (await client.get("/api/writings")).json()
        assert item["author"]["username"] == "ann"
        assert item["stats"] == {"likes": 0, "comments": 0}


class TestUpdateDelete:

    @pytest.mark.asyncio
    async def test_owner_can_update(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        writing = await create_writing(client, ann)

        response = await client.put(
            f"/api/writings/{writing['id']}",
            json={"title": "Retitled", "tags": None},
            headers=ann["headers"],
        )
        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Retitled"
        assert data["tags"] is None
        assert data["content"] == writing["content"]

    @pytest.mark.asyncio
    async def test_stranger_cannot_update_or_delete(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        ben = await register_user(client, "ben")
        writing = await create_writing(client, ann)

        put = await client.put(f"/api/writings/{writing['id']}", json={"title": "Mine"}, headers=ben["headers"])
        assert put.status_code == 403

        delete = await client.delete(f"/api/writings/{writing['id']}", headers=ben["headers"])
        assert delete.status_code == 403

        still = await client.get(f"/api/writings/{writing['id']}")
        assert still.json()["title"] == writing["title"]

    @pytest.mark.asyncio
    async def test_admin_can_delete_any_writing(self, client: AsyncClient, session_factory):
        ann = await register_user(client, "ann")
        boss = await register_user(client, "boss")
        await make_admin(session_factory, boss["id"])
        writing = await create_writing(client, ann)

        response = await client.delete(f"/api/writings/{writing['id']}", headers=boss["headers"])
        assert response.status_code == 204
        assert (await client.get(f"/api/writings/{writing['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_update_missing_writing(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        response = await client.put("/api/writings/999", json={"title": "x"}, headers=ann["headers"])
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_new_writing_after_delete_gets_fresh_id(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        first = await create_writing(client, ann)
        await client.delete(f"/api/writings/{first['id']}", headers=ann["headers"])

        second = await create_writing(client, ann)
        assert second["id"] > first["id"]


class TestNonAsciiAndTimestamps:

    @pytest.mark.asyncio
    async def test_category_filter_folds_non_ascii_letters(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        study = await create_writing(client, ann, category="Études")

        response = await client.get("/api/writings", params={"category": "études"})
        assert [w["id"] for w in response.json()] == [study["id"]]

    @pytest.mark.asyncio
    async def test_timestamps_match_between_create_and_fetch(self, client: AsyncClient):
        ann = await register_user(client, "ann")
        created = await create_writing(client, ann)

        fetched = (await client.get(f"/api/writings/{created['id']}")).json()
        assert fetched["createdAt"] == created["createdAt"]
        assert fetched["updatedAt"] == created["updatedAt"]
        assert fetched["createdAt"].endswith("Z")
