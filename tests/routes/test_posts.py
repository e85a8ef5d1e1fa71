# tests/routes/test_posts.py
"""Tests for the blog post routes."""

from datetime import UTC, datetime

import pytest
from httpx import AsyncClient

POST = {
    "title": "Hello World",
    "body": "<p>First post</p>",
    "status": "published",
    "category_title": "Technology",
    "tag_titles": ["python"],
}


async def _create(client: AsyncClient, **overrides: object) -> dict:
    response = await client.post("/posts", json={**POST, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


class TestWrites:
    @pytest.mark.asyncio
    async def test_create(self, client: AsyncClient) -> None:
        """Test creating a post returns it with slug, category and tags."""
        body = await _create(client)
        assert body["slug"] == "hello-world"
        assert body["category_title"] == "Technology"
        assert body["tag_titles"] == ["python"]

    @pytest.mark.asyncio
    async def test_create_without_title(self, client: AsyncClient) -> None:
        """Test a published post without title is a 400 with the message list."""
        response = await client.post("/posts", json={**POST, "title": ""})
        assert response.status_code == 400
        assert response.json() == {
            "detail": "'Title' must not be empty.",
            "errors": ["'Title' must not be empty."],
        }

    @pytest.mark.asyncio
    async def test_malformed_payload(self, client: AsyncClient) -> None:
        """Test a payload of the wrong shape is a 422."""
        response = await client.post("/posts", json={**POST, "status": "archived"})
        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "status"

    @pytest.mark.asyncio
    async def test_update(self, client: AsyncClient) -> None:
        """Test updating the title reslugs the post."""
        created = await _create(client)
        response = await client.put(f"/posts/{created['id']}", json={**POST, "title": "Renamed"})
        assert response.status_code == 200
        assert response.json()["slug"] == "renamed"

    @pytest.mark.asyncio
    async def test_update_missing(self, client: AsyncClient) -> None:
        """Test updating an unknown post is a 404."""
        response = await client.put("/posts/99", json=POST)
        assert response.status_code == 404
        assert response.json()["detail"] == "Blog post with id 99 is not found."

    @pytest.mark.asyncio
    async def test_delete(self, client: AsyncClient) -> None:
        """Test a deleted post can no longer be read."""
        created = await _create(client)
        assert (await client.delete(f"/posts/{created['id']}")).status_code == 204
        assert (await client.get(f"/posts/by-id/{created['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_clear_cache(self, client: AsyncClient) -> None:
        """Test the cache clearing route is not taken for a post id."""
        assert (await client.delete("/posts/cache")).status_code == 204


class TestReads:
    @pytest.mark.asyncio
    async def test_permalink(self, client: AsyncClient) -> None:
        """Test a post is read by year, month, day and slug."""
        created = await _create(client)
        day = datetime.fromisoformat(created["created_on"]).astimezone(UTC)

        response = await client.get(f"/posts/{day.year}/{day.month}/{day.day}/hello-world")
        assert response.status_code == 200
        assert response.json()["id"] == created["id"]

        missing = await client.get(f"/posts/{day.year}/{day.month}/{day.day}/nope")
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_list_and_count(self, client: AsyncClient) -> None:
        """Test the index lists published posts only."""
        await _create(client)
        await _create(client, title="Draft", status="draft")

        listing = (await client.get("/posts")).json()
        assert listing["total_post_count"] == 1
        assert [p["title"] for p in listing["posts"]] == ["Hello World"]
        assert (await client.get("/posts/count")).json() == {"count": 1}
        assert [p["title"] for p in (await client.get("/posts/drafts")).json()["posts"]] == ["Draft"]

    @pytest.mark.asyncio
    async def test_recent(self, client: AsyncClient) -> None:
        """Test recent posts with and without drafts."""
        await _create(client)
        await _create(client, title="Draft", status="draft")
        assert len((await client.get("/posts/recent")).json()["posts"]) == 1
        assert len((await client.get("/posts/recent", params={"published": False})).json()["posts"]) == 2

    @pytest.mark.asyncio
    async def test_category_and_tag(self, client: AsyncClient) -> None:
        """Test listing by category and tag slug."""
        await _create(client)
        assert (await client.get("/posts/category/technology")).json()["total_post_count"] == 1
        assert (await client.get("/posts/tag/python")).json()["total_post_count"] == 1
        assert (await client.get("/posts/tag/rust")).json()["total_post_count"] == 0

    @pytest.mark.asyncio
    async def test_archive(self, client: AsyncClient) -> None:
        """Test the monthly archive and its counts."""
        await _create(client, created_on="2020-03-05T12:00:00+00:00")

        archive = await client.get("/posts/archive/2020", params={"month": 3})
        assert archive.json()["total_post_count"] == 1
        assert (await client.get("/posts/archives")).json() == [{"year": 2020, "month": 3, "count": 1}]
