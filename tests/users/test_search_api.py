"""User search endpoint."""

from httpx import AsyncClient


async def test_search(client: AsyncClient, make_client, register):
    await register(client, "alice")
    other = await make_client()
    bob = await register(other, "bobby", first_name="Robert")

    response = await client.get("/api/v1/users/search", params={"q": "rob"})
    assert response.status_code == 200
    assert response.json() == [
        {"id": bob["id"], "username": "bobby", "first_name": "Robert", "last_name": None, "profile_image_url": None}
    ]

    # Short queries and self matches come back empty.
    assert (await client.get("/api/v1/users/search", params={"q": "r"})).json() == []
    assert (await client.get("/api/v1/users/search", params={"q": "alice"})).json() == []


async def test_search_requires_login(client: AsyncClient):
    assert (await client.get("/api/v1/users/search", params={"q": "bob"})).status_code == 401
