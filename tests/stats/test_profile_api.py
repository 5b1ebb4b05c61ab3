"""Profile and public stats endpoints."""

from __future__ import annotations

from httpx import AsyncClient


async def test_profile_requires_login(client: AsyncClient):
    assert (await client.get("/api/v1/profile")).status_code == 401


async def test_first_idea_unlocks_first_timer(client: AsyncClient, register):
    await register(client, "alice")

    before = (await client.get("/api/v1/profile")).json()
    assert before["user"]["username"] == "alice"
    assert before["stats"]["ideas_submitted"] == 0
    assert not any(a["unlocked"] for a in before["stats"]["achievements"])

    await client.post("/api/v1/ideas", json={"text": "Umbrellas for cats", "category": "other"})

    after = (await client.get("/api/v1/profile")).json()["stats"]
    assert after["ideas_submitted"] == 1
    unlocked = {a["slug"]: a["unlocked"] for a in after["achievements"]}
    assert unlocked == {
        "first_timer": True,
        "idea_machine": False,
        "judge_judy": False,
        "certifiably_insane": False,
    }


async def test_public_stats_reflect_received_ratings(client: AsyncClient, make_client, register):
    author = await register(client, "author")
    idea = (await client.post("/api/v1/ideas", json={"text": "Bicycle-powered fridges", "category": "science"})).json()

    rater = await make_client()
    await register(rater, "rater")
    await rater.post("/api/v1/ratings", json={"idea_id": idea["id"], "rating": 9})

    stats = (await rater.get(f"/api/v1/users/{author['id']}/stats")).json()
    assert stats["total_ratings_received"] == 1
    assert stats["average_rating_received"] == 9.0
    assert stats["batshit_score"] == 90
    assert stats["rating_label"] == "Absolutely Batshit"


async def test_unknown_user_stats(client: AsyncClient):
    response = await client.get("/api/v1/users/nobody/stats")
    assert response.status_code == 404
