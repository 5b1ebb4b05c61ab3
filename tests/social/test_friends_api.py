"""Friendship endpoints."""

from __future__ import annotations

from httpx import AsyncClient

FRIENDS = "/api/v1/friends"


async def _two_users(client: AsyncClient, make_client, register):
    alice = await register(client, "alice")
    bob_client = await make_client()
    bob = await register(bob_client, "bob")
    return alice, bob, bob_client


async def test_request_accept_remove(client: AsyncClient, make_client, register):
    alice, bob, bob_client = await _two_users(client, make_client, register)

    sent = await client.post(f"{FRIENDS}/request", json={"friend_id": bob["id"]})
    assert sent.status_code == 201
    friendship_id = sent.json()["id"]
    assert sent.json()["status"] == "pending"

    pending = (await bob_client.get(f"{FRIENDS}/requests")).json()
    assert [p["user"]["id"] for p in pending] == [alice["id"]]
    assert (await client.get(f"{FRIENDS}/requests")).json() == []

    # Only the recipient may answer.
    forbidden = await client.put(f"{FRIENDS}/requests/{friendship_id}", json={"status": "accepted"})
    assert forbidden.status_code == 403

    accepted = await bob_client.put(f"{FRIENDS}/requests/{friendship_id}", json={"status": "accepted"})
    assert accepted.status_code == 200
    assert accepted.json()["status"] == "accepted"

    assert [f["user"]["username"] for f in (await client.get(FRIENDS)).json()] == ["bob"]
    assert [f["user"]["username"] for f in (await bob_client.get(FRIENDS)).json()] == ["alice"]

    removed = await bob_client.delete(f"{FRIENDS}/{alice['id']}")
    assert removed.status_code == 204
    assert (await client.get(FRIENDS)).json() == []


async def test_duplicate_in_either_direction(client: AsyncClient, make_client, register):
    alice, bob, bob_client = await _two_users(client, make_client, register)

    assert (await client.post(f"{FRIENDS}/request", json={"friend_id": bob["id"]})).status_code == 201
    assert (await bob_client.post(f"{FRIENDS}/request", json={"friend_id": alice["id"]})).status_code == 409


async def test_reject_then_request_again(client: AsyncClient, make_client, register):
    alice, bob, bob_client = await _two_users(client, make_client, register)

    friendship_id = (await client.post(f"{FRIENDS}/request", json={"friend_id": bob["id"]})).json()["id"]
    rejected = await bob_client.put(f"{FRIENDS}/requests/{friendship_id}", json={"status": "rejected"})
    assert rejected.json()["status"] == "rejected"

    again = await bob_client.put(f"{FRIENDS}/requests/{friendship_id}", json={"status": "accepted"})
    assert again.status_code == 409

    retry = await client.post(f"{FRIENDS}/request", json={"friend_id": bob["id"]})
    assert retry.status_code == 201


async def test_invalid_requests(client: AsyncClient, register):
    alice = await register(client, "alice")

    assert (await client.post(f"{FRIENDS}/request", json={"friend_id": alice["id"]})).status_code == 422
    assert (await client.post(f"{FRIENDS}/request", json={"friend_id": "ghost"})).status_code == 404
    assert (await client.put(f"{FRIENDS}/requests/missing", json={"status": "maybe"})).status_code == 422
    assert (await client.put(f"{FRIENDS}/requests/missing", json={"status": "accepted"})).status_code == 404


async def test_remove_without_friendship_is_noop(client: AsyncClient, make_client, register):
    _alice, bob, _ = await _two_users(client, make_client, register)
    assert (await client.delete(f"{FRIENDS}/{bob['id']}")).status_code == 204


async def test_requires_login(client: AsyncClient):
    assert (await client.get(FRIENDS)).status_code == 401
