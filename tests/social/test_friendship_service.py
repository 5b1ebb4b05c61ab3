"""Friendship state machine: one record per pair, target-only responses, removal."""

from __future__ import annotations

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from batshit.db.models import Friendship
from batshit.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from batshit.social.friendship_service import (
    ACCEPTED,
    PENDING,
    REJECTED,
    get_pair,
    list_friend_ids,
    list_friends,
    list_pending_requests,
    pair_key,
    remove_friend,
    respond_to_request,
    send_request,
)


@pytest_asyncio.fixture
async def pair(make_user):
    alice = await make_user("alice")
    bob = await make_user("bob")
    return alice, bob


async def _count(db) -> int:
    return (await db.execute(select(func.count(Friendship.id)))).scalar_one()


class TestSendRequest:
    async def test_creates_pending_record(self, db_session, pair):
        alice, bob = pair
        friendship = await send_request(db_session, alice.id, bob.id)

        assert friendship.status == PENDING
        assert friendship.requester_id == alice.id
        assert friendship.target_id == bob.id
        assert friendship.pair_key == pair_key(alice.id, bob.id)

    async def test_reverse_request_is_conflict(self, db_session, pair):
        alice, bob = pair
        await send_request(db_session, alice.id, bob.id)

        with pytest.raises(ConflictError):
            await send_request(db_session, bob.id, alice.id)
        assert await _count(db_session) == 1

    async def test_repeat_request_is_conflict(self, db_session, pair):
        alice, bob = pair
        await send_request(db_session, alice.id, bob.id)
        with pytest.raises(ConflictError):
            await send_request(db_session, alice.id, bob.id)

    async def test_request_to_existing_friend_is_conflict(self, db_session, pair):
        alice, bob = pair
        friendship = await send_request(db_session, alice.id, bob.id)
        await respond_to_request(db_session, friendship.id, ACCEPTED, responder_id=bob.id)

        with pytest.raises(ConflictError):
            await send_request(db_session, bob.id, alice.id)

    async def test_self_request_is_rejected(self, db_session, pair):
        alice, _ = pair
        with pytest.raises(ValidationError):
            await send_request(db_session, alice.id, alice.id)

    async def test_unknown_target(self, db_session, pair):
        alice, _ = pair
        with pytest.raises(NotFoundError):
            await send_request(db_session, alice.id, "ghost")

    async def test_rejected_pair_can_ask_again(self, db_session, pair):
        alice, bob = pair
        first = await send_request(db_session, alice.id, bob.id)
        await respond_to_request(db_session, first.id, REJECTED, responder_id=bob.id)

        second = await send_request(db_session, bob.id, alice.id)

        assert second.status == PENDING
        assert second.requester_id == bob.id
        assert await _count(db_session) == 1


class TestRespond:
    async def test_target_accepts(self, db_session, pair):
        alice, bob = pair
        friendship = await send_request(db_session, alice.id, bob.id)

        updated = await respond_to_request(db_session, friendship.id, ACCEPTED, responder_id=bob.id)
        assert updated.status == ACCEPTED

    async def test_requester_cannot_respond(self, db_session, pair):
        alice, bob = pair
        friendship = await send_request(db_session, alice.id, bob.id)

        with pytest.raises(ForbiddenError):
            await respond_to_request(db_session, friendship.id, ACCEPTED, responder_id=alice.id)
        assert friendship.status == PENDING

    async def test_second_response_is_conflict(self, db_session, pair):
        alice, bob = pair
        friendship = await send_request(db_session, alice.id, bob.id)
        await respond_to_request(db_session, friendship.id, REJECTED, responder_id=bob.id)

        with pytest.raises(ConflictError):
            await respond_to_request(db_session, friendship.id, ACCEPTED, responder_id=bob.id)

    async def test_invalid_status(self, db_session, pair):
        alice, bob = pair
        friendship = await send_request(db_session, alice.id, bob.id)
        with pytest.raises(ValidationError):
            await respond_to_request(db_session, friendship.id, PENDING, responder_id=bob.id)

    async def test_unknown_request(self, db_session):
        with pytest.raises(NotFoundError):
            await respond_to_request(db_session, "missing", ACCEPTED)


class TestListing:
    async def test_friends_are_symmetric(self, db_session, pair, make_user):
        alice, bob = pair
        carol = await make_user("carol")
        friendship = await send_request(db_session, alice.id, bob.id)
        await respond_to_request(db_session, friendship.id, ACCEPTED, responder_id=bob.id)
        await send_request(db_session, carol.id, alice.id)

        assert [u.id for u, _ in await list_friends(db_session, alice.id)] == [bob.id]
        assert [u.id for u, _ in await list_friends(db_session, bob.id)] == [alice.id]
        assert await list_friend_ids(db_session, carol.id) == []

    async def test_pending_only_for_target(self, db_session, pair):
        alice, bob = pair
        await send_request(db_session, alice.id, bob.id)

        pending = await list_pending_requests(db_session, bob.id)
        assert [(u.id, f.status) for u, f in pending] == [(alice.id, PENDING)]
        assert await list_pending_requests(db_session, alice.id) == []


class TestRemoveFriend:
    async def test_either_side_can_remove(self, db_session, pair):
        alice, bob = pair
        friendship = await send_request(db_session, alice.id, bob.id)
        await respond_to_request(db_session, friendship.id, ACCEPTED, responder_id=bob.id)

        assert await remove_friend(db_session, bob.id, alice.id) is True
        assert await get_pair(db_session, alice.id, bob.id) is None
        assert await list_friends(db_session, alice.id) == []

    async def test_noop_without_friendship(self, db_session, pair):
        alice, bob = pair
        assert await remove_friend(db_session, alice.id, bob.id) is False

    async def test_pending_request_is_not_removed(self, db_session, pair):
        alice, bob = pair
        await send_request(db_session, alice.id, bob.id)

        assert await remove_friend(db_session, alice.id, bob.id) is False
        assert await _count(db_session) == 1
