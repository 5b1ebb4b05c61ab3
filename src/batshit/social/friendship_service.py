"""Friendship state machine.

Rules:
- A request starts ``pending`` and moves once to ``accepted`` or ``rejected``.
- At most one record per unordered pair (``pair_key``), whoever asked first.
- A ``rejected`` record does not block a new request; it is dropped first.
- Only the request's target may respond.
- Accepted friendships are removed by deleting the record (either party).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from batshit.db.models import Friendship, User
from batshit.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

PENDING = "pending"
ACCEPTED = "accepted"
REJECTED = "rejected"
RESPONSES = frozenset({ACCEPTED, REJECTED})


def pair_key(user_a: str, user_b: str) -> str:
    """Order-independent key for the pair {user_a, user_b}."""
    first, second = sorted((user_a, user_b))
    return f"{first}:{second}"


async def get_friendship(db: AsyncSession, friendship_id: str) -> Friendship | None:
    result = await db.execute(select(Friendship).where(Friendship.id == friendship_id))
    return result.scalar_one_or_none()


async def get_pair(db: AsyncSession, user_a: str, user_b: str) -> Friendship | None:
    """The record between two users in either direction, if any."""
    result = await db.execute(select(Friendship).where(Friendship.pair_key == pair_key(user_a, user_b)))
    return result.scalar_one_or_none()


async def send_request(db: AsyncSession, requester_id: str, target_id: str) -> Friendship:
    """Create a pending request from ``requester_id`` to ``target_id``."""
    if requester_id == target_id:
        raise ValidationError("friend_id", "Cannot send friend request to yourself")

    target = await db.execute(select(User.id).where(User.id == target_id))
    if target.scalar_one_or_none() is None:
        msg = "User not found"
        raise NotFoundError(msg)

    existing = await get_pair(db, requester_id, target_id)
    if existing is not None:
        if existing.status != REJECTED:
            msg = "Friend request already exists or pending"
            raise ConflictError(msg)
        await db.delete(existing)
        await db.flush()

    now = datetime.now(timezone.utc)
    friendship = Friendship(
        requester_id=requester_id,
        target_id=target_id,
        pair_key=pair_key(requester_id, target_id),
        status=PENDING,
        created_at=now,
        updated_at=now,
    )
    db.add(friendship)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        msg = "Friend request already exists or pending"
        raise ConflictError(msg) from e

    logger.info("Friend request %s: %s -> %s", friendship.id, requester_id, target_id)
    return friendship


async def respond_to_request(
    db: AsyncSession,
    friendship_id: str,
    status: str,
    responder_id: str | None = None,
) -> Friendship:
    """Accept or reject a pending request.

    ``responder_id``, when given, must be the request's target.
    """
    if status not in RESPONSES:
        raise ValidationError("status", "Invalid status. Must be 'accepted' or 'rejected'")

    friendship = await get_friendship(db, friendship_id)
    if friendship is None:
        msg = "Friend request not found"
        raise NotFoundError(msg)

    if responder_id is not None and friendship.target_id != responder_id:
        msg = "Only the recipient can respond to this friend request"
        raise ForbiddenError(msg)

    if friendship.status != PENDING:
        msg = f"Friend request already {friendship.status}"
        raise ConflictError(msg)

    friendship.status = status
    friendship.updated_at = datetime.now(timezone.utc)
    await db.flush()
    logger.info("Friend request %s %s", friendship_id, status)
    return friendship


async def remove_friend(db: AsyncSession, user_id: str, friend_id: str) -> bool:
    """Delete the accepted friendship between two users. Returns False if there was none."""
    result = await db.execute(
        delete(Friendship).where(
            Friendship.pair_key == pair_key(user_id, friend_id),
            Friendship.status == ACCEPTED,
        )
    )
    await db.flush()
    removed = (result.rowcount or 0) > 0
    if removed:
        logger.info("Friendship removed: %s <-> %s", user_id, friend_id)
    return removed


async def list_friends(db: AsyncSession, user_id: str) -> list[tuple[User, Friendship]]:
    """Accepted friendships in either direction, with the other party's user row."""
    result = await db.execute(
        select(User, Friendship)
        .join(
            Friendship,
            or_(
                and_(Friendship.requester_id == user_id, Friendship.target_id == User.id),
                and_(Friendship.target_id == user_id, Friendship.requester_id == User.id),
            ),
        )
        .where(Friendship.status == ACCEPTED)
        .order_by(User.username.asc())
    )
    return [(row.User, row.Friendship) for row in result]


async def list_friend_ids(db: AsyncSession, user_id: str) -> list[str]:
    return [user.id for user, _ in await list_friends(db, user_id)]


async def list_pending_requests(db: AsyncSession, user_id: str) -> list[tuple[User, Friendship]]:
    """Pending requests addressed to ``user_id``, with each requester's user row."""
    result = await db.execute(
        select(User, Friendship)
        .join(Friendship, Friendship.requester_id == User.id)
        .where(Friendship.target_id == user_id, Friendship.status == PENDING)
        .order_by(Friendship.created_at.asc())
    )
    return [(row.User, row.Friendship) for row in result]
