"""Per-user stats: lazy creation, counter updates, received-rating aggregates."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from batshit.db.models import Idea, Rating, User, UserStats
from batshit.errors import NotFoundError
from batshit.stats.achievements import compute_batshit_score, evaluate_achievements

logger = logging.getLogger(__name__)


async def get_or_create_stats(db: AsyncSession, user_id: str) -> UserStats:
    """Get the stats row for a user, creating an all-zero one on first reference."""
    result = await db.execute(select(UserStats).where(UserStats.user_id == user_id))
    stats = result.scalar_one_or_none()
    if stats is None:
        stats = UserStats(
            user_id=user_id,
            ideas_submitted=0,
            ratings_given=0,
            average_rating_received=0.0,
            total_ratings_received=0,
            batshit_score=0,
            achievements=[],
            updated_at=datetime.now(timezone.utc),
        )
        db.add(stats)
        await db.flush()
    return stats


def sync_derived_fields(stats: UserStats) -> list[str]:
    """Recompute the batshit score and achievement mirror from the counters.

    Returns slugs unlocked by this call.
    """
    previous = set(stats.achievements or [])
    unlocked = evaluate_achievements(stats)
    stats.achievements = unlocked
    stats.batshit_score = compute_batshit_score(stats.average_rating_received, stats.total_ratings_received)
    return [slug for slug in unlocked if slug not in previous]


async def _increment(db: AsyncSession, user_id: str, column: str) -> UserStats:
    stats = await get_or_create_stats(db, user_id)
    counter = getattr(UserStats, column)
    await db.execute(
        update(UserStats)
        .where(UserStats.user_id == user_id)
        .values({column: counter + 1, "updated_at": datetime.now(timezone.utc)})
    )
    await db.refresh(stats)

    newly = sync_derived_fields(stats)
    if newly:
        logger.info("Achievements unlocked for user %s: %s", user_id, newly)
    await db.flush()
    return stats


async def record_idea_submitted(db: AsyncSession, user_id: str) -> UserStats:
    """Bump ``ideas_submitted`` by one (atomic SQL increment)."""
    return await _increment(db, user_id, "ideas_submitted")


async def record_rating_given(db: AsyncSession, user_id: str) -> UserStats:
    """Bump ``ratings_given`` by one (atomic SQL increment)."""
    return await _increment(db, user_id, "ratings_given")


async def refresh_received_aggregates(db: AsyncSession, user_id: str) -> UserStats:
    """Recompute the mean and count of every rating on ideas authored by ``user_id``.

    Reads the full rating set each time, so concurrent writers converge on a
    value consistent with the ratings that were committed.
    """
    row = (
        await db.execute(
            select(func.avg(Rating.score), func.count(Rating.id))
            .join(Idea, Rating.idea_id == Idea.id)
            .where(Idea.author_id == user_id)
        )
    ).one()
    average, count = row

    stats = await get_or_create_stats(db, user_id)
    stats.average_rating_received = float(average or 0.0)
    stats.total_ratings_received = int(count or 0)
    stats.updated_at = datetime.now(timezone.utc)
    newly = sync_derived_fields(stats)
    if newly:
        logger.info("Achievements unlocked for user %s: %s", user_id, newly)
    await db.flush()
    return stats


async def get_profile(db: AsyncSession, user_id: str) -> tuple[User, UserStats]:
    """Return the user and up-to-date stats.

    Raises:
        NotFoundError: If the user does not exist.
    """
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        msg = "User not found"
        raise NotFoundError(msg)

    stats = await refresh_received_aggregates(db, user_id)
    return user, stats
