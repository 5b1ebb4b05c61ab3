"""Rebuild every cached projection from the source tables.

``Idea.average_rating``/``rating_count`` and the ``user_stats`` counters are
caches. These routines recompute them from ``ratings`` and ``ideas`` and
report how many rows had drifted.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from batshit.db.models import Idea, Rating, User, UserStats
from batshit.stats.service import get_or_create_stats, sync_derived_fields

logger = logging.getLogger(__name__)


def _drifted(current: float, expected: float) -> bool:
    return not math.isclose(current, expected, rel_tol=1e-9, abs_tol=1e-9)


async def rebuild_idea_aggregates(db: AsyncSession) -> int:
    """Recompute average/count for every idea. Returns the number of ideas corrected."""
    aggregates = {
        idea_id: (float(avg or 0.0), int(count or 0))
        for idea_id, avg, count in (
            await db.execute(
                select(Rating.idea_id, func.avg(Rating.score), func.count(Rating.id)).group_by(Rating.idea_id)
            )
        ).all()
    }

    fixed = 0
    now = datetime.now(timezone.utc)
    for idea in (await db.execute(select(Idea))).scalars():
        average, count = aggregates.get(idea.id, (0.0, 0))
        if idea.rating_count != count or _drifted(idea.average_rating, average):
            idea.average_rating = average
            idea.rating_count = count
            idea.updated_at = now
            fixed += 1

    await db.flush()
    logger.info("Rebuilt idea aggregates: %d corrected", fixed)
    return fixed


async def _counts_by(db: AsyncSession, column, id_column) -> dict[str, int]:  # noqa: ANN001
    rows = (await db.execute(select(column, func.count(id_column)).group_by(column))).all()
    return {key: int(count) for key, count in rows}


async def rebuild_user_stats(db: AsyncSession) -> int:
    """Recompute every user's counters and received aggregates. Returns rows corrected."""
    ideas_by_author = await _counts_by(db, Idea.author_id, Idea.id)
    ratings_by_user = await _counts_by(db, Rating.user_id, Rating.id)
    received = {
        author_id: (float(avg or 0.0), int(count or 0))
        for author_id, avg, count in (
            await db.execute(
                select(Idea.author_id, func.avg(Rating.score), func.count(Rating.id))
                .join(Idea, Rating.idea_id == Idea.id)
                .group_by(Idea.author_id)
            )
        ).all()
    }

    fixed = 0
    now = datetime.now(timezone.utc)
    for user_id in (await db.execute(select(User.id))).scalars().all():
        stats: UserStats = await get_or_create_stats(db, user_id)
        avg_received, total_received = received.get(user_id, (0.0, 0))
        expected = (ideas_by_author.get(user_id, 0), ratings_by_user.get(user_id, 0), total_received)
        before = (stats.ideas_submitted, stats.ratings_given, stats.total_ratings_received)
        before_achievements = list(stats.achievements or [])
        before_score = stats.batshit_score

        stats.ideas_submitted, stats.ratings_given, stats.total_ratings_received = expected
        drifted = before != expected or _drifted(stats.average_rating_received, avg_received)
        stats.average_rating_received = avg_received
        sync_derived_fields(stats)
        if drifted or stats.achievements != before_achievements or stats.batshit_score != before_score:
            stats.updated_at = now
            fixed += 1

    await db.flush()
    logger.info("Rebuilt user stats: %d corrected", fixed)
    return fixed
