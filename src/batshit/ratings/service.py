"""Rating aggregation.

``record_rating`` persists a score, then recomputes the idea's
``average_rating``/``rating_count`` from the complete rating set. It never
applies a delta, so a race between two raters can only leave the cache
consistent with some set of committed ratings, and the next write or a
reconcile pass brings it fully up to date.
"""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from batshit.db.models import Idea, Rating
from batshit.errors import ConflictError, NotFoundError, ValidationError
from batshit.social.friendship_service import list_friend_ids
from batshit.stats.achievements import rating_personality
from batshit.stats.service import record_rating_given, refresh_received_aggregates

logger = structlog.get_logger()

MIN_SCORE = 1
MAX_SCORE = 10


def validate_score(score: object) -> int:
    """Return ``score`` if it is an integer in 1-10, else raise ValidationError."""
    if isinstance(score, bool) or not isinstance(score, int) or not MIN_SCORE <= score <= MAX_SCORE:
        msg = f"Rating must be an integer between {MIN_SCORE} and {MAX_SCORE}"
        raise ValidationError("rating", msg)
    return score


async def get_user_rating_for_idea(db: AsyncSession, user_id: str, idea_id: str) -> Rating | None:
    result = await db.execute(select(Rating).where(Rating.user_id == user_id, Rating.idea_id == idea_id))
    return result.scalar_one_or_none()


async def recompute_idea_aggregate(db: AsyncSession, idea: Idea) -> Idea:
    """Set ``average_rating`` and ``rating_count`` from every rating of ``idea``."""
    average, count = (
        await db.execute(select(func.avg(Rating.score), func.count(Rating.id)).where(Rating.idea_id == idea.id))
    ).one()
    idea.average_rating = float(average or 0.0)
    idea.rating_count = int(count or 0)
    idea.updated_at = datetime.now(timezone.utc)
    await db.flush()
    return idea


async def record_rating(db: AsyncSession, user_id: str, idea_id: str, score: int) -> Rating:
    """Record ``user_id``'s score for ``idea_id`` and refresh every cache it feeds.

    Raises:
        ValidationError: Score is not an integer in 1-10.
        NotFoundError: The idea does not exist.
        ConflictError: The user already rated this idea. No aggregate is touched.
    """
    score = validate_score(score)

    result = await db.execute(select(Idea).where(Idea.id == idea_id))
    idea = result.scalar_one_or_none()
    if idea is None:
        msg = "Idea not found"
        raise NotFoundError(msg)

    if await get_user_rating_for_idea(db, user_id, idea_id) is not None:
        msg = "You have already rated this idea"
        raise ConflictError(msg)

    rating = Rating(
        idea_id=idea_id,
        user_id=user_id,
        score=score,
        created_at=datetime.now(timezone.utc),
    )
    db.add(rating)
    try:
        await db.flush()
    except IntegrityError as e:
        # Lost the race against a concurrent rating by the same user.
        await db.rollback()
        msg = "You have already rated this idea"
        raise ConflictError(msg) from e

    await recompute_idea_aggregate(db, idea)
    await record_rating_given(db, user_id)
    await refresh_received_aggregates(db, idea.author_id)

    logger.info(
        "rating_recorded",
        idea_id=idea_id,
        user_id=user_id,
        score=score,
        average_rating=idea.average_rating,
        rating_count=idea.rating_count,
    )
    return rating


# ---------------------------------------------------------------------------
# Rating comparison
# ---------------------------------------------------------------------------


async def _averages_by_category(db: AsyncSession, user_ids: list[str] | None) -> tuple[float, dict[str, float]]:
    """Mean score overall and per idea category, over ratings given by ``user_ids`` (None = everyone)."""
    if user_ids is not None and not user_ids:
        return 0.0, {}

    overall_query = select(func.avg(Rating.score))
    category_query = (
        select(Idea.category, func.avg(Rating.score))
        .join(Idea, Rating.idea_id == Idea.id)
        .group_by(Idea.category)
    )
    if user_ids is not None:
        overall_query = overall_query.where(Rating.user_id.in_(user_ids))
        category_query = category_query.where(Rating.user_id.in_(user_ids))

    overall = (await db.execute(overall_query)).scalar_one_or_none()
    per_category = {category: float(avg or 0.0) for category, avg in (await db.execute(category_query)).all()}
    return float(overall or 0.0), per_category


async def get_rating_comparison(db: AsyncSession, user_id: str) -> dict:
    """Compare the user's scoring with their friends' and everyone's, overall and per category."""
    friend_ids = await list_friend_ids(db, user_id)

    user_avg, user_by_cat = await _averages_by_category(db, [user_id])
    friends_avg, friends_by_cat = await _averages_by_category(db, friend_ids)
    global_avg, global_by_cat = await _averages_by_category(db, None)

    categories = sorted(set(user_by_cat) | set(friends_by_cat) | set(global_by_cat))
    label, description = rating_personality(user_avg, global_avg)

    return {
        "user_average": user_avg,
        "friends_average": friends_avg,
        "global_average": global_avg,
        "personality": {"label": label, "description": description},
        "category_breakdown": [
            {
                "category": category,
                "user_average": user_by_cat.get(category, 0.0),
                "friends_average": friends_by_cat.get(category, 0.0),
                "global_average": global_by_cat.get(category, 0.0),
            }
            for category in categories
        ],
    }
