"""Idea creation and feed selection.

Feeds are offset-paginated and restartable:

- ``fresh``: every idea, newest first.
- ``trending``: ideas created inside the sliding window (24h by default,
  measured from evaluation time), most-rated first.
- ``hall-of-fame``: ideas with at least ``hall_of_fame_min_ratings``
  ratings, highest average first.

Ties always fall back to ``id`` so pages never overlap. Authors of
anonymous ideas are stripped here, before anything leaves the module.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from batshit.config import get_settings
from batshit.db.models import Idea, User
from batshit.errors import NotFoundError, ValidationError
from batshit.ideas.schemas import IDEA_TEXT_MAX_LENGTH, IDEA_TEXT_MIN_LENGTH, FeedMode, IdeaCategory
from batshit.stats.service import record_idea_submitted

logger = structlog.get_logger()

_CATEGORIES = frozenset(c.value for c in IdeaCategory)


@dataclass(frozen=True)
class FeedItem:
    """An idea joined with its author's public record (None when anonymous)."""

    idea: Idea
    author: User | None


def parse_feed_mode(value: str | FeedMode | None) -> FeedMode:
    """Map a query-string filter to a FeedMode. Missing or unknown values mean ``fresh``."""
    if isinstance(value, FeedMode):
        return value
    try:
        return FeedMode(value)
    except ValueError:
        return FeedMode.FRESH


def _present(idea: Idea, author: User | None) -> FeedItem:
    return FeedItem(idea=idea, author=None if idea.is_anonymous else author)


def validate_idea_input(text: str, category: str) -> None:
    """Raise ValidationError for text outside 10-1000 characters or an unknown category."""
    if not isinstance(text, str) or not IDEA_TEXT_MIN_LENGTH <= len(text) <= IDEA_TEXT_MAX_LENGTH:
        msg = f"Idea text must be between {IDEA_TEXT_MIN_LENGTH} and {IDEA_TEXT_MAX_LENGTH} characters"
        raise ValidationError("text", msg)
    if category not in _CATEGORIES:
        msg = f"Unknown category '{category}'"
        raise ValidationError("category", msg)


async def create_idea(
    db: AsyncSession,
    author_id: str,
    text: str,
    category: str | IdeaCategory,
    is_anonymous: bool = False,
) -> Idea:
    """Insert a new idea (unrated) and count it toward the author's stats."""
    category_value = category.value if isinstance(category, IdeaCategory) else category
    validate_idea_input(text, category_value)

    now = datetime.now(timezone.utc)
    idea = Idea(
        author_id=author_id,
        text=text,
        category=category_value,
        is_anonymous=bool(is_anonymous),
        average_rating=0.0,
        rating_count=0,
        created_at=now,
        updated_at=now,
    )
    db.add(idea)
    await db.flush()

    await record_idea_submitted(db, author_id)
    logger.info("idea_created", idea_id=idea.id, author_id=author_id, category=category_value)
    return idea


async def get_idea(db: AsyncSession, idea_id: str) -> FeedItem:
    """Fetch one idea with its (possibly redacted) author.

    Raises:
        NotFoundError: If no idea has this id.
    """
    result = await db.execute(
        select(Idea, User).outerjoin(User, Idea.author_id == User.id).where(Idea.id == idea_id)
    )
    row = result.one_or_none()
    if row is None:
        msg = "Idea not found"
        raise NotFoundError(msg)
    return _present(row.Idea, row.User)


async def select_feed(
    db: AsyncSession,
    mode: str | FeedMode | None = None,
    limit: int | None = None,
    offset: int = 0,
    now: datetime | None = None,
) -> list[FeedItem]:
    """Return one page of ideas for ``mode``.

    Args:
        db: Database session.
        mode: ``fresh``, ``trending`` or ``hall-of-fame``; anything else is ``fresh``.
        limit: Page size, capped at ``feed_max_limit``.
        offset: Number of ideas to skip.
        now: Evaluation time for the trending window (defaults to the current time).
    """
    settings = get_settings()
    feed_mode = parse_feed_mode(mode)
    limit = settings.feed_default_limit if limit is None else limit
    if limit < 1:
        raise ValidationError("limit", "limit must be at least 1")
    if offset < 0:
        raise ValidationError("offset", "offset must not be negative")
    limit = min(limit, settings.feed_max_limit)

    query = select(Idea, User).outerjoin(User, Idea.author_id == User.id)

    if feed_mode is FeedMode.TRENDING:
        cutoff = (now or datetime.now(timezone.utc)) - timedelta(hours=settings.trending_window_hours)
        query = query.where(Idea.created_at > cutoff).order_by(
            Idea.rating_count.desc(), Idea.created_at.desc(), Idea.id.desc()
        )
    elif feed_mode is FeedMode.HALL_OF_FAME:
        query = query.where(Idea.rating_count >= settings.hall_of_fame_min_ratings).order_by(
            Idea.average_rating.desc(), Idea.rating_count.desc(), Idea.id.desc()
        )
    else:
        query = query.order_by(Idea.created_at.desc(), Idea.id.desc())

    result = await db.execute(query.offset(offset).limit(limit))
    return [_present(row.Idea, row.User) for row in result]
