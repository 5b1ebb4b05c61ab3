"""User directory queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import or_, select

from batshit.config import get_settings
from batshit.db.models import User

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


async def search_users(db: AsyncSession, query: str, current_user_id: str) -> list[User]:
    """
    Case-insensitive substring match on username, names and email.

    Queries shorter than ``user_search_min_length`` return nothing; the
    caller is never included; at most ``user_search_limit`` users come back.
    """
    settings = get_settings()
    needle = (query or "").strip().lower()
    if len(needle) < settings.user_search_min_length:
        return []

    columns = (User.username, User.first_name, User.last_name, User.email)
    result = await db.execute(
        select(User)
        .where(
            User.id != current_user_id,
            or_(*(col.icontains(needle, autoescape=True) for col in columns)),
        )
        .order_by(User.username.asc())
        .limit(settings.user_search_limit)
    )
    return list(result.scalars().all())
