"""Server-side session store.

The browser holds only an opaque random ``sid`` in an HttpOnly cookie; the
``user_sessions`` row maps it to a user until ``expires_at``.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import delete, select

from batshit.config import get_settings
from batshit.db.models import UserSession

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; every stored value is UTC.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


async def create_session(db: AsyncSession, user_id: str) -> UserSession:
    """Open a new session for ``user_id``."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    session = UserSession(
        sid=secrets.token_urlsafe(32),
        user_id=user_id,
        created_at=now,
        expires_at=now + timedelta(days=settings.session_ttl_days),
    )
    db.add(session)
    await db.flush()
    return session


async def resolve_session(db: AsyncSession, sid: str) -> str | None:
    """Return the user id behind ``sid``, or None. Expired rows are removed."""
    result = await db.execute(select(UserSession).where(UserSession.sid == sid))
    session = result.scalar_one_or_none()
    if session is None:
        return None

    if _as_utc(session.expires_at) <= datetime.now(timezone.utc):
        await db.delete(session)
        await db.commit()
        logger.info("session_expired", user_id=session.user_id)
        return None
    return session.user_id


async def destroy_session(db: AsyncSession, sid: str) -> None:
    await db.execute(delete(UserSession).where(UserSession.sid == sid))
    await db.flush()
