"""FastAPI authentication dependencies (cookie session -> User)."""

from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from batshit.auth.service import get_user_by_id
from batshit.auth.sessions import resolve_session
from batshit.config import get_settings
from batshit.database import get_session
from batshit.db.models import User
from batshit.errors import UnauthorizedError


async def get_optional_user(
    request: Request,
    db: AsyncSession = Depends(get_session),
) -> User | None:
    """Return the session's user, or None for anonymous requests."""
    sid = request.cookies.get(get_settings().session_cookie_name)
    if not sid:
        return None
    user_id = await resolve_session(db, sid)
    if user_id is None:
        return None
    return await get_user_by_id(db, user_id)


async def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    """Require an authenticated session; raises 401 otherwise."""
    if user is None:
        msg = "Unauthorized"
        raise UnauthorizedError(msg)
    return user
