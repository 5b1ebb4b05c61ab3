"""User directory endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from batshit.auth.dependencies import get_current_user
from batshit.auth.schemas import PublicUserResponse
from batshit.database import get_session
from batshit.db.models import User
from batshit.users.service import search_users

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.get("/search", response_model=list[PublicUserResponse])
async def search(
    q: str = Query("", max_length=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> list[PublicUserResponse]:
    """Find other users to befriend."""
    return [PublicUserResponse.from_user(u) for u in await search_users(db, q, user.id)]
