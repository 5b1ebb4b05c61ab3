"""Profile and stats endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from batshit.auth.dependencies import get_current_user
from batshit.auth.schemas import UserResponse
from batshit.database import get_session
from batshit.db.models import User, UserStats
from batshit.stats.achievements import ACHIEVEMENTS, rating_label
from batshit.stats.schemas import AchievementResponse, ProfileResponse, StatsResponse
from batshit.stats.service import get_profile

router = APIRouter(prefix="/api/v1", tags=["Stats"])


def _stats_response(stats: UserStats) -> StatsResponse:
    unlocked = set(stats.achievements or [])
    return StatsResponse(
        user_id=stats.user_id,
        ideas_submitted=stats.ideas_submitted,
        ratings_given=stats.ratings_given,
        average_rating_received=stats.average_rating_received,
        total_ratings_received=stats.total_ratings_received,
        batshit_score=stats.batshit_score,
        rating_label=rating_label(stats.average_rating_received),
        achievements=[
            AchievementResponse(
                slug=a.slug,
                name=a.name,
                description=a.description,
                unlocked=a.slug in unlocked,
            )
            for a in ACHIEVEMENTS
        ],
    )


@router.get("/profile", response_model=ProfileResponse)
async def get_own_profile(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> ProfileResponse:
    """The signed-in user's account plus freshly evaluated stats."""
    user, stats = await get_profile(db, user.id)
    await db.commit()
    return ProfileResponse(user=UserResponse.from_user(user), stats=_stats_response(stats))


@router.get("/users/{user_id}/stats", response_model=StatsResponse)
async def get_user_stats(
    user_id: str,
    db: AsyncSession = Depends(get_session),
) -> StatsResponse:
    """Public stats for any existing user."""
    _user, stats = await get_profile(db, user_id)
    await db.commit()
    return _stats_response(stats)
