"""Rating endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from batshit.auth.dependencies import get_current_user
from batshit.database import get_session
from batshit.db.models import Rating, User
from batshit.ratings.schemas import (
    CreateRatingRequest,
    RatingCheckResponse,
    RatingComparisonResponse,
    RatingResponse,
)
from batshit.ratings.service import get_rating_comparison, get_user_rating_for_idea, record_rating

router = APIRouter(prefix="/api/v1/ratings", tags=["Ratings"])


def _rating_response(rating: Rating) -> RatingResponse:
    return RatingResponse(
        id=rating.id,
        idea_id=rating.idea_id,
        user_id=rating.user_id,
        rating=rating.score,
        created_at=rating.created_at,
    )


@router.post("", response_model=RatingResponse, status_code=201)
async def rate_idea(
    body: CreateRatingRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> RatingResponse:
    """Rate an idea 1-10. Each user rates each idea at most once."""
    rating = await record_rating(db, user.id, body.idea_id, body.rating)
    await db.commit()
    return _rating_response(rating)


@router.get("/comparison", response_model=RatingComparisonResponse)
async def rating_comparison(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> RatingComparisonResponse:
    """How the signed-in user's scores compare with friends and everyone."""
    return RatingComparisonResponse(**await get_rating_comparison(db, user.id))


@router.get("/check/{idea_id}", response_model=RatingCheckResponse)
async def check_rating(
    idea_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> RatingCheckResponse:
    """Whether the signed-in user already rated this idea, and with what score."""
    rating = await get_user_rating_for_idea(db, user.id, idea_id)
    return RatingCheckResponse(has_rated=rating is not None, rating=rating.score if rating else None)
