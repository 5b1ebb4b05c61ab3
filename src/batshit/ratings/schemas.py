"""Pydantic schemas for rating endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class CreateRatingRequest(BaseModel):
    idea_id: str = Field(..., min_length=1, max_length=36)
    rating: int = Field(..., ge=1, le=10, strict=True)


class RatingResponse(BaseModel):
    id: str
    idea_id: str
    user_id: str
    rating: int
    created_at: datetime


class RatingCheckResponse(BaseModel):
    has_rated: bool
    rating: int | None = None


class PersonalityResponse(BaseModel):
    label: str
    description: str


class CategoryComparison(BaseModel):
    category: str
    user_average: float
    friends_average: float
    global_average: float


class RatingComparisonResponse(BaseModel):
    user_average: float
    friends_average: float
    global_average: float
    personality: PersonalityResponse
    category_breakdown: list[CategoryComparison] = []
