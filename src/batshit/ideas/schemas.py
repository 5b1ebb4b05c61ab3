"""Pydantic schemas for idea endpoints."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from batshit.auth.schemas import PublicUserResponse

IDEA_TEXT_MIN_LENGTH = 10
IDEA_TEXT_MAX_LENGTH = 1000


class IdeaCategory(str, Enum):
    TECHNOLOGY = "technology"
    BUSINESS = "business"
    LIFESTYLE = "lifestyle"
    SCIENCE = "science"
    ART = "art"
    SOCIAL = "social"
    OTHER = "other"


class FeedMode(str, Enum):
    FRESH = "fresh"
    TRENDING = "trending"
    HALL_OF_FAME = "hall-of-fame"


class CreateIdeaRequest(BaseModel):
    text: str = Field(..., min_length=IDEA_TEXT_MIN_LENGTH, max_length=IDEA_TEXT_MAX_LENGTH)
    category: IdeaCategory
    is_anonymous: bool = False


class IdeaResponse(BaseModel):
    id: str
    text: str
    category: str
    is_anonymous: bool
    average_rating: float
    rating_count: int
    created_at: datetime
    updated_at: datetime
    author: PublicUserResponse | None = None  # always None for anonymous ideas
