"""Pydantic schemas for profile and stats endpoints."""

from __future__ import annotations

from pydantic import BaseModel

from batshit.auth.schemas import UserResponse


class AchievementResponse(BaseModel):
    slug: str
    name: str
    description: str
    unlocked: bool


class StatsResponse(BaseModel):
    user_id: str
    ideas_submitted: int
    ratings_given: int
    average_rating_received: float
    total_ratings_received: int
    batshit_score: int
    rating_label: str
    achievements: list[AchievementResponse]


class ProfileResponse(BaseModel):
    user: UserResponse
    stats: StatsResponse
