"""Pydantic schemas for friendship endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from batshit.auth.schemas import PublicUserResponse


class FriendRequestCreate(BaseModel):
    friend_id: str = Field(..., min_length=1, max_length=36)


class FriendRequestRespond(BaseModel):
    status: Literal["accepted", "rejected"]


class FriendshipResponse(BaseModel):
    id: str
    requester_id: str
    target_id: str
    status: str
    created_at: datetime
    updated_at: datetime


class FriendResponse(BaseModel):
    """Another user plus the friendship record linking them to the caller."""

    user: PublicUserResponse
    friendship: FriendshipResponse
