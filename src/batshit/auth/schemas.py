"""Request/response schemas for authentication and user payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from batshit.db.models import User

USERNAME_PATTERN = r"^[A-Za-z0-9_]+$"


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Create an account and open a session."""

    username: str = Field(..., min_length=3, max_length=32, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    first_name: str | None = Field(None, max_length=64)
    last_name: str | None = Field(None, max_length=64)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=32)
    password: str = Field(..., min_length=1, max_length=128)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class PublicUserResponse(BaseModel):
    """Fields anyone may see: used for idea authors, friends, search hits."""

    id: str
    username: str
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None

    @classmethod
    def from_user(cls, user: User) -> PublicUserResponse:
        return cls(
            id=user.id,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            profile_image_url=user.profile_image_url,
        )


class UserResponse(PublicUserResponse):
    """The signed-in user's own account."""

    email: str
    created_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> UserResponse:
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            profile_image_url=user.profile_image_url,
            created_at=user.created_at,
        )


class MessageResponse(BaseModel):
    detail: str
