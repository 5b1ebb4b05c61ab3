"""
Account business logic: registration, credential checks, lookups.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from batshit.auth.password import (
    PasswordStrengthError,
    hash_password,
    needs_rehash,
    validate_password_strength,
    verify_password,
)
from batshit.config import get_settings
from batshit.db.models import User
from batshit.errors import ConflictError, UnauthorizedError, ValidationError
from batshit.stats.service import get_or_create_stats

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# User queries
# ---------------------------------------------------------------------------


async def get_user_by_id(db: AsyncSession, user_id: str) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    """Fetch a user by username (case-insensitive)."""
    result = await db.execute(select(User).where(func.lower(User.username) == username.lower()))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Fetch a user by email (case-insensitive)."""
    result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


async def register_user(
    db: AsyncSession,
    username: str,
    email: str,
    password: str,
    first_name: str | None = None,
    last_name: str | None = None,
) -> User:
    """
    Create an account and its (all-zero) stats row.

    Raises:
        ValidationError: If the password is too weak.
        ConflictError: If the username or email is already registered.
    """
    settings = get_settings()
    try:
        validate_password_strength(
            password,
            min_length=settings.password_min_length,
            max_length=settings.password_max_length,
        )
    except PasswordStrengthError as e:
        raise ValidationError("password", str(e)) from e

    if await get_user_by_username(db, username) is not None:
        msg = "Username already taken"
        raise ConflictError(msg)
    if await get_user_by_email(db, email) is not None:
        msg = "Email already registered"
        raise ConflictError(msg)

    now = datetime.now(timezone.utc)
    user = User(
        username=username,
        email=email.lower().strip(),
        password_hash=hash_password(password),
        first_name=first_name or None,
        last_name=last_name or None,
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        msg = "Username or email already registered"
        raise ConflictError(msg) from e

    await get_or_create_stats(db, user.id)
    logger.info("user_registered", user_id=user.id, username=username)
    return user


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------


async def authenticate_user(db: AsyncSession, username: str, password: str) -> User:
    """
    Check username + password.

    Raises:
        UnauthorizedError: Unknown username or wrong password (same message for both).
    """
    user = await get_user_by_username(db, username)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("login_failed", username=username)
        msg = "Invalid username or password"
        raise UnauthorizedError(msg)

    if needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        user.updated_at = datetime.now(timezone.utc)
        await db.flush()

    logger.info("login_succeeded", user_id=user.id)
    return user
