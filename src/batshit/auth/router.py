"""Authentication router: /api/v1/auth/* endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from batshit.auth.dependencies import get_current_user
from batshit.auth.schemas import LoginRequest, MessageResponse, RegisterRequest, UserResponse
from batshit.auth.service import authenticate_user, register_user
from batshit.auth.sessions import create_session, destroy_session
from batshit.config import get_settings
from batshit.database import get_session
from batshit.db.models import User

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


def _set_session_cookie(response: Response, sid: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=sid,
        max_age=settings.session_ttl_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(
    body: RegisterRequest,
    response: Response,
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Create an account, initialize its stats, and sign it in."""
    user = await register_user(
        db,
        username=body.username,
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    session = await create_session(db, user.id)
    await db.commit()
    _set_session_cookie(response, session.sid)
    return UserResponse.from_user(user)


@router.post("/login", response_model=UserResponse)
async def login(
    body: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Sign in with username + password."""
    user = await authenticate_user(db, body.username, body.password)
    session = await create_session(db, user.id)
    await db.commit()
    _set_session_cookie(response, session.sid)
    return UserResponse.from_user(user)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_session),
) -> MessageResponse:
    """Destroy the server-side session and clear the cookie."""
    settings = get_settings()
    sid = request.cookies.get(settings.session_cookie_name)
    if sid:
        await destroy_session(db, sid)
        await db.commit()
    response.delete_cookie(settings.session_cookie_name)
    return MessageResponse(detail="Logged out successfully")


@router.get("/user", response_model=UserResponse)
async def current_user(user: User = Depends(get_current_user)) -> UserResponse:
    """Return the signed-in user."""
    return UserResponse.from_user(user)
