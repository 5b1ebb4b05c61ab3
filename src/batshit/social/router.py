"""Friendship endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from batshit.auth.dependencies import get_current_user
from batshit.auth.schemas import PublicUserResponse
from batshit.database import get_session
from batshit.db.models import Friendship, User
from batshit.social.friendship_service import (
    list_friends,
    list_pending_requests,
    remove_friend,
    respond_to_request,
    send_request,
)
from batshit.social.schemas import (
    FriendRequestCreate,
    FriendRequestRespond,
    FriendResponse,
    FriendshipResponse,
)

router = APIRouter(prefix="/api/v1/friends", tags=["Social"])


def _friendship_response(friendship: Friendship) -> FriendshipResponse:
    return FriendshipResponse(
        id=friendship.id,
        requester_id=friendship.requester_id,
        target_id=friendship.target_id,
        status=friendship.status,
        created_at=friendship.created_at,
        updated_at=friendship.updated_at,
    )


def _friend_responses(rows: list[tuple[User, Friendship]]) -> list[FriendResponse]:
    return [
        FriendResponse(user=PublicUserResponse.from_user(user), friendship=_friendship_response(friendship))
        for user, friendship in rows
    ]


@router.post("/request", response_model=FriendshipResponse, status_code=201)
async def send_friend_request(
    body: FriendRequestCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> FriendshipResponse:
    """Ask another user to be friends."""
    friendship = await send_request(db, user.id, body.friend_id)
    await db.commit()
    return _friendship_response(friendship)


@router.put("/requests/{friendship_id}", response_model=FriendshipResponse)
async def respond_friend_request(
    friendship_id: str,
    body: FriendRequestRespond,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> FriendshipResponse:
    """Accept or reject a request addressed to the signed-in user."""
    friendship = await respond_to_request(db, friendship_id, body.status, responder_id=user.id)
    await db.commit()
    return _friendship_response(friendship)


@router.delete("/{friend_id}", status_code=204)
async def unfriend(
    friend_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> Response:
    """Remove an accepted friend. No-op when there is no such friendship."""
    await remove_friend(db, user.id, friend_id)
    await db.commit()
    return Response(status_code=204)


@router.get("", response_model=list[FriendResponse])
async def get_friends(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> list[FriendResponse]:
    """Accepted friends of the signed-in user."""
    return _friend_responses(await list_friends(db, user.id))


@router.get("/requests", response_model=list[FriendResponse])
async def get_pending_requests(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> list[FriendResponse]:
    """Pending requests the signed-in user has received."""
    return _friend_responses(await list_pending_requests(db, user.id))
