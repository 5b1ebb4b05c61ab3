"""Idea endpoints: feeds, submission, detail."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from batshit.auth.dependencies import get_current_user
from batshit.auth.schemas import PublicUserResponse
from batshit.database import get_session
from batshit.db.models import Idea, User
from batshit.ideas.schemas import CreateIdeaRequest, IdeaResponse
from batshit.ideas.service import FeedItem, create_idea, get_idea, select_feed

router = APIRouter(prefix="/api/v1/ideas", tags=["Ideas"])


def _idea_response(idea: Idea, author: User | None) -> IdeaResponse:
    return IdeaResponse(
        id=idea.id,
        text=idea.text,
        category=idea.category,
        is_anonymous=idea.is_anonymous,
        average_rating=idea.average_rating,
        rating_count=idea.rating_count,
        created_at=idea.created_at,
        updated_at=idea.updated_at,
        author=PublicUserResponse.from_user(author) if author is not None else None,
    )


def _item_response(item: FeedItem) -> IdeaResponse:
    return _idea_response(item.idea, item.author)


@router.get("", response_model=list[IdeaResponse])
async def list_ideas(
    filter: str | None = Query(None, description="fresh | trending | hall-of-fame"),  # noqa: A002
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
) -> list[IdeaResponse]:
    """One page of the requested feed (public)."""
    items = await select_feed(db, filter, limit=limit, offset=offset)
    return [_item_response(item) for item in items]


@router.post("", response_model=IdeaResponse, status_code=201)
async def submit_idea(
    body: CreateIdeaRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> IdeaResponse:
    """Submit a new idea as the signed-in user."""
    idea = await create_idea(db, user.id, body.text, body.category, body.is_anonymous)
    await db.commit()
    return _idea_response(idea, None if idea.is_anonymous else user)


@router.get("/{idea_id}", response_model=IdeaResponse)
async def get_idea_endpoint(
    idea_id: str,
    db: AsyncSession = Depends(get_session),
) -> IdeaResponse:
    """Single idea, with the author hidden when anonymous."""
    return _item_response(await get_idea(db, idea_id))
