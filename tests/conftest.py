"""Shared test fixtures.

Each test runs against its own SQLite file with the schema created from the
ORM metadata. Redis is never initialized, so the rate limiter stays out of
the way.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import AsyncExitStack
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from batshit.config import get_settings
from batshit.database import close_db, get_engine, get_session_factory, init_db
from batshit.db.base import Base
from batshit.db.models import Idea, User
from batshit.ideas.service import create_idea
from batshit.main import create_app

DEFAULT_PASSWORD = "password123"


@pytest_asyncio.fixture
async def database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[str, None]:
    """Fresh database file with every table created."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'batshit.db'}"
    monkeypatch.setenv("BATSHIT_DATABASE_URL", url)
    get_settings.cache_clear()

    await init_db(url)
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield url

    await close_db()
    get_settings.cache_clear()


@pytest.fixture
def app(database: str) -> FastAPI:
    return create_app()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the app (no lifespan; the database fixture owns the engine)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def make_client(app: FastAPI) -> AsyncGenerator[Callable[[], Awaitable[AsyncClient]], None]:
    """Factory for extra clients, one cookie jar per simulated user."""
    async with AsyncExitStack() as stack:

        async def _make() -> AsyncClient:
            return await stack.enter_async_context(
                AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
            )

        yield _make


@pytest_asyncio.fixture
async def db_session(database: str) -> AsyncGenerator[AsyncSession, None]:
    """Direct database session for service-level tests and assertions."""
    async with get_session_factory()() as session:
        yield session


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Insert a user row directly (no password hashing)."""

    async def _make(username: str, **fields: Any) -> User:
        now = datetime.now(timezone.utc)
        fields.setdefault("email", f"{username}@example.com")
        user = User(
            username=username,
            password_hash="unusable",
            created_at=now,
            updated_at=now,
            **fields,
        )
        db_session.add(user)
        await db_session.flush()
        return user

    return _make


@pytest.fixture
def make_idea(db_session: AsyncSession) -> Callable[..., Awaitable[Idea]]:
    """Submit an idea through the service, optionally pinning ``created_at``."""

    async def _make(
        author: User,
        text: str = "Replace every elevator with a fireman's pole",
        category: str = "lifestyle",
        is_anonymous: bool = False,
        created_at: datetime | None = None,
    ) -> Idea:
        idea = await create_idea(db_session, author.id, text, category, is_anonymous)
        if created_at is not None:
            idea.created_at = created_at
            await db_session.flush()
        return idea

    return _make


@pytest.fixture
def register() -> Callable[..., Awaitable[dict[str, Any]]]:
    """Register through the API; the client keeps the session cookie."""

    async def _register(client: AsyncClient, username: str, password: str = DEFAULT_PASSWORD, **extra: Any) -> dict:
        response = await client.post(
            "/api/v1/auth/register",
            json={"username": username, "email": f"{username}@example.com", "password": password, **extra},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register
