"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from batshit.auth.router import router as auth_router
from batshit.config import get_settings
from batshit.database import close_db, init_db
from batshit.health.router import router as health_router
from batshit.ideas.router import router as ideas_router
from batshit.middleware import setup_middleware
from batshit.ratings.router import router as ratings_router
from batshit.redis_client import close_redis, init_redis
from batshit.social.router import router as social_router
from batshit.stats.router import router as stats_router
from batshit.users.router import router as users_router


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    await init_redis(settings.redis_url)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Batshit or Not API",
        description="Submit ideas, rate them from boringly sane to absolutely batshit",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(ideas_router)
    app.include_router(ratings_router)
    app.include_router(stats_router)
    app.include_router(social_router)
    app.include_router(users_router)

    return app


app = create_app()
