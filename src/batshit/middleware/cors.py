"""CORS configuration for the web client."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from batshit.config import Settings


def setup_cors(app: FastAPI, settings: Settings) -> None:
    """Allow the configured client origins to send the session cookie."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-Id"],
        expose_headers=["X-Request-Id", "X-RateLimit-Remaining", "X-RateLimit-Limit"],
    )
