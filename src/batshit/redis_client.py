"""Redis connection pool.

Only the rate limiter and the readiness check talk to Redis; the app keeps
serving (unthrottled) when no pool has been initialized.
"""

import redis.asyncio as redis

_pool: redis.Redis | None = None


async def init_redis(url: str, max_connections: int = 20) -> None:
    """Create the shared client for ``url``."""
    global _pool  # noqa: PLW0603
    _pool = redis.from_url(  # type: ignore[no-untyped-call]
        url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=max_connections,
    )


async def close_redis() -> None:
    """Close the shared client, if any."""
    global _pool  # noqa: PLW0603
    if _pool is not None:
        await _pool.aclose()
        _pool = None


def redis_enabled() -> bool:
    """Whether a Redis client has been initialized."""
    return _pool is not None


def get_redis() -> redis.Redis:
    """Return the shared Redis client."""
    if _pool is None:
        msg = "Redis not initialized. Call init_redis() first."
        raise RuntimeError(msg)
    return _pool
