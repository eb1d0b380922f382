"""Redis client and connection pool management.

Redis is only used to share linked Kroger accounts between instances, so
the client is created at startup only when the credential store backend is
``redis``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from deals_to_meals.core.config import get_settings
from deals_to_meals.observability.logging import get_logger


if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = get_logger(__name__)

# Global connection pool and client
_pool: ConnectionPool[Any] | None = None
_client: Redis[Any] | None = None


async def init_redis() -> None:
    """Initialize the Redis connection pool.

    Should be called during application startup (lifespan).
    """
    global _pool, _client  # noqa: PLW0603

    settings = get_settings()

    logger.info(
        "Initializing Redis connection",
        host=settings.redis.host,
        port=settings.redis.port,
    )

    _pool = ConnectionPool.from_url(
        settings.redis_url,
        max_connections=20,
        decode_responses=True,
    )
    _client = redis.Redis(connection_pool=_pool)

    # Verify connection
    try:
        await _client.ping()
        logger.info("Redis connection established successfully")
    except redis.ConnectionError:
        logger.exception("Failed to connect to Redis")
        raise


async def close_redis() -> None:
    """Close the Redis connection pool.

    Should be called during application shutdown (lifespan).
    """
    global _pool, _client  # noqa: PLW0603

    logger.info("Closing Redis connection")

    if _client:
        await _client.aclose()
        _client = None

    if _pool:
        await _pool.disconnect()
        _pool = None

    logger.info("Redis connection closed")


def get_redis_client() -> Redis[Any]:
    """Get the Redis client.

    Raises:
        RuntimeError: If Redis is not initialized.
    """
    if _client is None:
        msg = "Redis client not initialized. Call init_redis() first."
        raise RuntimeError(msg)
    return _client


async def check_redis_health() -> dict[str, str]:
    """Check health of the Redis connection."""
    results: dict[str, str] = {}

    try:
        if _client:
            await _client.ping()
            results["redis"] = "healthy"
        else:
            results["redis"] = "not_initialized"
    except (redis.ConnectionError, redis.TimeoutError):
        results["redis"] = "unhealthy"

    return results
