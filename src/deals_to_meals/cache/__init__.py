"""Redis connection management."""

from deals_to_meals.cache.redis import (
    check_redis_health,
    close_redis,
    get_redis_client,
    init_redis,
)


__all__ = [
    "check_redis_health",
    "close_redis",
    "get_redis_client",
    "init_redis",
]
