"""Redis connection utilities."""

from functools import lru_cache

from redis import ConnectionPool, Redis

from report_service.config import get_settings


@lru_cache
def _get_redis_pool_bytes() -> ConnectionPool:
    """Get a cached Redis connection pool for byte-mode (RQ)."""
    settings = get_settings()
    return ConnectionPool.from_url(
        str(settings.redis_url),
        decode_responses=False,
        max_connections=10,
    )


def get_redis_connection_bytes() -> Redis:
    """Get a Redis connection without decode_responses for RQ."""
    pool = _get_redis_pool_bytes()
    return Redis(connection_pool=pool)


# Queue names
QUEUE_HIGH = "reports-high"
QUEUE_DEFAULT = "reports-default"
QUEUE_LOW = "reports-low"
QUEUES = [QUEUE_HIGH, QUEUE_DEFAULT, QUEUE_LOW]
