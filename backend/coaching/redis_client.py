# backend/coaching/redis_client.py
"""
Shared Redis connection.

Redis is optional: without REDIS_URL the slots cache is bypassed and
events are dropped (see services/events.py).
"""

from redis import Redis

from .config import settings


def _build_client() -> Redis | None:
    if not settings.redis_url:
        return None
    return Redis.from_url(settings.redis_url, socket_timeout=2.0)


redis_client: Redis | None = _build_client()


# Dependency for FastAPI
def get_redis() -> Redis | None:
    return redis_client
