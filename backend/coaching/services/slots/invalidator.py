# backend/coaching/services/slots/invalidator.py
"""
Cache invalidation for window slots.

Triggers:
✓ Weekly availability rule changed → invalidate all dates
✓ Blocked date created/deleted → invalidate that date

Does NOT trigger:
✗ Booking created/cancelled (day slots are calculated on-the-fly)
"""

import logging
from datetime import date

from redis import Redis
from redis.exceptions import RedisError

from .redis_store import SlotsRedisStore

logger = logging.getLogger(__name__)


def invalidate_window_cache(
    redis: Redis | None,
    dates: list[date] | None = None,
) -> int:
    """
    Invalidate cached window grids.

    Args:
        redis: Redis client (None → nothing cached, nothing to do)
        dates: Specific dates to invalidate, or None for all

    Returns:
        Number of deleted cache keys
    """
    if redis is None:
        return 0

    store = SlotsRedisStore(redis)
    try:
        return store.delete_day_slots(dates)
    except RedisError as e:
        logger.error(f"Failed to invalidate slots cache: {e}")
        return 0
