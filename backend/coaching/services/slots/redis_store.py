# backend/coaching/services/slots/redis_store.py
"""
Redis storage for window slots using Sorted Sets.

Key format: slots:window:{duration}:{date}
Value: Sorted Set where member = "HH:MM", score = expire_ts
       (unix timestamp when the slot falls inside the lead time).

Query: ZCOUNT key {now_ts} +inf → number of live slots.
Sentinel: "__empty__" with score=0 marks "calculated, zero slots".

Window slots come from weekly rules and blocked dates only; bookings are
never cached.
"""

from datetime import date, datetime
from redis import Redis

from .config import BookingConfig, get_booking_config


EMPTY_SENTINEL = "__empty__"


class SlotsRedisStore:
    """Redis storage wrapper using Sorted Sets for slot data."""

    KEY_PREFIX = "slots:window"

    def __init__(self, redis: Redis, config: BookingConfig | None = None):
        self.redis = redis
        self.config = config or get_booking_config()

    def _key(self, duration_minutes: int, dt: date) -> str:
        return f"{self.KEY_PREFIX}:{duration_minutes}:{dt.isoformat()}"

    def _queue_day(self, pipe, duration_minutes: int, dt: date, slots: list[tuple[str, float]]) -> None:
        key = self._key(duration_minutes, dt)
        pipe.delete(key)

        if slots:
            mapping = {time_str: expire_ts for time_str, expire_ts in slots}
            pipe.zadd(key, mapping)
            max_expire = max(expire_ts for _, expire_ts in slots)
            # Key lives until the last slot expires, capped by the cache TTL
            ttl_deadline = int(datetime.now().timestamp()) + self.config.cache_ttl_seconds
            pipe.expireat(key, min(int(max_expire) + 60, ttl_deadline))
        else:
            # Empty day: sentinel so EXISTS returns True
            pipe.zadd(key, {EMPTY_SENTINEL: 0})
            pipe.expire(key, self.config.cache_ttl_seconds)

    # ── Write ────────────────────────────────────────────────────────────

    def store_multiple_days(
        self,
        duration_minutes: int,
        days_slots: dict[date, list[tuple[str, float]]],
    ) -> None:
        """Batch store slots for multiple days via pipeline."""
        if not days_slots:
            return

        pipe = self.redis.pipeline()
        for dt, slots in days_slots.items():
            self._queue_day(pipe, duration_minutes, dt, slots)
        pipe.execute()

    # ── Read ─────────────────────────────────────────────────────────────

    def mget_counts(
        self,
        duration_minutes: int,
        dates: list[date],
        now: datetime,
    ) -> dict[date, int | None]:
        """
        Batch get slot counts for multiple dates.

        Returns:
            Dict mapping date → count (or None on cache miss).
        """
        if not dates:
            return {}

        now_ts = now.timestamp()
        keys = [self._key(duration_minutes, dt) for dt in dates]

        # First pass: check existence
        pipe = self.redis.pipeline()
        for key in keys:
            pipe.exists(key)
        exists_results = pipe.execute()

        # Second pass: count live slots for existing keys
        pipe = self.redis.pipeline()
        for key, exists in zip(keys, exists_results):
            if exists:
                pipe.zcount(key, now_ts, "+inf")
        count_results = pipe.execute()

        result = {}
        count_idx = 0
        for dt, exists in zip(dates, exists_results):
            if exists:
                result[dt] = count_results[count_idx]
                count_idx += 1
            else:
                result[dt] = None

        return result

    # ── Delete ───────────────────────────────────────────────────────────

    def delete_day_slots(self, dates: list[date] | None = None) -> int:
        """
        Delete cached slots for every duration.

        Args:
            dates: Specific dates, or None to delete everything.

        Returns:
            Number of deleted keys.
        """
        if dates:
            keys = []
            for dt in dates:
                keys.extend(self.redis.keys(f"{self.KEY_PREFIX}:*:{dt.isoformat()}"))
        else:
            keys = self.redis.keys(f"{self.KEY_PREFIX}:*")

        if not keys:
            return 0

        return self.redis.delete(*keys)
