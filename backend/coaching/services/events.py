"""
backend/coaching/services/events.py

Event emitter: pushes events to a Redis queue for external consumers
(payment capture, confirmation e-mail, contact sync).

Queue: events:p2p
"""

import json
import time
import logging

from redis import Redis
from redis.exceptions import RedisError

from ..redis_client import redis_client

logger = logging.getLogger(__name__)

P2P_QUEUE = "events:p2p"


def emit_event(event_type: str, payload: dict, redis: Redis | None = None) -> None:
    """
    Emit an event for external consumers.

    Never raises: a missing or failing Redis only loses the event.
    """
    client = redis if redis is not None else redis_client
    if client is None:
        logger.debug(f"Event dropped (no Redis): {event_type}")
        return

    event = {
        "type": event_type,
        **payload,
        "ts": int(time.time()),
    }
    try:
        client.rpush(P2P_QUEUE, json.dumps(event, default=str))
        logger.info(f"Event emitted: {event_type} → {P2P_QUEUE}")
    except RedisError as e:
        logger.error(f"Failed to emit event {event_type}: {e}")
