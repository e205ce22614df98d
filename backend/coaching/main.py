import logging

from fastapi import Depends, FastAPI
from redis import Redis
from redis.exceptions import RedisError

from .redis_client import get_redis
from .routers import availability, blocked_dates, bookings, slots

logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Coaching Booking API")

app.include_router(slots.router)
app.include_router(bookings.router)
app.include_router(availability.router)
app.include_router(blocked_dates.router)


@app.get("/health")
def health(redis: Redis | None = Depends(get_redis)):
    if redis is None:
        return {"redis": None}
    try:
        return {"redis": redis.ping()}
    except RedisError:
        return {"redis": False}
