# backend/coaching/routers/availability.py
# Weekly rules are never deleted, only deactivated: DELETE = 405

import logging
from datetime import datetime, time

from fastapi import APIRouter, Depends, HTTPException, status
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import CoachAvailability as DBAvailability
from ..redis_client import get_redis
from ..schemas.availability import AvailabilityRead, AvailabilityUpdate
from ..services.slots import DayOfWeek, get_booking_config, invalidate_window_cache
from ..services.slots.snapshot import DEFAULT_TEMPLATE
from .deps import Caller, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/availability", tags=["availability"])

DEFAULT_START = time(9, 0)
DEFAULT_END = time(17, 0)


@router.get("/", response_model=list[AvailabilityRead])
def list_availability(db: Session = Depends(get_db)):
    """Stored weekly rules; the default template when nothing is stored."""
    rows = db.query(DBAvailability).all()
    if not rows:
        return [
            AvailabilityRead(
                day_of_week=rule.day_of_week,
                start_time=rule.start_time,
                end_time=rule.end_time,
                is_active=rule.is_active,
            )
            for rule in DEFAULT_TEMPLATE
        ]
    return rows


@router.put("/{day_of_week}", response_model=AvailabilityRead)
def put_availability(
    day_of_week: DayOfWeek,
    data: AvailabilityUpdate,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
    caller: Caller = Depends(require_admin),
):
    """Create or update the rule for one day of the week."""
    if db.query(DBAvailability).count() == 0:
        # First edit: persist the default template so the other days keep it
        for rule in DEFAULT_TEMPLATE:
            db.add(DBAvailability(
                day_of_week=rule.day_of_week.value,
                start_time=rule.start_time,
                end_time=rule.end_time,
                is_active=1,
            ))
        db.flush()

    obj = (
        db.query(DBAvailability)
        .filter(DBAvailability.day_of_week == day_of_week.value)
        .first()
    )
    if not obj:
        obj = DBAvailability(
            day_of_week=day_of_week.value,
            start_time=DEFAULT_START,
            end_time=DEFAULT_END,
            is_active=1,
        )
        db.add(obj)

    if data.start_time is not None:
        obj.start_time = data.start_time
    if data.end_time is not None:
        obj.end_time = data.end_time
    if data.is_active is not None:
        obj.is_active = 1 if data.is_active else 0

    if obj.start_time >= obj.end_time:
        db.rollback()
        raise HTTPException(
            status_code=422,
            detail="start_time must be before end_time",
        )

    # Stored rows may predate the grid check
    config = get_booking_config()
    if not (config.is_time_on_grid(obj.start_time) and config.is_time_on_grid(obj.end_time)):
        db.rollback()
        raise HTTPException(
            status_code=422,
            detail=f"start_time and end_time must be aligned to {config.slot_step_minutes} minutes",
        )

    obj.updated_at = datetime.now()
    db.commit()
    db.refresh(obj)

    invalidate_window_cache(redis)
    logger.info(
        f"Availability updated: {obj.day_of_week} {obj.start_time:%H:%M}-{obj.end_time:%H:%M} "
        f"active={bool(obj.is_active)}, by={caller.user_id}"
    )
    return obj


@router.delete("/{day_of_week}")
def delete_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )
