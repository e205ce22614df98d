# backend/coaching/routers/slots.py
"""
Slots API endpoints.

GET /slots/calendar - Calendar of bookable days for a session type
GET /slots/day - Exact start times for a session type on a day
"""

from datetime import date, datetime, timedelta
from fastapi import APIRouter, Depends, HTTPException, Query
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..redis_client import get_redis
from ..schemas.slots import (
    SlotsCalendarResponse,
    SlotsDayStatus,
    SlotsDayResponse,
)
from ..services.slots import (
    SessionType,
    get_booking_config,
    calculate_calendar,
    calculate_day_availability,
)


router = APIRouter(prefix="/slots", tags=["slots"])


@router.get("/calendar", response_model=SlotsCalendarResponse)
def get_slots_calendar(
    session_type: SessionType = SessionType.ONLINE_SESSION,
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    """Get calendar of bookable days, clamped to [today, today + horizon]."""
    config = get_booking_config()
    now = datetime.now()

    today = now.date()
    if start_date is None:
        start_date = today
    if end_date is None:
        end_date = start_date + timedelta(days=config.horizon_days)

    horizon_end = today + timedelta(days=config.horizon_days)
    start_date = min(max(start_date, today), horizon_end)
    end_date = min(end_date, horizon_end)
    if end_date < start_date:
        end_date = start_date

    days = calculate_calendar(
        db,
        session_type,
        start_date,
        end_date,
        config=config,
        redis=redis,
        now=now,
    )

    return SlotsCalendarResponse(
        session_type=session_type.value,
        start_date=start_date,
        end_date=end_date,
        days=[SlotsDayStatus(**day) for day in days],
        horizon_days=config.horizon_days,
        min_lead_minutes=config.min_lead_minutes,
        duration_minutes=config.offer_for(session_type).duration_minutes,
    )


@router.get("/day", response_model=SlotsDayResponse)
def get_slots_day(
    session_type: SessionType = SessionType.ONLINE_SESSION,
    target_date: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
):
    """Get available start times for a session type on a specific day."""
    config = get_booking_config()

    today = date.today()
    max_date = today + timedelta(days=config.horizon_days)

    if target_date < today:
        raise HTTPException(status_code=400, detail="Date cannot be in the past")

    if target_date > max_date:
        raise HTTPException(status_code=400, detail=f"Date cannot be more than {config.horizon_days} days ahead")

    result = calculate_day_availability(db, session_type, target_date, config=config)
    return SlotsDayResponse(**result)
