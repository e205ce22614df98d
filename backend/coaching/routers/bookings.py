# backend/coaching/routers/bookings.py
# DELETE = 405: bookings end through status changes

from fastapi import APIRouter, Depends, HTTPException, Query, status
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import SessionBookings as DBBookings
from ..redis_client import get_redis
from ..schemas.bookings import (
    BookingCreate,
    BookingRead,
    BookingStatusUpdate,
)
from ..services.booking import (
    InvalidTransition,
    NotFound,
    PolicyReason,
    PolicyViolation,
    SlotConflict,
    create_booking,
    set_booking_status,
)
from ..services.events import emit_event
from ..services.slots import get_booking_config
from .deps import Caller, get_caller, require_admin, require_client

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("/", response_model=list[BookingRead])
def list_bookings(
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    """Latest bookings, newest session first."""
    return (
        db.query(DBBookings)
        .order_by(DBBookings.session_date.desc())
        .limit(limit)
        .all()
    )


@router.get("/{id}", response_model=BookingRead)
def get_booking(
    id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    obj = db.get(DBBookings, id)
    # Clients only see their own bookings
    if not obj or (not caller.is_admin and obj.client_id != caller.user_id):
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
def post_booking(
    data: BookingCreate,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
    caller: Caller = Depends(require_client),
):
    # Clients book the catalog duration; it is what the slot endpoints offer
    offer = get_booking_config().offer_for(data.session_type)
    if data.duration_minutes is not None and data.duration_minutes != offer.duration_minutes:
        raise HTTPException(
            status_code=422,
            detail={
                "reason": PolicyReason.INVALID_DURATION.value,
                "message": f"{data.session_type.value} lasts {offer.duration_minutes} minutes",
            },
        )

    try:
        booking = create_booking(
            db,
            client_id=caller.user_id,
            session_type=data.session_type,
            target_date=data.date,
            start_time=data.start_time,
            duration_minutes=offer.duration_minutes,
            notes=data.notes,
        )
    except PolicyViolation as e:
        raise HTTPException(
            status_code=422,
            detail={"reason": e.reason.value, "message": e.detail},
        )
    except SlotConflict as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"reason": "slot_conflict", "message": str(e)},
        )

    # Payment capture and confirmation e-mail are handled by event consumers
    emit_event("booking_created", {
        "booking_id": booking.id,
        "client_id": booking.client_id,
        "session_type": booking.session_type,
        "session_date": booking.session_date.isoformat(),
        "duration_minutes": booking.duration_minutes,
        "price_paid": booking.price_paid,
    }, redis=redis)

    return booking


@router.patch("/{id}/status", response_model=BookingRead)
def patch_booking_status(
    id: int,
    data: BookingStatusUpdate,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
    caller: Caller = Depends(require_admin),
):
    try:
        booking, changed = set_booking_status(db, id, data.status, changed_by=caller.user_id)
    except NotFound:
        raise HTTPException(status_code=404, detail="Not found")
    except InvalidTransition as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    if changed:
        emit_event("booking_status_changed", {
            "booking_id": booking.id,
            "client_id": booking.client_id,
            "status": booking.status,
        }, redis=redis)

    return booking


@router.delete("/{id}")
def delete_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )
