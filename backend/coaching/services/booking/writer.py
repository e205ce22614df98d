# backend/coaching/services/booking/writer.py
"""
Booking writer: the only place where bookings are created or change status.

Every scheduled booking owns one booking_slot_claims row per grid block it
covers. The (claim_date, block_minute) UNIQUE constraint makes the insert
itself the conflict check, so two overlapping bookings can never both
commit, whichever process handles them.

Write-time checks (against a fresh snapshot):
✓ past date
✓ weekly rule exists and is active
✓ date is not blocked
✓ slot lies inside the day's window
✓ lead time from now
✓ no overlap with scheduled bookings (pre-check + unique constraint)
"""

import logging
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Optional

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models.generated import BookingSlotClaims, CoachBlockedDates, SessionBookings
from ..slots.config import BookingConfig, SessionType, get_booking_config, time_to_minutes
from ..slots.generator import busy_intervals, intervals_overlap
from ..slots.resolver import rule_for_date
from ..slots.snapshot import load_rules, load_scheduled_bookings
from .errors import InvalidTransition, NotFound, PolicyReason, PolicyViolation, SlotConflict

logger = logging.getLogger(__name__)


class BookingStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


def create_booking(
    db: Session,
    client_id: str,
    session_type: SessionType,
    target_date: date,
    start_time: time,
    duration_minutes: Optional[int] = None,
    notes: Optional[str] = None,
    config: BookingConfig | None = None,
    now: datetime | None = None,
) -> SessionBookings:
    """
    Reserve a slot for a client.

    Raises:
        PolicyViolation: the slot breaks an availability rule
        SlotConflict: the slot overlaps a scheduled booking
    """
    config = config or get_booking_config()
    now = now or datetime.now()
    offer = config.offer_for(session_type)
    duration = duration_minutes if duration_minutes is not None else offer.duration_minutes

    _check_policy(db, target_date, start_time, duration, config, now)

    start_min = time_to_minutes(start_time)
    end_min = start_min + duration

    for busy_start, busy_end in busy_intervals(load_scheduled_bookings(db, target_date), target_date):
        if intervals_overlap(start_min, end_min, busy_start, busy_end):
            logger.warning(
                f"Booking rejected (slot taken): client={client_id}, "
                f"time={target_date} {start_time:%H:%M}"
            )
            raise SlotConflict(f"{target_date} {start_time:%H:%M} is already booked")

    booking = SessionBookings(
        client_id=client_id,
        session_type=SessionType(session_type).value,
        session_date=datetime.combine(target_date, start_time),
        duration_minutes=duration,
        price_paid=offer.price,
        status=BookingStatus.SCHEDULED.value,
        booking_notes=notes,
        created_at=now,
        updated_at=now,
    )
    booking.slot_claims = [
        BookingSlotClaims(claim_date=target_date, block_minute=block)
        for block in config.blocks_for(start_min, duration)
    ]

    db.add(booking)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if not _is_claim_violation(e):
            raise
        logger.warning(
            f"Booking rejected (lost race): client={client_id}, "
            f"time={target_date} {start_time:%H:%M}"
        )
        raise SlotConflict(f"{target_date} {start_time:%H:%M} was just booked") from None

    db.refresh(booking)

    logger.info(
        f"Booking created: booking_id={booking.id}, client={client_id}, "
        f"type={booking.session_type}, time={target_date} {start_time:%H:%M}, "
        f"duration={duration}"
    )
    return booking


def set_booking_status(
    db: Session,
    booking_id: int,
    new_status: BookingStatus,
    changed_by: Optional[str] = None,
    now: datetime | None = None,
) -> tuple[SessionBookings, bool]:
    """
    Administrative status change.

    Re-applying the current status is a no-op. Terminal bookings accept
    nothing else.

    Returns:
        (booking, changed)

    Raises:
        NotFound: unknown booking_id
        InvalidTransition: booking is terminal and new_status differs
    """
    new_status = BookingStatus(new_status)

    if new_status != BookingStatus.SCHEDULED:
        # One conditional UPDATE: of two concurrent transitions only one
        # can still see the booking as scheduled.
        result = db.execute(
            update(SessionBookings)
            .where(
                SessionBookings.id == booking_id,
                SessionBookings.status == BookingStatus.SCHEDULED.value,
            )
            .values(
                status=new_status.value,
                status_changed_by=changed_by,
                updated_at=now or datetime.now(),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 1:
            # Frees the slot for other clients
            db.execute(delete(BookingSlotClaims).where(BookingSlotClaims.booking_id == booking_id))
            db.commit()

            logger.info(
                f"Booking status changed: booking_id={booking_id}, "
                f"{BookingStatus.SCHEDULED.value} → {new_status.value}, by={changed_by}"
            )
            return db.get(SessionBookings, booking_id, populate_existing=True), True

        db.rollback()

    booking = db.get(SessionBookings, booking_id, populate_existing=True)
    if not booking:
        raise NotFound(f"Booking {booking_id} not found")

    current = BookingStatus(booking.status)
    if current == new_status:
        return booking, False

    raise InvalidTransition(
        f"Booking {booking_id} is {current.value}, cannot become {new_status.value}"
    )


# ── Helpers ──────────────────────────────────────────────────────────────


def _check_policy(
    db: Session,
    target_date: date,
    start_time: time,
    duration: int,
    config: BookingConfig,
    now: datetime,
) -> None:
    if duration <= 0 or not config.is_on_grid(duration):
        raise PolicyViolation(
            PolicyReason.INVALID_DURATION,
            f"Duration must be a positive multiple of {config.slot_step_minutes} minutes",
        )

    start_min = time_to_minutes(start_time)
    if not config.is_time_on_grid(start_time):
        raise PolicyViolation(
            PolicyReason.OFF_GRID,
            f"Start time must be aligned to {config.slot_step_minutes} minutes",
        )

    if target_date < now.date():
        raise PolicyViolation(PolicyReason.PAST_DATE, f"{target_date} is in the past")

    rule = rule_for_date(target_date, load_rules(db, config))
    if rule is None or not rule.is_active:
        raise PolicyViolation(
            PolicyReason.INACTIVE_DAY,
            f"No sessions on {target_date:%A}s",
        )

    blocked = (
        db.query(CoachBlockedDates)
        .filter(CoachBlockedDates.blocked_date == target_date)
        .first()
    )
    if blocked:
        raise PolicyViolation(PolicyReason.BLOCKED_DATE, f"{target_date} is not available")

    if start_min < time_to_minutes(rule.start_time) or start_min + duration > time_to_minutes(rule.end_time):
        raise PolicyViolation(
            PolicyReason.OUTSIDE_WINDOW,
            f"Sessions on {target_date:%A}s run {rule.start_time:%H:%M}-{rule.end_time:%H:%M}",
        )

    lead = timedelta(minutes=config.min_lead_minutes)
    if datetime.combine(target_date, start_time) < now + lead:
        raise PolicyViolation(
            PolicyReason.LEAD_TIME,
            f"Sessions must be booked at least {config.min_lead_minutes} minutes ahead",
        )


def _is_claim_violation(error: IntegrityError) -> bool:
    message = str(error.orig)
    return "booking_slot_claims" in message or "uq_slot_claim" in message
