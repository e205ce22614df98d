# backend/coaching/schemas/bookings.py

from datetime import date, datetime, time
from typing import Optional
from pydantic import BaseModel, Field

from ..services.booking import BookingStatus
from ..services.slots.config import SessionType


class BookingCreate(BaseModel):
    session_type: SessionType
    date: date
    start_time: time

    duration_minutes: Optional[int] = Field(None, description="Must match the session type's duration when given")
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class BookingRead(BaseModel):
    id: int

    client_id: str
    session_type: str
    session_date: datetime
    duration_minutes: int
    price_paid: float

    status: str
    booking_notes: Optional[str] = None
    status_changed_by: Optional[str] = None

    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BookingStatusUpdate(BaseModel):
    status: BookingStatus
