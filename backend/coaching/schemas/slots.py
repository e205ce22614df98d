# backend/coaching/schemas/slots.py
"""
Pydantic schemas for slots API.
"""

from datetime import date
from pydantic import BaseModel, Field


class SlotsDayStatus(BaseModel):
    """Status of a single day in calendar."""
    date: date
    has_slots: bool
    open_slots_count: int = 0

    model_config = {"from_attributes": True}


class SlotsCalendarResponse(BaseModel):
    """Response with calendar of available days."""
    session_type: str
    start_date: date
    end_date: date
    days: list[SlotsDayStatus]

    # Metadata
    horizon_days: int
    min_lead_minutes: int
    duration_minutes: int = Field(description="Session duration the calendar was built for")

    model_config = {"from_attributes": True}


class SlotsDayResponse(BaseModel):
    """Response with exact slots for a day."""
    date: date
    session_type: str
    duration_minutes: int
    price: float
    is_bookable: bool
    available_times: list[str] = Field(description='Ascending "HH:MM" start times')

    model_config = {"from_attributes": True}
