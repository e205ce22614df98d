# backend/coaching/schemas/availability.py

from datetime import date, datetime, time
from typing import Optional
from pydantic import BaseModel, field_validator, model_validator

from ..services.slots.config import get_booking_config
from ..services.slots.resolver import DayOfWeek


class AvailabilityRead(BaseModel):
    """Weekly rule; id is None for default-template days that are not stored."""
    id: Optional[int] = None
    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    is_active: bool

    model_config = {"from_attributes": True}


class AvailabilityUpdate(BaseModel):
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    is_active: Optional[bool] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def check_on_grid(cls, value: Optional[time]) -> Optional[time]:
        config = get_booking_config()
        if value is not None and not config.is_time_on_grid(value):
            raise ValueError(f"must be aligned to {config.slot_step_minutes} minutes")
        return value

    @model_validator(mode="after")
    def check_window(self):
        if self.start_time and self.end_time and self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class BlockedDateCreate(BaseModel):
    blocked_date: date
    reason: Optional[str] = None

    model_config = {"from_attributes": True}


class BlockedDateRead(BaseModel):
    id: int
    blocked_date: date
    reason: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
