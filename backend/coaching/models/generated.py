from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, Text, Time, UniqueConstraint, text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class CoachAvailability(Base):
    __tablename__ = 'coach_availability'

    day_of_week = Column(Text, nullable=False, unique=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    id = Column(Integer, primary_key=True)
    updated_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))


class CoachBlockedDates(Base):
    __tablename__ = 'coach_blocked_dates'

    blocked_date = Column(Date, nullable=False, unique=True)
    id = Column(Integer, primary_key=True)
    reason = Column(Text)
    created_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))


class SessionBookings(Base):
    __tablename__ = 'session_bookings'

    client_id = Column(Text, nullable=False)
    session_type = Column(Text, nullable=False)
    session_date = Column(DateTime, nullable=False, index=True)
    duration_minutes = Column(Integer, nullable=False)
    price_paid = Column(Float, nullable=False, server_default=text('0'))
    status = Column(Text, nullable=False, server_default=text("'scheduled'"))
    id = Column(Integer, primary_key=True)
    booking_notes = Column(Text)
    status_changed_by = Column(Text)
    created_at = Column(DateTime, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(DateTime, nullable=False, server_default=text('CURRENT_TIMESTAMP'))

    slot_claims = relationship(
        'BookingSlotClaims',
        back_populates='booking',
        cascade='all, delete-orphan',
    )


class BookingSlotClaims(Base):
    """One row per grid block held by a scheduled booking."""

    __tablename__ = 'booking_slot_claims'
    __table_args__ = (
        UniqueConstraint('claim_date', 'block_minute', name='uq_slot_claim'),
    )

    booking_id = Column(ForeignKey('session_bookings.id', ondelete='CASCADE'), nullable=False)
    claim_date = Column(Date, nullable=False)
    block_minute = Column(Integer, nullable=False)  # minutes since midnight
    id = Column(Integer, primary_key=True)

    booking = relationship('SessionBookings', back_populates='slot_claims')
