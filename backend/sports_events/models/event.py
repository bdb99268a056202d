"""
Event model with registration window and capacity predicates.

Key design decisions:
- Participant count is never denormalized; it is recomputed from occupying
  bookings, so a cancellation frees a slot immediately.
- `category_id` / `venue_id` are plain foreign keys. Services fetch the referenced
  rows explicitly; nothing is lazy-loaded on attribute access.
- `version` is bumped by every booking write. The booking workflow uses that UPDATE
  as a write claim on the event row, serializing concurrent bookings per event.
"""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Column, Integer, String, Numeric, Enum, ForeignKey, Index, CheckConstraint,
)

from sports_events.db.base import Base, TimestampMixin, UTCDateTime, utcnow


class EventType(str, enum.Enum):
    RUNNING = "RUNNING"
    CYCLING = "CYCLING"
    SWIMMING = "SWIMMING"
    FOOTBALL = "FOOTBALL"
    BASKETBALL = "BASKETBALL"
    TENNIS = "TENNIS"
    CRICKET = "CRICKET"
    VOLLEYBALL = "VOLLEYBALL"
    BADMINTON = "BADMINTON"
    TABLE_TENNIS = "TABLE_TENNIS"
    ATHLETICS = "ATHLETICS"
    MARATHON = "MARATHON"
    TRIATHLON = "TRIATHLON"
    OTHER = "OTHER"


class DifficultyLevel(str, enum.Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    EXPERT = "EXPERT"


class EventStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(String(1000), nullable=True)
    event_date = Column(UTCDateTime, nullable=False)
    registration_start_date = Column(UTCDateTime, nullable=False)
    registration_end_date = Column(UTCDateTime, nullable=False)
    max_participants = Column(Integer, nullable=True)
    price = Column(Numeric(10, 2), nullable=True)
    image_url = Column(String(500), nullable=True)
    banner_url = Column(String(500), nullable=True)
    event_type = Column(
        Enum(EventType, name="event_type", native_enum=False, length=20, create_constraint=True),
        nullable=False,
    )
    difficulty_level = Column(
        Enum(DifficultyLevel, name="difficulty_level", native_enum=False, length=20, create_constraint=True),
        nullable=True,
    )
    status = Column(
        Enum(EventStatus, name="event_status", native_enum=False, length=20, create_constraint=True),
        nullable=False,
        default=EventStatus.ACTIVE,
    )
    rules = Column(String(2000), nullable=True)
    prize_info = Column(String(1000), nullable=True)
    contact_info = Column(String(500), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    venue_id = Column(Integer, ForeignKey("venues.id"), nullable=False, index=True)

    # Write-claim counter for booking serialization
    version = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        CheckConstraint("price IS NULL OR price >= 0", name="check_event_price_non_negative"),
        CheckConstraint(
            "max_participants IS NULL OR max_participants >= 1",
            name="check_event_max_participants_positive",
        ),
        CheckConstraint(
            "registration_start_date < registration_end_date",
            name="check_event_registration_window",
        ),
        Index("ix_events_event_date", "event_date"),
        # Most listings filter on status and sort by date
        Index("ix_events_status_date", "status", "event_date"),
    )

    def is_registration_open(self, now: Optional[datetime] = None) -> bool:
        """True while `now` lies in [registration_start_date, registration_end_date) and the event is ACTIVE."""
        now = now or utcnow()
        return (
            self.status == EventStatus.ACTIVE
            and self.registration_start_date <= now < self.registration_end_date
        )

    def has_available_slots(self, current_participants: int) -> bool:
        return self.max_participants is None or current_participants < self.max_participants

    def remaining_slots(self, current_participants: int) -> Optional[int]:
        if self.max_participants is None:
            return None
        return max(self.max_participants - current_participants, 0)

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title}, date={self.event_date}, status={self.status})>"
