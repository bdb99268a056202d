"""
Booking model representing a user's registration for an event.

Key design decisions:
- Unique constraint on (user_id, event_id): at most one booking per pair, ever
- Bookings are never deleted by the workflow; cancellation is a status change
- Status changes follow explicit transition tables; anything else is rejected
"""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, String, Numeric, Enum, ForeignKey, UniqueConstraint, Index

from sports_events.db.base import Base, TimestampMixin, UTCDateTime, utcnow
from sports_events.models.event import Event


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
    PARTIALLY_REFUNDED = "PARTIALLY_REFUNDED"


class BookingStatus(str, enum.Enum):
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    ATTENDED = "ATTENDED"
    NO_SHOW = "NO_SHOW"


BOOKING_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CANCELLED, BookingStatus.ATTENDED, BookingStatus.NO_SHOW}),
    BookingStatus.NO_SHOW: frozenset({BookingStatus.ATTENDED}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.ATTENDED: frozenset(),
}

PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.COMPLETED, PaymentStatus.FAILED}),
    PaymentStatus.FAILED: frozenset({PaymentStatus.PENDING, PaymentStatus.COMPLETED}),
    PaymentStatus.COMPLETED: frozenset({PaymentStatus.REFUNDED, PaymentStatus.PARTIALLY_REFUNDED}),
    PaymentStatus.PARTIALLY_REFUNDED: frozenset({PaymentStatus.REFUNDED}),
    PaymentStatus.REFUNDED: frozenset(),
}

# Bookings in these states hold a slot on the event
OCCUPYING_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.ATTENDED, BookingStatus.NO_SHOW)


def can_transition_booking(current: BookingStatus, new: BookingStatus) -> bool:
    return current == new or new in BOOKING_TRANSITIONS[current]


def can_transition_payment(current: PaymentStatus, new: PaymentStatus) -> bool:
    return current == new or new in PAYMENT_TRANSITIONS[current]


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    booking_date = Column(UTCDateTime, nullable=False, default=utcnow)
    total_amount = Column(Numeric(10, 2), nullable=True)
    payment_status = Column(
        Enum(PaymentStatus, name="payment_status", native_enum=False, length=20, create_constraint=True),
        nullable=False,
        default=PaymentStatus.PENDING,
    )
    booking_status = Column(
        Enum(BookingStatus, name="booking_status", native_enum=False, length=20, create_constraint=True),
        nullable=False,
        default=BookingStatus.CONFIRMED,
    )
    payment_reference = Column(String(100), nullable=True)
    notes = Column(String(500), nullable=True)
    emergency_contact = Column(String(100), nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "event_id", name="uq_user_event_booking"),
        Index("ix_bookings_booking_date", "booking_date"),
    )

    @property
    def is_confirmed(self) -> bool:
        return self.booking_status == BookingStatus.CONFIRMED and self.payment_status == PaymentStatus.COMPLETED

    def can_be_cancelled(self, event: Event, now: Optional[datetime] = None) -> bool:
        return self.booking_status == BookingStatus.CONFIRMED and event.is_registration_open(now)

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, user={self.user_id}, event={self.event_id}, "
            f"status={self.booking_status}, payment={self.payment_status})>"
        )
