"""
Tests for entity predicates and status transition tables.
"""

from datetime import datetime, timezone, timedelta

import pytest

from sports_events.core.exceptions import ConflictError, ErrorCode

from sports_events.models.booking import (
    Booking,
    BookingStatus,
    PaymentStatus,
    can_transition_booking,
    can_transition_payment,
)
from sports_events.models.event import Event, EventStatus
from sports_events.models.user import User
from sports_events.stores.base import PageRequest, PageResult, to_snake

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_event(**overrides) -> Event:
    fields = dict(
        registration_start_date=NOW - timedelta(days=1),
        registration_end_date=NOW + timedelta(days=1),
        status=EventStatus.ACTIVE,
        max_participants=10,
    )
    fields.update(overrides)
    return Event(**fields)


def test_registration_open_inside_window():
    assert make_event().is_registration_open(NOW)


def test_registration_window_is_half_open():
    event = make_event(registration_start_date=NOW, registration_end_date=NOW + timedelta(hours=1))
    assert event.is_registration_open(NOW)
    assert not event.is_registration_open(NOW + timedelta(hours=1))


def test_registration_closed_before_start():
    assert not make_event(registration_start_date=NOW + timedelta(minutes=1)).is_registration_open(NOW)


@pytest.mark.parametrize("status", [EventStatus.INACTIVE, EventStatus.CANCELLED, EventStatus.COMPLETED])
def test_registration_closed_unless_active(status):
    assert not make_event(status=status).is_registration_open(NOW)


def test_available_slots():
    event = make_event(max_participants=2)
    assert event.has_available_slots(1)
    assert not event.has_available_slots(2)
    assert event.remaining_slots(1) == 1
    assert event.remaining_slots(5) == 0


def test_unlimited_event_always_has_slots():
    event = make_event(max_participants=None)
    assert event.has_available_slots(10_000)
    assert event.remaining_slots(10_000) is None


def test_booking_is_confirmed_needs_completed_payment():
    booking = Booking(booking_status=BookingStatus.CONFIRMED, payment_status=PaymentStatus.PENDING)
    assert not booking.is_confirmed
    booking.payment_status = PaymentStatus.COMPLETED
    assert booking.is_confirmed


def test_can_be_cancelled_only_while_confirmed_and_open():
    booking = Booking(booking_status=BookingStatus.CONFIRMED, payment_status=PaymentStatus.PENDING)
    assert booking.can_be_cancelled(make_event(), NOW)
    assert not booking.can_be_cancelled(make_event(registration_end_date=NOW), NOW)

    booking.booking_status = BookingStatus.CANCELLED
    assert not booking.can_be_cancelled(make_event(), NOW)


@pytest.mark.parametrize(
    "current,new,allowed",
    [
        (BookingStatus.CONFIRMED, BookingStatus.CANCELLED, True),
        (BookingStatus.CONFIRMED, BookingStatus.ATTENDED, True),
        (BookingStatus.CONFIRMED, BookingStatus.NO_SHOW, True),
        (BookingStatus.NO_SHOW, BookingStatus.ATTENDED, True),
        (BookingStatus.CONFIRMED, BookingStatus.CONFIRMED, True),
        (BookingStatus.CANCELLED, BookingStatus.CONFIRMED, False),
        (BookingStatus.ATTENDED, BookingStatus.CANCELLED, False),
        (BookingStatus.NO_SHOW, BookingStatus.CONFIRMED, False),
    ],
)
def test_booking_transitions(current, new, allowed):
    assert can_transition_booking(current, new) is allowed


@pytest.mark.parametrize(
    "current,new,allowed",
    [
        (PaymentStatus.PENDING, PaymentStatus.COMPLETED, True),
        (PaymentStatus.PENDING, PaymentStatus.FAILED, True),
        (PaymentStatus.FAILED, PaymentStatus.PENDING, True),
        (PaymentStatus.COMPLETED, PaymentStatus.PARTIALLY_REFUNDED, True),
        (PaymentStatus.PARTIALLY_REFUNDED, PaymentStatus.REFUNDED, True),
        (PaymentStatus.PENDING, PaymentStatus.REFUNDED, False),
        (PaymentStatus.REFUNDED, PaymentStatus.COMPLETED, False),
        (PaymentStatus.COMPLETED, PaymentStatus.PENDING, False),
    ],
)
def test_payment_transitions(current, new, allowed):
    assert can_transition_payment(current, new) is allowed


def test_user_full_name():
    assert User(first_name="Jane", last_name="Smith").full_name == "Jane Smith"


def test_sort_field_names_accept_camel_case():
    assert to_snake("eventDate") == "event_date"
    assert to_snake("registrationEndDate") == "registration_end_date"
    assert to_snake("event_date") == "event_date"


def test_page_arithmetic():
    request = PageRequest(page=2, size=5, sort_dir="DESC")
    assert request.offset == 10
    assert request.descending
    assert PageResult(items=[], total=11, page=0, size=5).total_pages == 3
    assert PageResult(items=[], total=0, page=0, size=5).total_pages == 0


def test_conflict_error_has_its_own_default_code():
    assert ConflictError("Event 7 changed underneath the request").code == ErrorCode.CONFLICT
    assert ConflictError("Category exists", ErrorCode.DUPLICATE_CATEGORY).code == ErrorCode.DUPLICATE_CATEGORY
