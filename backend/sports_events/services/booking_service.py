"""
Booking service with concurrency-safe capacity checks.

CONCURRENCY STRATEGY: Event Row Claim
=====================================

Problem:
  Two users try to book the last slot simultaneously.
  Both count participants = max - 1, both insert.
  Result: Overbooking.

Solution:
  The participant count is never stored; it is recomputed from bookings.
  So there is no counter to update conditionally. Instead each booking
  transaction first claims the event row:

    UPDATE events SET version = version + 1 WHERE id = :event_id

  1. The UPDATE takes the row write lock (PostgreSQL) or the database
     write lock (SQLite) and holds it until commit/rollback
  2. A second booking for the same event blocks on its own UPDATE until
     the first transaction finishes
  3. It then reads the live participant count, which includes the
     booking that just committed

  Bookings for different events do not contend (PostgreSQL). No retry
  loop is needed: the claim never "loses", it waits.

  rowcount == 0 on the claim means the event does not exist.

  The unique constraint on (user_id, event_id) is the final safety net
  against duplicate bookings; a violation is reported as DUPLICATE_BOOKING.
  Lock timeouts and dropped connections surface as StoreUnavailableError
  (transient, safe to retry).
"""

import time
from datetime import timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from sports_events.core.exceptions import (
    ConflictError,
    DomainError,
    ErrorCode,
    NotFoundError,
    StoreUnavailableError,
)
from sports_events.core.logging import get_logger
from sports_events.core.metrics import (
    booking_latency,
    record_booking_attempt,
    record_db_operation,
    record_status_change,
)
from sports_events.db.base import utcnow
from sports_events.models.booking import (
    Booking,
    BookingStatus,
    PaymentStatus,
    can_transition_booking,
    can_transition_payment,
)
from sports_events.schemas.booking import BookingStatsResponse
from sports_events.stores.base import PageRequest, PageResult
from sports_events.stores.booking_store import BookingStore
from sports_events.stores.event_store import EventStore
from sports_events.stores.user_store import UserStore

logger = get_logger(__name__)


class BookingService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.bookings = BookingStore(db)
        self.events = EventStore(db)
        self.users = UserStore(db)

    async def create_booking(
        self,
        user_id: int,
        event_id: int,
        notes: Optional[str] = None,
        emergency_contact: Optional[str] = None,
    ) -> Booking:
        """
        Book a slot on an event for a user.

        Checks, in order: user exists, event exists, no existing booking for
        the pair, a slot is free, registration is open. The first failing
        check decides the error.
        """
        start = time.perf_counter()
        try:
            booking = await self._create_booking(user_id, event_id, notes, emergency_contact)
        except NotFoundError as e:
            await self.db.rollback()
            record_booking_attempt("not_found")
            logger.info("booking_rejected", user_id=user_id, event_id=event_id, reason=e.code.value)
            raise
        except ConflictError as e:
            await self.db.rollback()
            record_booking_attempt("conflict")
            logger.info("booking_rejected", user_id=user_id, event_id=event_id, reason=e.code.value)
            raise
        except DomainError:
            await self.db.rollback()
            record_booking_attempt("error")
            raise
        finally:
            booking_latency.observe(time.perf_counter() - start)

        record_booking_attempt("success")
        return booking

    async def _create_booking(
        self,
        user_id: int,
        event_id: int,
        notes: Optional[str],
        emergency_contact: Optional[str],
    ) -> Booking:
        try:
            # Claim first: no read may precede the write lock in this transaction
            claimed = await self.events.claim(event_id)

            if await self.users.get(user_id) is None:
                raise NotFoundError("User", user_id)
            if not claimed:
                raise NotFoundError("Event", event_id)

            event = await self.events.get(event_id, fresh=True)

            if await self.bookings.find_by_user_and_event(user_id, event_id) is not None:
                raise ConflictError(
                    f"User {user_id} already has a booking for event {event_id}",
                    ErrorCode.DUPLICATE_BOOKING,
                )

            participants = await self.events.count_participants(event_id)
            if not event.has_available_slots(participants):
                logger.warning(
                    "booking_failed_no_slots",
                    event_id=event_id,
                    participants=participants,
                    max_participants=event.max_participants,
                )
                raise ConflictError(f"Event {event_id} is fully booked", ErrorCode.CAPACITY_EXCEEDED)

            now = utcnow()
            if not event.is_registration_open(now):
                raise ConflictError(
                    f"Registration for event {event_id} is not open", ErrorCode.REGISTRATION_CLOSED
                )

            booking = await self.bookings.add(
                Booking(
                    user_id=user_id,
                    event_id=event_id,
                    booking_date=now,
                    total_amount=event.price,
                    payment_status=PaymentStatus.PENDING,
                    booking_status=BookingStatus.CONFIRMED,
                    notes=notes,
                    emergency_contact=emergency_contact,
                )
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(
                f"User {user_id} already has a booking for event {event_id}",
                ErrorCode.DUPLICATE_BOOKING,
            )
        except OperationalError as e:
            await self.db.rollback()
            logger.error("booking_store_unavailable", event_id=event_id, error=str(e.orig))
            raise StoreUnavailableError()

        record_db_operation("insert")
        logger.info(
            "booking_created",
            booking_id=booking.id,
            user_id=user_id,
            event_id=event_id,
            participants=participants + 1,
            max_participants=event.max_participants,
        )
        return booking

    async def get_booking(self, booking_id: int) -> Booking:
        booking = await self.bookings.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking", booking_id)
        return booking

    async def update_booking_status(self, booking_id: int, status: BookingStatus) -> Booking:
        booking = await self.get_booking(booking_id)
        if not can_transition_booking(booking.booking_status, status):
            raise ConflictError(
                f"Cannot change booking status from {booking.booking_status.value} to {status.value}",
                ErrorCode.INVALID_STATUS_TRANSITION,
            )

        previous = booking.booking_status
        booking.booking_status = status
        await self.db.commit()
        record_status_change("booking")
        logger.info("booking_status_changed", booking_id=booking_id, old=previous.value, new=status.value)
        return booking

    async def update_payment_status(
        self,
        booking_id: int,
        status: PaymentStatus,
        payment_reference: Optional[str] = None,
    ) -> Booking:
        booking = await self.get_booking(booking_id)
        if not can_transition_payment(booking.payment_status, status):
            raise ConflictError(
                f"Cannot change payment status from {booking.payment_status.value} to {status.value}",
                ErrorCode.INVALID_STATUS_TRANSITION,
            )

        previous = booking.payment_status
        booking.payment_status = status
        if payment_reference is not None:
            booking.payment_reference = payment_reference
        await self.db.commit()
        record_status_change("payment")
        logger.info("payment_status_changed", booking_id=booking_id, old=previous.value, new=status.value)
        return booking

    async def cancel_booking(self, booking_id: int) -> Booking:
        booking = await self.get_booking(booking_id)
        event = await self.events.get(booking.event_id)
        if not booking.can_be_cancelled(event):
            raise ConflictError(
                f"Booking {booking_id} cannot be cancelled", ErrorCode.BOOKING_NOT_CANCELLABLE
            )

        booking.booking_status = BookingStatus.CANCELLED
        await self.db.commit()
        record_status_change("cancel")
        logger.info("booking_cancelled", booking_id=booking_id, event_id=booking.event_id)
        return booking

    # Queries

    async def list_by_user(self, user_id: int, request: PageRequest) -> PageResult[Booking]:
        return await self.bookings.list_by_user(user_id, request)

    async def list_confirmed_by_event(self, event_id: int) -> list[Booking]:
        return await self.bookings.list_confirmed_by_event(event_id)

    async def get_by_user_and_event(self, user_id: int, event_id: int) -> Booking:
        booking = await self.bookings.find_by_user_and_event(user_id, event_id)
        if booking is None:
            raise NotFoundError("Booking", f"for user {user_id} and event {event_id}")
        return booking

    async def list_upcoming_by_user(self, user_id: int) -> list[Booking]:
        return await self.bookings.list_upcoming_by_user(user_id, utcnow())

    async def list_recent(self, days_back: int, request: PageRequest) -> PageResult[Booking]:
        return await self.bookings.list_recent(utcnow() - timedelta(days=days_back), request)

    async def list_by_payment_status(self, status: PaymentStatus) -> list[Booking]:
        return await self.bookings.list_by_payment_status(status)

    async def list_by_booking_status(self, status: BookingStatus) -> list[Booking]:
        return await self.bookings.list_by_booking_status(status)

    async def list_starting_soon(self, days: int) -> list[Booking]:
        now = utcnow()
        return await self.bookings.list_for_events_between(now, now + timedelta(days=days))

    async def count_confirmed_by_event(self, event_id: int) -> int:
        return await self.bookings.count_confirmed_by_event(event_id)

    async def stats(self) -> BookingStatsResponse:
        return BookingStatsResponse(
            total_bookings=await self.bookings.count(),
            by_booking_status=await self.bookings.count_by_booking_status(),
            by_payment_status=await self.bookings.count_by_payment_status(),
        )
