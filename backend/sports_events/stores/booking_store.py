"""
Booking persistence: lookups by user, event and status, plus counts.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from sports_events.models.booking import Booking, BookingStatus, PaymentStatus
from sports_events.models.event import Event
from sports_events.stores.base import PageRequest, PageResult, order_by, paginate

SORTABLE = {
    "id": Booking.id,
    "booking_date": Booking.booking_date,
    "total_amount": Booking.total_amount,
    "created_at": Booking.created_at,
}


class BookingStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, booking_id: int) -> Optional[Booking]:
        return await self.db.get(Booking, booking_id)

    async def find_by_user_and_event(self, user_id: int, event_id: int) -> Optional[Booking]:
        result = await self.db.execute(
            select(Booking).where(Booking.user_id == user_id, Booking.event_id == event_id)
        )
        return result.scalar_one_or_none()

    async def list_by_user(self, user_id: int, request: PageRequest) -> PageResult[Booking]:
        query = order_by(select(Booking).where(Booking.user_id == user_id), request, SORTABLE, "booking_date")
        return await paginate(self.db, query, request)

    async def list_confirmed_by_event(self, event_id: int) -> list[Booking]:
        result = await self.db.execute(
            select(Booking)
            .where(Booking.event_id == event_id, Booking.booking_status == BookingStatus.CONFIRMED)
            .order_by(Booking.booking_date.asc(), Booking.id)
        )
        return list(result.scalars().all())

    async def list_upcoming_by_user(self, user_id: int, now: datetime) -> list[Booking]:
        result = await self.db.execute(
            select(Booking)
            .join(Event, Event.id == Booking.event_id)
            .where(
                Booking.user_id == user_id,
                Booking.booking_status == BookingStatus.CONFIRMED,
                Event.event_date >= now,
            )
            .order_by(Event.event_date.asc(), Booking.id)
        )
        return list(result.scalars().all())

    async def list_by_payment_status(self, status: PaymentStatus) -> list[Booking]:
        result = await self.db.execute(
            select(Booking).where(Booking.payment_status == status).order_by(Booking.booking_date.desc())
        )
        return list(result.scalars().all())

    async def list_by_booking_status(self, status: BookingStatus) -> list[Booking]:
        result = await self.db.execute(
            select(Booking).where(Booking.booking_status == status).order_by(Booking.booking_date.desc())
        )
        return list(result.scalars().all())

    async def list_recent(self, since: datetime, request: PageRequest) -> PageResult[Booking]:
        query = order_by(select(Booking).where(Booking.booking_date >= since), request, SORTABLE, "booking_date")
        return await paginate(self.db, query, request)

    async def list_for_events_between(self, start: datetime, end: datetime) -> list[Booking]:
        result = await self.db.execute(
            select(Booking)
            .join(Event, Event.id == Booking.event_id)
            .where(
                Booking.booking_status == BookingStatus.CONFIRMED,
                Event.event_date >= start,
                Event.event_date <= end,
            )
            .order_by(Event.event_date.asc(), Booking.id)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        return (await self.db.execute(select(func.count(Booking.id)))).scalar_one()

    async def count_by_booking_status(self) -> dict[BookingStatus, int]:
        result = await self.db.execute(
            select(Booking.booking_status, func.count(Booking.id)).group_by(Booking.booking_status)
        )
        return {status: count for status, count in result.all()}

    async def count_by_payment_status(self) -> dict[PaymentStatus, int]:
        result = await self.db.execute(
            select(Booking.payment_status, func.count(Booking.id)).group_by(Booking.payment_status)
        )
        return {status: count for status, count in result.all()}

    async def count_confirmed_by_event(self, event_id: int) -> int:
        result = await self.db.execute(
            select(func.count(Booking.id)).where(
                Booking.event_id == event_id,
                Booking.booking_status == BookingStatus.CONFIRMED,
            )
        )
        return result.scalar_one()

    async def add(self, booking: Booking) -> Booking:
        self.db.add(booking)
        await self.db.flush()
        return booking
