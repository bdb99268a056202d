"""
Event persistence.

Listing queries return each event together with its live participant count,
computed by a correlated subquery over occupying bookings.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple, Optional

from sqlalchemy import select, update, delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from sports_events.models.booking import Booking, OCCUPYING_STATUSES
from sports_events.models.event import Event, EventStatus, EventType
from sports_events.models.venue import Venue
from sports_events.stores.base import PageRequest, PageResult, order_by, paginate

SORTABLE = {
    "id": Event.id,
    "title": Event.title,
    "event_date": Event.event_date,
    "price": Event.price,
    "registration_end_date": Event.registration_end_date,
    "created_at": Event.created_at,
}


class EventRow(NamedTuple):
    event: Event
    participants: int


@dataclass(frozen=True)
class EventFilter:
    category_id: Optional[int] = None
    city: Optional[str] = None
    event_type: Optional[EventType] = None
    query: Optional[str] = None


def participants_count():
    return (
        select(func.count(Booking.id))
        .where(Booking.event_id == Event.id, Booking.booking_status.in_(OCCUPYING_STATUSES))
        .correlate(Event)
        .scalar_subquery()
    )


def participants_column():
    return participants_count().label("participants")


def _open_registration(now: datetime):
    return (
        Event.status == EventStatus.ACTIVE,
        Event.registration_start_date <= now,
        Event.registration_end_date > now,
    )


def _rows(result_rows) -> list[EventRow]:
    return [EventRow(event, participants or 0) for event, participants in result_rows]


class EventStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, event_id: int, fresh: bool = False) -> Optional[Event]:
        """With `fresh`, reload from the database even if the event is already in the session."""
        return await self.db.get(Event, event_id, populate_existing=fresh)

    async def get_row(self, event_id: int) -> Optional[EventRow]:
        result = await self.db.execute(select(Event, participants_column()).where(Event.id == event_id))
        row = result.first()
        return EventRow(row[0], row[1] or 0) if row else None

    async def count_participants(self, event_id: int) -> int:
        result = await self.db.execute(
            select(func.count(Booking.id)).where(
                Booking.event_id == event_id,
                Booking.booking_status.in_(OCCUPYING_STATUSES),
            )
        )
        return result.scalar_one()

    async def claim(self, event_id: int) -> bool:
        """
        Take the write claim on an event row for the rest of the transaction.
        Returns False when the event does not exist.
        """
        result = await self.db.execute(
            update(Event)
            .where(Event.id == event_id)
            # updated_at is pinned: a claim is not an edit of the event
            .values(version=Event.version + 1, updated_at=Event.updated_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def search(
        self,
        filters: EventFilter,
        now: datetime,
        request: PageRequest,
        open_only: bool = True,
    ) -> PageResult[EventRow]:
        query = select(Event, participants_column())
        if filters.city is not None:
            query = query.join(Venue, Venue.id == Event.venue_id).where(Venue.city == filters.city)
        if open_only:
            query = query.where(*_open_registration(now))
        if filters.category_id is not None:
            query = query.where(Event.category_id == filters.category_id)
        if filters.event_type is not None:
            query = query.where(Event.event_type == filters.event_type)
        if filters.query:
            pattern = f"%{filters.query.lower()}%"
            query = query.where(
                or_(func.lower(Event.title).like(pattern), func.lower(Event.description).like(pattern))
            )

        query = order_by(query, request, SORTABLE, default="event_date")
        page = await paginate(self.db, query, request, scalars=False)
        page.items = _rows(page.items)
        return page

    async def list_available(self, now: datetime, request: PageRequest) -> PageResult[EventRow]:
        """Open for registration and below capacity."""
        query = select(Event, participants_column()).where(
            *_open_registration(now),
            or_(Event.max_participants.is_(None), participants_count() < Event.max_participants),
        )
        query = order_by(query, request, SORTABLE, default="event_date")
        page = await paginate(self.db, query, request, scalars=False)
        page.items = _rows(page.items)
        return page

    async def list_between(self, start: datetime, end: datetime) -> list[EventRow]:
        result = await self.db.execute(
            select(Event, participants_column())
            .where(
                Event.status == EventStatus.ACTIVE,
                Event.event_date >= start,
                Event.event_date <= end,
            )
            .order_by(Event.event_date.asc(), Event.id)
        )
        return _rows(result.all())

    async def count_by_status(self, status: EventStatus) -> int:
        result = await self.db.execute(select(func.count(Event.id)).where(Event.status == status))
        return result.scalar_one()

    async def count_bookings(self, event_ids: list[int]) -> int:
        """All bookings on the given events, cancelled ones included."""
        if not event_ids:
            return 0
        result = await self.db.execute(
            select(func.count(Booking.id)).where(Booking.event_id.in_(event_ids))
        )
        return result.scalar_one()

    async def add(self, event: Event) -> Event:
        self.db.add(event)
        await self.db.flush()
        return event

    async def delete_many(self, event_ids: list[int]) -> int:
        """Delete events and their bookings. Returns the number of bookings removed."""
        if not event_ids:
            return 0
        removed = await self.db.execute(delete(Booking).where(Booking.event_id.in_(event_ids)))
        await self.db.execute(delete(Event).where(Event.id.in_(event_ids)))
        return removed.rowcount
