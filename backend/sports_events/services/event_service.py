"""
Event service handling CRUD operations and listings.

Event reads are never cached: every response carries the live participant
count. Writes still invalidate the category and venue partitions, whose
"with events" lookups depend on events.
"""

from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from sports_events.core.config import get_settings
from sports_events.core.exceptions import ConflictError, ErrorCode, NotFoundError, ValidationError
from sports_events.core.logging import get_logger
from sports_events.core.metrics import record_db_operation
from sports_events.db.base import as_utc, utcnow
from sports_events.models.event import Event, EventStatus
from sports_events.schemas.common import Page
from sports_events.schemas.event import (
    EventCreate,
    EventUpdate,
    EventResponse,
    EventAvailabilityResponse,
    RegistrationStatusResponse,
    EventStatsResponse,
)
from sports_events.services.cache_service import CachePartition, ReadThroughCache
from sports_events.stores.base import PageRequest, PageResult
from sports_events.stores.category_store import CategoryStore
from sports_events.stores.event_store import EventFilter, EventRow, EventStore
from sports_events.stores.venue_store import VenueStore

logger = get_logger(__name__)
settings = get_settings()

# Columns that cannot be cleared by an update
_REQUIRED = ("title", "event_date", "registration_start_date", "registration_end_date", "event_type", "status")


def _to_page(result: PageResult[EventRow], now: datetime) -> Page[EventResponse]:
    return Page[EventResponse].of(result, lambda row: EventResponse.build(row.event, row.participants, now))


class EventService:
    def __init__(self, db: AsyncSession, cache: ReadThroughCache) -> None:
        self.db = db
        self.cache = cache
        self.events = EventStore(db)
        self.categories = CategoryStore(db)
        self.venues = VenueStore(db)

    async def _get_row(self, event_id: int) -> EventRow:
        row = await self.events.get_row(event_id)
        if row is None:
            raise NotFoundError("Event", event_id)
        return row

    async def list_events(self, filters: EventFilter, request: PageRequest) -> Page[EventResponse]:
        """ACTIVE events with open registration, optionally filtered."""
        now = utcnow()
        return _to_page(await self.events.search(filters, now, request), now)

    async def get_event(self, event_id: int) -> EventResponse:
        row = await self._get_row(event_id)
        return EventResponse.build(row.event, row.participants)

    async def list_available(self, request: PageRequest) -> Page[EventResponse]:
        now = utcnow()
        return _to_page(await self.events.list_available(now, request), now)

    async def list_upcoming(self) -> list[EventResponse]:
        """ACTIVE events starting within the upcoming window."""
        now = utcnow()
        rows = await self.events.list_between(now, now + timedelta(days=settings.UPCOMING_WINDOW_DAYS))
        return [EventResponse.build(row.event, row.participants, now) for row in rows]

    async def list_between(self, start: datetime, end: datetime) -> list[EventResponse]:
        start, end = as_utc(start), as_utc(end)
        if start > end:
            raise ValidationError("startDate must not be after endDate")
        now = utcnow()
        rows = await self.events.list_between(start, end)
        return [EventResponse.build(row.event, row.participants, now) for row in rows]

    async def availability(self, event_id: int) -> EventAvailabilityResponse:
        event, participants = await self._get_row(event_id)
        return EventAvailabilityResponse(
            event_id=event_id,
            available=event.has_available_slots(participants),
            current_participants=participants,
            max_participants=event.max_participants,
            remaining_slots=event.remaining_slots(participants),
        )

    async def registration_status(self, event_id: int) -> RegistrationStatusResponse:
        event = await self.events.get(event_id)
        if event is None:
            raise NotFoundError("Event", event_id)
        return RegistrationStatusResponse(
            event_id=event_id,
            registration_open=event.is_registration_open(),
            registration_start_date=event.registration_start_date,
            registration_end_date=event.registration_end_date,
        )

    async def stats(self) -> EventStatsResponse:
        return EventStatsResponse(active_events=await self.events.count_by_status(EventStatus.ACTIVE))

    async def create_event(self, data: EventCreate) -> EventResponse:
        if await self.categories.get(data.category_id) is None:
            raise NotFoundError("Category", data.category_id)
        if await self.venues.get(data.venue_id) is None:
            raise NotFoundError("Venue", data.venue_id)

        event = await self.events.add(Event(**data.model_dump()))
        await self.db.commit()
        record_db_operation("insert")
        logger.info(
            "event_created",
            event_id=event.id,
            title=event.title,
            category_id=event.category_id,
            venue_id=event.venue_id,
            max_participants=event.max_participants,
        )

        await self.cache.invalidate(CachePartition.CATEGORIES, CachePartition.VENUES)
        return EventResponse.build(event, 0)

    async def update_event(self, event_id: int, data: EventUpdate) -> EventResponse:
        event = await self.events.get(event_id)
        if event is None:
            raise NotFoundError("Event", event_id)

        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field not in _REQUIRED
        }
        start = changes.get("registration_start_date", event.registration_start_date)
        end = changes.get("registration_end_date", event.registration_end_date)
        if start >= end:
            raise ValidationError("registration_start_date must be before registration_end_date")

        for field, value in changes.items():
            setattr(event, field, value)
        await self.db.commit()
        record_db_operation("update")
        logger.info("event_updated", event_id=event_id, fields=sorted(changes))

        await self.cache.invalidate(CachePartition.CATEGORIES, CachePartition.VENUES)
        return EventResponse.build(event, await self.events.count_participants(event_id))

    async def delete_event(self, event_id: int, cascade: bool = False) -> None:
        if await self.events.get(event_id) is None:
            raise NotFoundError("Event", event_id)

        bookings = await self.events.count_bookings([event_id])
        if bookings and not cascade:
            raise ConflictError(f"Event {event_id} still has {bookings} booking(s)", ErrorCode.HAS_DEPENDENTS)

        await self.events.delete_many([event_id])
        await self.db.commit()
        record_db_operation("delete")
        logger.info("event_deleted", event_id=event_id, bookings_removed=bookings)

        await self.cache.invalidate(CachePartition.CATEGORIES, CachePartition.VENUES)
