"""
Venue service: cached lookups and invalidating writes.
"""

from typing import Optional

from pydantic import TypeAdapter
from sqlalchemy.ext.asyncio import AsyncSession

from sports_events.core.exceptions import ConflictError, ErrorCode, NotFoundError
from sports_events.core.logging import get_logger
from sports_events.core.metrics import record_db_operation
from sports_events.db.base import utcnow
from sports_events.models.venue import Venue
from sports_events.schemas.common import Page
from sports_events.schemas.venue import VenueCreate, VenueUpdate, VenueResponse
from sports_events.services.cache_service import CachePartition, ReadThroughCache
from sports_events.stores.base import PageRequest
from sports_events.stores.event_store import EventStore
from sports_events.stores.venue_store import VenueStore

logger = get_logger(__name__)

_one = TypeAdapter(Optional[VenueResponse])
_many = TypeAdapter(list[VenueResponse])
_page = TypeAdapter(Page[VenueResponse])
_cities = TypeAdapter(list[str])

PARTITION = CachePartition.VENUES

# Columns that cannot be cleared by an update
_REQUIRED = ("name", "address", "city")


class VenueService:
    def __init__(self, db: AsyncSession, cache: ReadThroughCache) -> None:
        self.db = db
        self.cache = cache
        self.venues = VenueStore(db)
        self.events = EventStore(db)

    async def list_venues(self, request: PageRequest) -> Page[VenueResponse]:
        async def load():
            return Page[VenueResponse].of(await self.venues.list_page(request), VenueResponse.model_validate)

        return await self.cache.get_or_load(PARTITION, "all-venues", request.cache_args(), _page, load)

    async def list_by_city(self, city: str) -> list[VenueResponse]:
        async def load():
            return [VenueResponse.model_validate(v) for v in await self.venues.list_by_city(city)]

        return await self.cache.get_or_load(PARTITION, "venues-by-city", (city,), _many, load)

    async def list_cities(self) -> list[str]:
        return await self.cache.get_or_load(PARTITION, "venue-cities", (), _cities, self.venues.list_cities)

    async def list_with_upcoming_events(self) -> list[VenueResponse]:
        # Keyed without a timestamp: an event passing its start date does not evict this entry
        async def load():
            return [VenueResponse.model_validate(v) for v in await self.venues.list_with_upcoming_events(utcnow())]

        return await self.cache.get_or_load(PARTITION, "venues-with-events", (), _many, load)

    async def get_venue(self, venue_id: int) -> VenueResponse:
        async def load():
            venue = await self.venues.get(venue_id)
            return VenueResponse.model_validate(venue) if venue else None

        found = await self.cache.get_or_load(PARTITION, "venue-by-id", (venue_id,), _one, load)
        if found is None:
            raise NotFoundError("Venue", venue_id)
        return found

    async def get_by_name(self, name: str) -> VenueResponse:
        async def load():
            venue = await self.venues.get_by_name(name)
            return VenueResponse.model_validate(venue) if venue else None

        found = await self.cache.get_or_load(PARTITION, "venue-by-name", (name,), _one, load)
        if found is None:
            raise NotFoundError("Venue", name)
        return found

    async def search(self, term: str, request: PageRequest) -> Page[VenueResponse]:
        async def load():
            return Page[VenueResponse].of(await self.venues.search(term, request), VenueResponse.model_validate)

        return await self.cache.get_or_load(
            PARTITION, "venue-search", (term.lower(), *request.cache_args()), _page, load
        )

    async def list_by_min_capacity(self, min_capacity: int) -> list[VenueResponse]:
        async def load():
            return [VenueResponse.model_validate(v) for v in await self.venues.list_by_min_capacity(min_capacity)]

        return await self.cache.get_or_load(PARTITION, "venues-by-capacity", (min_capacity,), _many, load)

    async def create_venue(self, data: VenueCreate) -> Venue:
        venue = await self.venues.add(Venue(**data.model_dump()))
        await self.db.commit()
        record_db_operation("insert")
        logger.info("venue_created", venue_id=venue.id, name=venue.name, city=venue.city)

        await self.cache.invalidate(PARTITION)
        return venue

    async def update_venue(self, venue_id: int, data: VenueUpdate) -> Venue:
        venue = await self.venues.get(venue_id)
        if venue is None:
            raise NotFoundError("Venue", venue_id)

        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field not in _REQUIRED
        }
        for field, value in changes.items():
            setattr(venue, field, value)
        await self.db.commit()
        record_db_operation("update")
        logger.info("venue_updated", venue_id=venue_id, fields=sorted(changes))

        await self.cache.invalidate(PARTITION)
        return venue

    async def delete_venue(self, venue_id: int, cascade: bool = False) -> None:
        venue = await self.venues.get(venue_id)
        if venue is None:
            raise NotFoundError("Venue", venue_id)

        event_ids = await self.venues.event_ids(venue_id)
        if event_ids and not cascade:
            raise ConflictError(
                f"Venue {venue_id} still has {len(event_ids)} event(s)", ErrorCode.HAS_DEPENDENTS
            )

        bookings_removed = await self.events.delete_many(event_ids)
        await self.venues.delete(venue)
        await self.db.commit()
        record_db_operation("delete")
        logger.info(
            "venue_deleted",
            venue_id=venue_id,
            events_removed=len(event_ids),
            bookings_removed=bookings_removed,
        )

        await self.cache.invalidate(CachePartition.VENUES, CachePartition.CATEGORIES)
