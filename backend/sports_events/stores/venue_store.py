"""
Venue persistence: lookups by city, name, capacity and substring search.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import select, func, exists, or_
from sqlalchemy.ext.asyncio import AsyncSession

from sports_events.models.venue import Venue
from sports_events.models.event import Event, EventStatus
from sports_events.stores.base import PageRequest, PageResult, order_by, paginate

SORTABLE = {
    "id": Venue.id,
    "name": Venue.name,
    "city": Venue.city,
    "capacity": Venue.capacity,
    "created_at": Venue.created_at,
}


class VenueStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, venue_id: int) -> Optional[Venue]:
        return await self.db.get(Venue, venue_id)

    async def get_by_name(self, name: str) -> Optional[Venue]:
        result = await self.db.execute(select(Venue).where(Venue.name == name).order_by(Venue.id).limit(1))
        return result.scalar_one_or_none()

    async def list_page(self, request: PageRequest) -> PageResult[Venue]:
        query = order_by(select(Venue), request, SORTABLE, default="name")
        return await paginate(self.db, query, request)

    async def list_by_city(self, city: str) -> list[Venue]:
        result = await self.db.execute(select(Venue).where(Venue.city == city).order_by(Venue.name.asc()))
        return list(result.scalars().all())

    async def list_cities(self) -> list[str]:
        result = await self.db.execute(select(Venue.city).distinct().order_by(Venue.city.asc()))
        return list(result.scalars().all())

    async def list_with_upcoming_events(self, now: datetime) -> list[Venue]:
        upcoming = exists().where(
            Event.venue_id == Venue.id,
            Event.status == EventStatus.ACTIVE,
            Event.event_date >= now,
        )
        result = await self.db.execute(select(Venue).where(upcoming).order_by(Venue.name.asc()))
        return list(result.scalars().all())

    async def search(self, term: str, request: PageRequest) -> PageResult[Venue]:
        """Case-insensitive substring match on name or city."""
        pattern = f"%{term.lower()}%"
        query = select(Venue).where(
            or_(func.lower(Venue.name).like(pattern), func.lower(Venue.city).like(pattern))
        )
        query = order_by(query, request, SORTABLE, default="name")
        return await paginate(self.db, query, request)

    async def list_by_min_capacity(self, min_capacity: int) -> list[Venue]:
        result = await self.db.execute(
            select(Venue).where(Venue.capacity >= min_capacity).order_by(Venue.capacity.asc(), Venue.id)
        )
        return list(result.scalars().all())

    async def event_ids(self, venue_id: int) -> list[int]:
        result = await self.db.execute(select(Event.id).where(Event.venue_id == venue_id))
        return list(result.scalars().all())

    async def add(self, venue: Venue) -> Venue:
        self.db.add(venue)
        await self.db.flush()
        return venue

    async def delete(self, venue: Venue) -> None:
        await self.db.delete(venue)
        await self.db.flush()
