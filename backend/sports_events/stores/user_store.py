"""
User persistence.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import select, delete, func, exists
from sqlalchemy.ext.asyncio import AsyncSession

from sports_events.models.booking import Booking, BookingStatus
from sports_events.models.event import Event
from sports_events.models.user import User
from sports_events.stores.base import PageRequest, PageResult, order_by, paginate

SORTABLE = {
    "id": User.id,
    "first_name": User.first_name,
    "last_name": User.last_name,
    "email": User.email,
    "city": User.city,
    "created_at": User.created_at,
}


class UserStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, user_id: int) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(func.lower(User.email) == email.lower()))
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str, exclude_id: Optional[int] = None) -> bool:
        conditions = [func.lower(User.email) == email.lower()]
        if exclude_id is not None:
            conditions.append(User.id != exclude_id)
        return bool((await self.db.execute(select(exists().where(*conditions)))).scalar())

    async def list_page(self, request: PageRequest) -> PageResult[User]:
        query = order_by(select(User), request, SORTABLE, default="last_name")
        return await paginate(self.db, query, request)

    async def list_by_city(self, city: str) -> list[User]:
        result = await self.db.execute(
            select(User).where(User.city == city).order_by(User.first_name.asc(), User.last_name.asc())
        )
        return list(result.scalars().all())

    async def list_with_upcoming_bookings(self, now: datetime) -> list[User]:
        upcoming = (
            select(Booking.id)
            .join(Event, Event.id == Booking.event_id)
            .where(
                Booking.user_id == User.id,
                Booking.booking_status == BookingStatus.CONFIRMED,
                Event.event_date >= now,
            )
            .exists()
        )
        result = await self.db.execute(
            select(User).where(upcoming).order_by(User.first_name.asc(), User.last_name.asc())
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        return (await self.db.execute(select(func.count(User.id)))).scalar_one()

    async def count_bookings(self, user_id: int) -> int:
        result = await self.db.execute(select(func.count(Booking.id)).where(Booking.user_id == user_id))
        return result.scalar_one()

    async def add(self, user: User) -> User:
        self.db.add(user)
        await self.db.flush()
        return user

    async def delete(self, user: User) -> int:
        """Delete the user and any bookings they hold. Returns bookings removed."""
        removed = await self.db.execute(delete(Booking).where(Booking.user_id == user.id))
        await self.db.delete(user)
        await self.db.flush()
        return removed.rowcount
