"""
FastAPI dependencies: cache, services and pagination parameters.
"""

from typing import Callable, Optional

from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from sports_events.core.config import get_settings
from sports_events.db.session import get_db
from sports_events.services.booking_service import BookingService
from sports_events.services.cache_service import ReadThroughCache
from sports_events.services.category_service import CategoryService
from sports_events.services.event_service import EventService
from sports_events.services.user_service import UserService
from sports_events.services.venue_service import VenueService
from sports_events.stores.base import PageRequest

settings = get_settings()


def get_cache(request: Request) -> ReadThroughCache:
    """The cache built at startup; a pass-through cache if startup never ran."""
    cache = getattr(request.app.state, "cache", None)
    return cache if cache is not None else ReadThroughCache(None, settings.CACHE_NAMESPACE)


def get_category_service(
    db: AsyncSession = Depends(get_db),
    cache: ReadThroughCache = Depends(get_cache),
) -> CategoryService:
    return CategoryService(db, cache)


def get_venue_service(
    db: AsyncSession = Depends(get_db),
    cache: ReadThroughCache = Depends(get_cache),
) -> VenueService:
    return VenueService(db, cache)


def get_event_service(
    db: AsyncSession = Depends(get_db),
    cache: ReadThroughCache = Depends(get_cache),
) -> EventService:
    return EventService(db, cache)


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


def get_booking_service(db: AsyncSession = Depends(get_db)) -> BookingService:
    return BookingService(db)


def pagination(default_dir: str = "asc") -> Callable[..., PageRequest]:
    """Build a dependency reading page/size/sortBy/sortDir query parameters."""

    def dependency(
        page: int = Query(0, ge=0),
        size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
        sort_by: Optional[str] = Query(None, alias="sortBy"),
        sort_dir: str = Query(default_dir, alias="sortDir", pattern="^(asc|desc|ASC|DESC)$"),
    ) -> PageRequest:
        return PageRequest(page=page, size=size, sort_by=sort_by, sort_dir=sort_dir)

    return dependency
