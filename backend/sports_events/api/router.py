"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter

from sports_events.api.routes import bookings, categories, events, users, venues
from sports_events.core.config import get_settings

settings = get_settings()

api_router = APIRouter(prefix=settings.API_PREFIX)
api_router.include_router(categories.router)
api_router.include_router(venues.router)
api_router.include_router(events.router)
api_router.include_router(users.router)
api_router.include_router(bookings.router)
