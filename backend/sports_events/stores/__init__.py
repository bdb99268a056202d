"""
Persistence layer: one store per entity type. Stores flush but never commit;
transaction boundaries belong to the services.
"""

from sports_events.stores.base import PageRequest, PageResult
from sports_events.stores.category_store import CategoryStore
from sports_events.stores.venue_store import VenueStore
from sports_events.stores.event_store import EventStore, EventFilter, EventRow
from sports_events.stores.user_store import UserStore
from sports_events.stores.booking_store import BookingStore

__all__ = [
    "PageRequest", "PageResult",
    "CategoryStore", "VenueStore", "EventStore", "EventFilter", "EventRow",
    "UserStore", "BookingStore",
]
