from sports_events.models.category import Category
from sports_events.models.venue import Venue
from sports_events.models.event import Event, EventType, EventStatus, DifficultyLevel
from sports_events.models.user import User
from sports_events.models.booking import Booking, BookingStatus, PaymentStatus

__all__ = [
    "Category", "Venue",
    "Event", "EventType", "EventStatus", "DifficultyLevel",
    "User",
    "Booking", "BookingStatus", "PaymentStatus",
]
