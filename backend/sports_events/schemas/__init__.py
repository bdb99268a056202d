from sports_events.schemas.common import Page, ErrorResponse
from sports_events.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse
from sports_events.schemas.venue import VenueCreate, VenueUpdate, VenueResponse
from sports_events.schemas.event import (
    EventCreate, EventUpdate, EventResponse,
    EventAvailabilityResponse, RegistrationStatusResponse, EventStatsResponse,
)
from sports_events.schemas.user import UserCreate, UserUpdate, UserResponse, UserStatsResponse
from sports_events.schemas.booking import BookingResponse, BookingCountResponse, BookingStatsResponse

__all__ = [
    "Page", "ErrorResponse",
    "CategoryCreate", "CategoryUpdate", "CategoryResponse",
    "VenueCreate", "VenueUpdate", "VenueResponse",
    "EventCreate", "EventUpdate", "EventResponse",
    "EventAvailabilityResponse", "RegistrationStatusResponse", "EventStatsResponse",
    "UserCreate", "UserUpdate", "UserResponse", "UserStatsResponse",
    "BookingResponse", "BookingCountResponse", "BookingStatsResponse",
]
