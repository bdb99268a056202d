"""
Pydantic schemas for event request/response validation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from sports_events.db.base import as_utc
from sports_events.models.event import Event, EventType, EventStatus, DifficultyLevel


class EventFields(BaseModel):
    model_config = {"str_strip_whitespace": True}

    description: Optional[str] = Field(None, max_length=1000)
    max_participants: Optional[int] = Field(None, ge=1)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = Field(None, max_length=500)
    banner_url: Optional[str] = Field(None, max_length=500)
    difficulty_level: Optional[DifficultyLevel] = None
    rules: Optional[str] = Field(None, max_length=2000)
    prize_info: Optional[str] = Field(None, max_length=1000)
    contact_info: Optional[str] = Field(None, max_length=500)

    @field_validator("event_date", "registration_start_date", "registration_end_date", check_fields=False)
    @classmethod
    def normalise_to_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value) if value is not None else None


class EventCreate(EventFields):
    title: str = Field(..., min_length=1, max_length=200)
    event_date: datetime
    registration_start_date: datetime
    registration_end_date: datetime
    event_type: EventType
    status: EventStatus = EventStatus.ACTIVE
    category_id: int
    venue_id: int

    @model_validator(mode="after")
    def check_registration_window(self) -> "EventCreate":
        if self.registration_start_date >= self.registration_end_date:
            raise ValueError("registration_start_date must be before registration_end_date")
        return self


class EventUpdate(EventFields):
    """Partial update. Category and venue are fixed at creation."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    event_date: Optional[datetime] = None
    registration_start_date: Optional[datetime] = None
    registration_end_date: Optional[datetime] = None
    event_type: Optional[EventType] = None
    status: Optional[EventStatus] = None


class EventResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    event_date: datetime
    registration_start_date: datetime
    registration_end_date: datetime
    max_participants: Optional[int]
    price: Optional[Decimal]
    image_url: Optional[str]
    banner_url: Optional[str]
    event_type: EventType
    difficulty_level: Optional[DifficultyLevel]
    status: EventStatus
    rules: Optional[str]
    prize_info: Optional[str]
    contact_info: Optional[str]
    category_id: int
    venue_id: int
    current_participants: int
    has_available_slots: bool
    is_registration_open: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def build(cls, event: Event, participants: int, now: Optional[datetime] = None) -> "EventResponse":
        return cls(
            id=event.id,
            title=event.title,
            description=event.description,
            event_date=event.event_date,
            registration_start_date=event.registration_start_date,
            registration_end_date=event.registration_end_date,
            max_participants=event.max_participants,
            price=event.price,
            image_url=event.image_url,
            banner_url=event.banner_url,
            event_type=event.event_type,
            difficulty_level=event.difficulty_level,
            status=event.status,
            rules=event.rules,
            prize_info=event.prize_info,
            contact_info=event.contact_info,
            category_id=event.category_id,
            venue_id=event.venue_id,
            current_participants=participants,
            has_available_slots=event.has_available_slots(participants),
            is_registration_open=event.is_registration_open(now),
            created_at=event.created_at,
            updated_at=event.updated_at,
        )


class EventAvailabilityResponse(BaseModel):
    event_id: int
    available: bool
    current_participants: int
    max_participants: Optional[int]
    remaining_slots: Optional[int]


class RegistrationStatusResponse(BaseModel):
    event_id: int
    registration_open: bool
    registration_start_date: datetime
    registration_end_date: datetime


class EventStatsResponse(BaseModel):
    active_events: int
