"""
Event endpoints. Not cached: every response carries live participant counts.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from sports_events.api.dependencies import get_event_service, pagination
from sports_events.models.event import EventType
from sports_events.schemas.common import Page
from sports_events.schemas.event import (
    EventCreate,
    EventUpdate,
    EventResponse,
    EventAvailabilityResponse,
    RegistrationStatusResponse,
    EventStatsResponse,
)
from sports_events.services.event_service import EventService
from sports_events.stores.base import PageRequest
from sports_events.stores.event_store import EventFilter

router = APIRouter(prefix="/events", tags=["Events"])


@router.get("", response_model=Page[EventResponse])
async def list_events(
    category: Optional[int] = Query(None),
    city: Optional[str] = Query(None),
    event_type: Optional[EventType] = Query(None, alias="type"),
    q: Optional[str] = Query(None),
    request: PageRequest = Depends(pagination()),
    service: EventService = Depends(get_event_service),
):
    """ACTIVE events open for registration, filterable by category, city, type and text."""
    filters = EventFilter(category_id=category, city=city, event_type=event_type, query=q)
    return await service.list_events(filters, request)


@router.get("/available", response_model=Page[EventResponse])
async def list_available_events(
    request: PageRequest = Depends(pagination()),
    service: EventService = Depends(get_event_service),
):
    """Open for registration and not yet full."""
    return await service.list_available(request)


@router.get("/upcoming", response_model=list[EventResponse])
async def list_upcoming_events(service: EventService = Depends(get_event_service)):
    return await service.list_upcoming()


@router.get("/upcoming/range", response_model=list[EventResponse])
async def list_events_in_range(
    start_date: datetime = Query(..., alias="startDate"),
    end_date: datetime = Query(..., alias="endDate"),
    service: EventService = Depends(get_event_service),
):
    return await service.list_between(start_date, end_date)


@router.get("/stats", response_model=EventStatsResponse)
async def event_stats(service: EventService = Depends(get_event_service)):
    return await service.stats()


@router.get("/search", response_model=Page[EventResponse])
async def search_events(
    q: str = Query(..., min_length=1),
    request: PageRequest = Depends(pagination()),
    service: EventService = Depends(get_event_service),
):
    return await service.list_events(EventFilter(query=q), request)


@router.get("/category/{category_id}", response_model=Page[EventResponse])
async def list_events_by_category(
    category_id: int,
    request: PageRequest = Depends(pagination()),
    service: EventService = Depends(get_event_service),
):
    return await service.list_events(EventFilter(category_id=category_id), request)


@router.get("/city/{city}", response_model=Page[EventResponse])
async def list_events_by_city(
    city: str,
    request: PageRequest = Depends(pagination()),
    service: EventService = Depends(get_event_service),
):
    return await service.list_events(EventFilter(city=city), request)


@router.get("/type/{event_type}", response_model=Page[EventResponse])
async def list_events_by_type(
    event_type: EventType,
    request: PageRequest = Depends(pagination()),
    service: EventService = Depends(get_event_service),
):
    return await service.list_events(EventFilter(event_type=event_type), request)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: int, service: EventService = Depends(get_event_service)):
    return await service.get_event(event_id)


@router.get("/{event_id}/availability", response_model=EventAvailabilityResponse)
async def event_availability(event_id: int, service: EventService = Depends(get_event_service)):
    return await service.availability(event_id)


@router.get("/{event_id}/registration-status", response_model=RegistrationStatusResponse)
async def event_registration_status(event_id: int, service: EventService = Depends(get_event_service)):
    return await service.registration_status(event_id)


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(data: EventCreate, service: EventService = Depends(get_event_service)):
    return await service.create_event(data)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(event_id: int, data: EventUpdate, service: EventService = Depends(get_event_service)):
    return await service.update_event(event_id, data)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: int,
    cascade: bool = Query(False),
    service: EventService = Depends(get_event_service),
):
    """Delete an event. With cascade=true its bookings go too."""
    await service.delete_event(event_id, cascade)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
