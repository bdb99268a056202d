"""
Venue endpoints. Reads are served through the read-through cache.
"""

from fastapi import APIRouter, Depends, Query, Response, status

from sports_events.api.dependencies import get_venue_service, pagination
from sports_events.schemas.common import Page
from sports_events.schemas.venue import VenueCreate, VenueUpdate, VenueResponse
from sports_events.services.venue_service import VenueService
from sports_events.stores.base import PageRequest

router = APIRouter(prefix="/venues", tags=["Venues"])


@router.get("", response_model=Page[VenueResponse])
async def list_venues(
    request: PageRequest = Depends(pagination()),
    service: VenueService = Depends(get_venue_service),
):
    return await service.list_venues(request)


@router.get("/cities", response_model=list[str])
async def list_cities(service: VenueService = Depends(get_venue_service)):
    return await service.list_cities()


@router.get("/with-events", response_model=list[VenueResponse])
async def list_venues_with_events(service: VenueService = Depends(get_venue_service)):
    """Venues hosting at least one upcoming ACTIVE event."""
    return await service.list_with_upcoming_events()


@router.get("/search", response_model=Page[VenueResponse])
async def search_venues(
    q: str = Query(..., min_length=1),
    request: PageRequest = Depends(pagination()),
    service: VenueService = Depends(get_venue_service),
):
    return await service.search(q, request)


@router.get("/city/{city}", response_model=list[VenueResponse])
async def list_venues_by_city(city: str, service: VenueService = Depends(get_venue_service)):
    return await service.list_by_city(city)


@router.get("/capacity/{min_capacity}", response_model=list[VenueResponse])
async def list_venues_by_capacity(min_capacity: int, service: VenueService = Depends(get_venue_service)):
    return await service.list_by_min_capacity(min_capacity)


@router.get("/name/{name}", response_model=VenueResponse)
async def get_venue_by_name(name: str, service: VenueService = Depends(get_venue_service)):
    return await service.get_by_name(name)


@router.get("/{venue_id}", response_model=VenueResponse)
async def get_venue(venue_id: int, service: VenueService = Depends(get_venue_service)):
    return await service.get_venue(venue_id)


@router.post("", response_model=VenueResponse, status_code=status.HTTP_201_CREATED)
async def create_venue(data: VenueCreate, service: VenueService = Depends(get_venue_service)):
    return await service.create_venue(data)


@router.put("/{venue_id}", response_model=VenueResponse)
async def update_venue(venue_id: int, data: VenueUpdate, service: VenueService = Depends(get_venue_service)):
    return await service.update_venue(venue_id, data)


@router.delete("/{venue_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_venue(
    venue_id: int,
    cascade: bool = Query(False),
    service: VenueService = Depends(get_venue_service),
):
    """Delete a venue. With cascade=true its events and their bookings go too."""
    await service.delete_venue(venue_id, cascade)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
