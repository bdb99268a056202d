"""
Booking endpoints: the booking workflow, status changes and queries.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from sports_events.api.dependencies import get_booking_service, pagination
from sports_events.core.config import get_settings
from sports_events.models.booking import BookingStatus, PaymentStatus
from sports_events.schemas.booking import BookingResponse, BookingCountResponse, BookingStatsResponse
from sports_events.schemas.common import Page
from sports_events.services.booking_service import BookingService
from sports_events.stores.base import PageRequest

settings = get_settings()
router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("", response_model=BookingResponse)
async def create_booking(
    user_id: int = Query(..., alias="userId"),
    event_id: int = Query(..., alias="eventId"),
    notes: Optional[str] = Query(None, max_length=500),
    emergency_contact: Optional[str] = Query(None, alias="emergencyContact", max_length=100),
    service: BookingService = Depends(get_booking_service),
):
    """
    Book a slot on an event.

    Concurrency-safe: bookings for the same event are serialized, so the
    capacity check always sees every booking committed before it.
    Returns 400 on duplicate booking, full event or closed registration.
    """
    return await service.create_booking(user_id, event_id, notes, emergency_contact)


@router.get("/stats", response_model=BookingStatsResponse)
async def booking_stats(service: BookingService = Depends(get_booking_service)):
    return await service.stats()


@router.get("/recent", response_model=Page[BookingResponse])
async def list_recent_bookings(
    days_back: int = Query(settings.RECENT_BOOKINGS_DAYS, alias="daysBack", ge=0),
    request: PageRequest = Depends(pagination("desc")),
    service: BookingService = Depends(get_booking_service),
):
    result = await service.list_recent(days_back, request)
    return Page[BookingResponse].of(result, BookingResponse.model_validate)


@router.get("/starting-soon", response_model=list[BookingResponse])
async def list_bookings_starting_soon(
    days: int = Query(settings.UPCOMING_WINDOW_DAYS, ge=0),
    service: BookingService = Depends(get_booking_service),
):
    """Confirmed bookings for events starting within the next `days` days."""
    return await service.list_starting_soon(days)


@router.get("/payment-status/{payment_status}", response_model=list[BookingResponse])
async def list_bookings_by_payment_status(
    payment_status: PaymentStatus,
    service: BookingService = Depends(get_booking_service),
):
    return await service.list_by_payment_status(payment_status)


@router.get("/status/{booking_status}", response_model=list[BookingResponse])
async def list_bookings_by_status(
    booking_status: BookingStatus,
    service: BookingService = Depends(get_booking_service),
):
    return await service.list_by_booking_status(booking_status)


@router.get("/user/{user_id}", response_model=Page[BookingResponse])
async def list_user_bookings(
    user_id: int,
    request: PageRequest = Depends(pagination("desc")),
    service: BookingService = Depends(get_booking_service),
):
    result = await service.list_by_user(user_id, request)
    return Page[BookingResponse].of(result, BookingResponse.model_validate)


@router.get("/user/{user_id}/upcoming", response_model=list[BookingResponse])
async def list_user_upcoming_bookings(user_id: int, service: BookingService = Depends(get_booking_service)):
    return await service.list_upcoming_by_user(user_id)


@router.get("/user/{user_id}/event/{event_id}", response_model=BookingResponse)
async def get_user_event_booking(
    user_id: int,
    event_id: int,
    service: BookingService = Depends(get_booking_service),
):
    return await service.get_by_user_and_event(user_id, event_id)


@router.get("/event/{event_id}", response_model=list[BookingResponse])
async def list_event_bookings(event_id: int, service: BookingService = Depends(get_booking_service)):
    """Confirmed bookings for an event, oldest first."""
    return await service.list_confirmed_by_event(event_id)


@router.get("/event/{event_id}/count", response_model=BookingCountResponse)
async def count_event_bookings(event_id: int, service: BookingService = Depends(get_booking_service)):
    return BookingCountResponse(
        event_id=event_id,
        confirmed_bookings=await service.count_confirmed_by_event(event_id),
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(booking_id: int, service: BookingService = Depends(get_booking_service)):
    return await service.get_booking(booking_id)


@router.put("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: int,
    booking_status: BookingStatus = Query(..., alias="status"),
    service: BookingService = Depends(get_booking_service),
):
    return await service.update_booking_status(booking_id, booking_status)


@router.put("/{booking_id}/payment", response_model=BookingResponse)
async def update_payment_status(
    booking_id: int,
    payment_status: PaymentStatus = Query(..., alias="paymentStatus"),
    payment_reference: Optional[str] = Query(None, alias="paymentReference", max_length=100),
    service: BookingService = Depends(get_booking_service),
):
    return await service.update_payment_status(booking_id, payment_status, payment_reference)


@router.put("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(booking_id: int, service: BookingService = Depends(get_booking_service)):
    return await service.cancel_booking(booking_id)
