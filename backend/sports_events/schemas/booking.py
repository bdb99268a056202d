"""
Pydantic schemas for booking responses.
Booking creation takes query parameters, so there is no request body schema.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel

from sports_events.models.booking import BookingStatus, PaymentStatus


class BookingResponse(BaseModel):
    id: int
    user_id: int
    event_id: int
    booking_date: datetime
    total_amount: Optional[Decimal]
    payment_status: PaymentStatus
    booking_status: BookingStatus
    payment_reference: Optional[str]
    notes: Optional[str]
    emergency_contact: Optional[str]
    is_confirmed: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BookingCountResponse(BaseModel):
    event_id: int
    confirmed_bookings: int


class BookingStatsResponse(BaseModel):
    total_bookings: int
    by_booking_status: dict[BookingStatus, int]
    by_payment_status: dict[PaymentStatus, int]
