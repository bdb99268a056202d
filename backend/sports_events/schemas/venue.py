"""
Pydantic schemas for venue request/response validation.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class VenueBase(BaseModel):
    model_config = {"str_strip_whitespace": True}

    state: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    capacity: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = Field(None, max_length=1000)
    amenities: Optional[str] = Field(None, max_length=1000)


class VenueCreate(VenueBase):
    name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1, max_length=500)
    city: str = Field(..., min_length=1, max_length=100)


class VenueUpdate(VenueBase):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    address: Optional[str] = Field(None, min_length=1, max_length=500)
    city: Optional[str] = Field(None, min_length=1, max_length=100)


class VenueResponse(BaseModel):
    id: int
    name: str
    address: str
    city: str
    state: Optional[str]
    postal_code: Optional[str]
    country: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    capacity: Optional[int]
    image_url: Optional[str]
    description: Optional[str]
    amenities: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
