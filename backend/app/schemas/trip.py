"""
Trip schemas.

Schemas for trip creation, search and dashboards.
"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime


class TripCreate(BaseModel):
    """Schema for posting a trip. The owner is the authenticated user."""
    departure_place: str = Field(..., min_length=1, max_length=255, description="Departure city or place")
    arrival_place: str = Field(..., min_length=1, max_length=255, description="Arrival city or place")
    departure_date: date = Field(..., description="Departure day (no time component)")
    max_seats: int = Field(..., ge=1, description="Seats offered to other riders")


class TripResponse(BaseModel):
    """Schema for trip response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    departure_place: str
    arrival_place: str
    departure_date: date
    rider_id: int
    max_seats: int
    created_at: datetime
