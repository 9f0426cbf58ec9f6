"""
Trip API Endpoints.

Riders post trips; anyone can search them by route and date.
"""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, status, Path, Query

from backend.app.core.dependencies import get_current_user, get_trip_directory
from backend.app.domain.rides.trip_directory import TripDirectory
from backend.app.models.trip import Trip
from backend.app.schemas.trip import TripCreate, TripResponse

router = APIRouter(prefix="/trips", tags=["Trips"])


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    current_user: dict = Depends(get_current_user),
    directory: TripDirectory = Depends(get_trip_directory)
):
    """Post a trip owned by the authenticated user."""
    trip = Trip(
        departure_place=trip_data.departure_place,
        arrival_place=trip_data.arrival_place,
        departure_date=trip_data.departure_date,
        rider_id=current_user["user_id"],
        max_seats=trip_data.max_seats,
    )
    return await directory.create_trip(trip)


@router.get("/search", response_model=List[TripResponse])
async def search_trips(
    departure: str = Query(..., min_length=1),
    arrival: str = Query(..., min_length=1),
    target_date: date = Query(..., alias="date", description="Target day, matched within two days either side"),
    directory: TripDirectory = Depends(get_trip_directory)
):
    """Search trips by route, case-insensitively, around a date."""
    return await directory.search_trips(departure, arrival, target_date)


@router.get("/rider/{rider_id}", response_model=List[TripResponse])
async def get_trips_by_rider(
    rider_id: int = Path(..., description="Trip owner user ID"),
    directory: TripDirectory = Depends(get_trip_directory)
):
    """Rider dashboard: trips created by this rider."""
    return await directory.get_trips_by_rider(rider_id)


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip(
    trip_id: int = Path(..., description="Trip ID"),
    directory: TripDirectory = Depends(get_trip_directory)
):
    return await directory.get_trip(trip_id)
