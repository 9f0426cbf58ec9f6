"""
Trip Directory (Domain Logic).

Owns trip creation and route/date discovery.
"""

import logging
from datetime import date, timedelta
from typing import List

from backend.app.core.exceptions import InvalidTripError, ResourceNotFoundError
from backend.app.models.trip import Trip
from backend.app.storage.interfaces import TripStoreIface

logger = logging.getLogger("ridematch.trips")

# Riders rarely travel on the exact day searched
SEARCH_WINDOW_DAYS = 2


def search_window(target: date) -> tuple[date, date]:
    """Inclusive date range matched by a search for target."""
    delta = timedelta(days=SEARCH_WINDOW_DAYS)
    return target - delta, target + delta


class TripDirectory:

    def __init__(self, trips: TripStoreIface):
        self.trips = trips

    async def create_trip(self, trip: Trip) -> Trip:
        """
        Persist a new trip.

        Raises:
            InvalidTripError: if max_seats is below 1
        """
        if trip.max_seats is None or trip.max_seats < 1:
            raise InvalidTripError(
                "Trip must offer at least one seat",
                details={"max_seats": trip.max_seats}
            )

        created = await self.trips.create(trip)
        logger.info(
            "Trip created",
            extra={"trip_id": created.id, "rider_id": created.rider_id, "max_seats": created.max_seats}
        )
        return created

    async def get_trip(self, trip_id: int, lock: bool = False) -> Trip:
        """
        Load a trip, optionally locking it for the rest of the transaction.

        Raises:
            ResourceNotFoundError: if the trip does not exist
        """
        trip = await self.trips.get_by_id(trip_id, for_update=lock)
        if trip is None:
            raise ResourceNotFoundError("Trip", trip_id)
        return trip

    async def search_trips(self, departure: str, arrival: str, target_date: date) -> List[Trip]:
        """Trips on the route departing within SEARCH_WINDOW_DAYS of target_date."""
        start_date, end_date = search_window(target_date)
        return await self.trips.search(departure, arrival, start_date, end_date)

    async def get_trips_by_rider(self, rider_id: int) -> List[Trip]:
        return await self.trips.list_by_rider(rider_id)
