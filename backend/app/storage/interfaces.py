"""Store interfaces injected into the trip directory and request ledger."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Iterable, List, Optional

from backend.app.models.trip import Trip
from backend.app.models.trip_enums import RequestStatus
from backend.app.models.trip_request import TripRequest


class TripStoreIface(ABC):
    """Interface for the trips collection."""

    @abstractmethod
    async def create(self, trip: Trip) -> Trip:
        """Persist a new trip and assign its id."""

    @abstractmethod
    async def get_by_id(self, trip_id: int, for_update: bool = False) -> Optional[Trip]:
        """
        Get a trip by id.

        With for_update the trip row stays locked until the current
        transaction ends.
        """

    @abstractmethod
    async def search(
        self, departure: str, arrival: str, start_date: date, end_date: date
    ) -> List[Trip]:
        """Trips matching both places case-insensitively, dated within [start_date, end_date]."""

    @abstractmethod
    async def list_by_rider(self, rider_id: int) -> List[Trip]:
        """Trips owned by a rider."""


class TripRequestStoreIface(ABC):
    """Interface for the trip requests collection."""

    @abstractmethod
    async def create(self, request: TripRequest) -> TripRequest:
        """Persist a new request and assign its id."""

    @abstractmethod
    async def get_by_id(self, request_id: int) -> Optional[TripRequest]:
        """Get a request by id."""

    @abstractmethod
    async def list_by_trip(self, trip_id: int) -> List[TripRequest]:
        """All requests for a trip, any status."""

    @abstractmethod
    async def list_by_user(
        self, user_id: int, status: Optional[RequestStatus] = None
    ) -> List[TripRequest]:
        """Requests made by a user, optionally filtered by status."""

    @abstractmethod
    async def count_by_trip_and_status(self, trip_id: int, status: RequestStatus) -> int:
        """Number of requests for a trip in the given status."""

    @abstractmethod
    async def exists_for_user(
        self, trip_id: int, user_id: int, statuses: Iterable[RequestStatus]
    ) -> bool:
        """Whether the user holds a request for the trip in any of the statuses."""

    @abstractmethod
    async def transition(
        self,
        request: TripRequest,
        new_status: RequestStatus,
        decided_at: datetime,
        max_approved: Optional[int] = None,
    ) -> Optional[TripRequest]:
        """
        Move a PENDING request to new_status as a single conditional write.

        When max_approved is given the write only happens while the trip
        has fewer than max_approved APPROVED requests.

        Returns:
            The updated request, or None when the request was no longer
            PENDING or the capacity guard failed.
        """
