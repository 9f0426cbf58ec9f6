"""
Request Ledger (Domain Logic).

Owns the join-request lifecycle and seat-capacity enforcement.

State machine:
    PENDING -> APPROVED   (trip owner, only while seats remain)
    PENDING -> REJECTED   (trip owner)

APPROVED and REJECTED are terminal. The approved count for a trip never
exceeds its max_seats: approval re-counts inside the same conditional
write that changes the status, with the trip row locked.
"""

import logging
from datetime import datetime, timezone
from typing import List

from backend.app.core.exceptions import (
    CapacityExceededError,
    DuplicateRequestError,
    InsufficientPermissionsError,
    InvalidRequestStateError,
    ResourceNotFoundError,
)
from backend.app.domain.rides.trip_directory import TripDirectory
from backend.app.models.trip import Trip
from backend.app.models.trip_enums import RequestStatus
from backend.app.models.trip_request import TripRequest
from backend.app.storage.interfaces import TripRequestStoreIface

logger = logging.getLogger("ridematch.requests")

OPEN_STATUSES = (RequestStatus.PENDING, RequestStatus.APPROVED)


class RequestLedger:

    def __init__(
        self,
        directory: TripDirectory,
        requests: TripRequestStoreIface,
        reject_duplicates: bool = False,
    ):
        self.directory = directory
        self.requests = requests
        self.reject_duplicates = reject_duplicates

    async def send_request(self, trip_id: int, user_id: int) -> TripRequest:
        """
        Ask to join a trip.

        Flow:
        1. Load the trip (404 if missing)
        2. Refuse when approved requests already fill max_seats
        3. Optionally refuse a second open request from the same user
        4. Persist a PENDING request stamped with the current time

        Raises:
            ResourceNotFoundError: trip does not exist
            CapacityExceededError: trip is full
            DuplicateRequestError: user already holds an open request
        """
        trip = await self.directory.get_trip(trip_id)

        approved_count = await self.requests.count_by_trip_and_status(trip_id, RequestStatus.APPROVED)
        if approved_count >= trip.max_seats:
            logger.info(
                "Join request refused, trip full",
                extra={"trip_id": trip_id, "user_id": user_id, "max_seats": trip.max_seats}
            )
            raise CapacityExceededError(trip_id, trip.max_seats)

        if self.reject_duplicates and await self.requests.exists_for_user(trip_id, user_id, OPEN_STATUSES):
            raise DuplicateRequestError(trip_id, user_id)

        request = TripRequest(
            trip_id=trip_id,
            user_id=user_id,
            status=RequestStatus.PENDING,
            requested_at=datetime.now(timezone.utc),
        )
        request = await self.requests.create(request)

        logger.info(
            "Join request sent",
            extra={"request_id": request.id, "trip_id": trip_id, "user_id": user_id}
        )
        return request

    async def approve_request(self, request_id: int, actor_id: int) -> TripRequest:
        """
        Approve a pending request on behalf of the trip owner.

        Raises:
            ResourceNotFoundError: request (or its trip) does not exist
            InsufficientPermissionsError: actor does not own the trip
            InvalidRequestStateError: request already decided
            CapacityExceededError: all seats already approved
        """
        return await self._decide(request_id, actor_id, RequestStatus.APPROVED)

    async def reject_request(self, request_id: int, actor_id: int) -> TripRequest:
        """
        Reject a pending request on behalf of the trip owner.

        Raises:
            ResourceNotFoundError: request (or its trip) does not exist
            InsufficientPermissionsError: actor does not own the trip
            InvalidRequestStateError: request already decided
        """
        return await self._decide(request_id, actor_id, RequestStatus.REJECTED)

    async def get_requests_for_trip(self, trip_id: int) -> List[TripRequest]:
        return await self.requests.list_by_trip(trip_id)

    async def get_approved_trips_for_user(self, user_id: int) -> List[TripRequest]:
        return await self.requests.list_by_user(user_id, RequestStatus.APPROVED)

    async def get_requests_for_user(self, user_id: int) -> List[TripRequest]:
        return await self.requests.list_by_user(user_id)

    async def _get_request(self, request_id: int) -> TripRequest:
        request = await self.requests.get_by_id(request_id)
        if request is None:
            raise ResourceNotFoundError("Trip request", request_id)
        return request

    async def _decide(self, request_id: int, actor_id: int, new_status: RequestStatus) -> TripRequest:
        request = await self._get_request(request_id)
        trip = await self.directory.get_trip(request.trip_id, lock=True)
        trip_id, max_seats = trip.id, trip.max_seats

        self._ensure_owner(trip, actor_id)
        if request.status.is_terminal:
            raise InvalidRequestStateError(request_id, request.status.value)

        max_approved = max_seats if new_status is RequestStatus.APPROVED else None
        decided = await self.requests.transition(
            request, new_status, datetime.now(timezone.utc), max_approved=max_approved
        )

        if decided is None:
            current = await self._get_request(request_id)
            if current.status.is_terminal:
                raise InvalidRequestStateError(request_id, current.status.value)
            logger.info(
                "Approval refused, trip full",
                extra={"request_id": request_id, "trip_id": trip_id, "max_seats": max_seats}
            )
            raise CapacityExceededError(trip_id, max_seats)

        logger.info(
            "Join request decided",
            extra={"request_id": request_id, "trip_id": trip_id, "status": new_status.value, "actor_id": actor_id}
        )
        return decided

    @staticmethod
    def _ensure_owner(trip: Trip, actor_id: int) -> None:
        if trip.rider_id != actor_id:
            raise InsufficientPermissionsError(
                "Only the trip owner can decide join requests",
                details={"trip_id": trip.id}
            )
