"""
Concurrency Tests.

Validates that concurrent approvals cannot overshoot trip capacity.
"""

import asyncio
import pytest
from datetime import date

from backend.app.core.exceptions import CapacityExceededError, InvalidRequestStateError
from backend.app.models.trip import Trip
from backend.app.models.trip_enums import RequestStatus


@pytest.mark.asyncio
async def test_concurrent_approvals_respect_capacity(directory, ledger, request_store):
    trip = await directory.create_trip(Trip(
        departure_place="Pune",
        arrival_place="Mumbai",
        departure_date=date(2025, 3, 10),
        rider_id=1,
        max_seats=2,
    ))
    requests = [await ledger.send_request(trip.id, user_id) for user_id in range(10, 15)]

    results = await asyncio.gather(
        *(ledger.approve_request(req.id, 1) for req in requests),
        return_exceptions=True
    )

    approved = [r for r in results if not isinstance(r, Exception)]
    refused = [r for r in results if isinstance(r, CapacityExceededError)]
    assert len(approved) == 2
    assert len(refused) == 3
    assert await request_store.count_by_trip_and_status(trip.id, RequestStatus.APPROVED) == 2


@pytest.mark.asyncio
async def test_concurrent_decisions_on_same_request(directory, ledger):
    """Exactly one of two racing decisions wins."""
    trip = await directory.create_trip(Trip(
        departure_place="Pune",
        arrival_place="Goa",
        departure_date=date(2025, 3, 10),
        rider_id=1,
        max_seats=4,
    ))
    request = await ledger.send_request(trip.id, 10)

    results = await asyncio.gather(
        ledger.approve_request(request.id, 1),
        ledger.reject_request(request.id, 1),
        return_exceptions=True
    )

    winners = [r for r in results if not isinstance(r, Exception)]
    losers = [r for r in results if isinstance(r, InvalidRequestStateError)]
    assert len(winners) == 1
    assert len(losers) == 1
    assert request.status in (RequestStatus.APPROVED, RequestStatus.REJECTED)
