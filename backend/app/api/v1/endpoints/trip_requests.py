"""
Trip Join Request API Endpoints.

Passengers ask to join trips; trip owners approve or reject.
Decisions are final once made.
"""

from typing import List

from fastapi import APIRouter, Depends, status, Path

from backend.app.core.dependencies import get_current_user, get_request_ledger
from backend.app.domain.rides.request_ledger import RequestLedger
from backend.app.schemas.trip_request import TripRequestResponse

router = APIRouter(prefix="/trips", tags=["Trip Requests"])


@router.post("/{trip_id}/join", response_model=TripRequestResponse, status_code=status.HTTP_201_CREATED)
async def join_trip(
    trip_id: int = Path(..., description="Trip ID"),
    current_user: dict = Depends(get_current_user),
    ledger: RequestLedger = Depends(get_request_ledger)
):
    """
    Send a join request (status PENDING) for the authenticated user.

    409 when the trip is already full.
    """
    return await ledger.send_request(trip_id, current_user["user_id"])


@router.post("/requests/{request_id}/approve", response_model=TripRequestResponse)
async def approve_request(
    request_id: int = Path(..., description="Trip request ID"),
    current_user: dict = Depends(get_current_user),
    ledger: RequestLedger = Depends(get_request_ledger)
):
    """Approve a pending request (trip owner only). Re-checks seat capacity."""
    return await ledger.approve_request(request_id, current_user["user_id"])


@router.post("/requests/{request_id}/reject", response_model=TripRequestResponse)
async def reject_request(
    request_id: int = Path(..., description="Trip request ID"),
    current_user: dict = Depends(get_current_user),
    ledger: RequestLedger = Depends(get_request_ledger)
):
    """Reject a pending request (trip owner only)."""
    return await ledger.reject_request(request_id, current_user["user_id"])


@router.get("/requests/user/{user_id}", response_model=List[TripRequestResponse])
async def get_user_requests(
    user_id: int = Path(..., description="Requesting user ID"),
    ledger: RequestLedger = Depends(get_request_ledger)
):
    """Every join request a user has made, any status."""
    return await ledger.get_requests_for_user(user_id)


@router.get("/joined/{user_id}", response_model=List[TripRequestResponse])
async def get_joined_trips(
    user_id: int = Path(..., description="Passenger user ID"),
    ledger: RequestLedger = Depends(get_request_ledger)
):
    """User dashboard: approved requests only."""
    return await ledger.get_approved_trips_for_user(user_id)


@router.get("/{trip_id}/requests", response_model=List[TripRequestResponse])
async def get_trip_requests(
    trip_id: int = Path(..., description="Trip ID"),
    ledger: RequestLedger = Depends(get_request_ledger)
):
    """Owner dashboard: all requests for a trip."""
    return await ledger.get_requests_for_trip(trip_id)
