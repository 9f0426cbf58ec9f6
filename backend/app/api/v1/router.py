"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from backend.app.api.v1.endpoints import auth, trips, trip_requests

router = APIRouter()

router.include_router(auth.router)

# Join requests first: its static /trips/requests/... paths must win over /trips/{trip_id}
router.include_router(trip_requests.router)
router.include_router(trips.router)
