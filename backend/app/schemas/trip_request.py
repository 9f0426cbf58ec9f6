"""
Trip request schemas.
"""

from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

from backend.app.models.trip_enums import RequestStatus


class TripRequestResponse(BaseModel):
    """Join request as returned to passengers and trip owners."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    trip_id: int
    user_id: int
    status: RequestStatus
    requested_at: datetime
    decided_at: Optional[datetime] = None
