"""
Trip Request model.

Tracks a user's request to join a trip and the owner's decision.
"""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, Enum
from backend.app.db.session import Base
from backend.app.models.trip_enums import RequestStatus


class TripRequest(Base):
    """
    Trip Request model.

    Created PENDING; moves once to APPROVED or REJECTED and is never deleted.
    """
    __tablename__ = "trip_requests"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # References
    trip_id = Column(Integer, ForeignKey('trips.id'), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)

    # Request status
    status = Column(Enum(RequestStatus), default=RequestStatus.PENDING, nullable=False, index=True)

    # Timestamps
    requested_at = Column(DateTime(timezone=True), nullable=False)
    decided_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<TripRequest(id={self.id}, trip_id={self.trip_id}, user_id={self.user_id}, status='{self.status.value}')>"
