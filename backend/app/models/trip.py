"""
Trip database model.

A trip is a ride offer posted by a rider; it is immutable once created.
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey
from sqlalchemy.sql import func
from backend.app.db.session import Base


class Trip(Base):
    """
    Trip model.

    Places are stored as typed; matching lower-cases both sides.
    """
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Route
    departure_place = Column(String(255), nullable=False, index=True)
    arrival_place = Column(String(255), nullable=False, index=True)
    departure_date = Column(Date, nullable=False, index=True)

    # Ownership - Trip belongs to the rider who posted it
    rider_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)

    # Capacity
    max_seats = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return (
            f"<Trip(id={self.id}, {self.departure_place!r} -> {self.arrival_place!r}, "
            f"date={self.departure_date}, max_seats={self.max_seats})>"
        )
