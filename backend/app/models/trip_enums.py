"""
Trip request enumerations.
"""

import enum


class RequestStatus(str, enum.Enum):
    """
    Join request status.

    PENDING: Passenger asked to join, waiting for the trip owner
    APPROVED: Trip owner approved, a seat is taken
    REJECTED: Trip owner rejected the request
    """
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    @property
    def is_terminal(self) -> bool:
        return self is not RequestStatus.PENDING
