"""
SQLAlchemy implementations of the trip and trip request stores.

Both stores share the request's AsyncSession, so a trip row locked by
TripStore.get_by_id(for_update=True) stays locked until
TripRequestStore.transition commits.
"""

import logging
from datetime import date, datetime
from functools import wraps
from typing import Iterable, List, Optional

from sqlalchemy import select, update, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from backend.app.core.exceptions import StoreUnavailableError
from backend.app.models.trip import Trip
from backend.app.models.trip_enums import RequestStatus
from backend.app.models.trip_request import TripRequest
from backend.app.storage.interfaces import TripStoreIface, TripRequestStoreIface

logger = logging.getLogger("ridematch.storage")


def store_operation(name: str):
    """Translate database failures into StoreUnavailableError."""
    def decorator(fn):
        @wraps(fn)
        async def wrapper(*args, **kwargs):
            try:
                return await fn(*args, **kwargs)
            except SQLAlchemyError as exc:
                logger.error("Store operation %s failed: %s", name, exc)
                raise StoreUnavailableError(name) from exc
        return wrapper
    return decorator


class SqlAlchemyTripStore(TripStoreIface):

    def __init__(self, db: AsyncSession):
        self.db = db

    @store_operation("trip.create")
    async def create(self, trip: Trip) -> Trip:
        self.db.add(trip)
        await self.db.commit()
        await self.db.refresh(trip)
        return trip

    @store_operation("trip.get")
    async def get_by_id(self, trip_id: int, for_update: bool = False) -> Optional[Trip]:
        query = select(Trip).where(Trip.id == trip_id)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    @store_operation("trip.search")
    async def search(
        self, departure: str, arrival: str, start_date: date, end_date: date
    ) -> List[Trip]:
        result = await self.db.execute(
            select(Trip).where(
                func.lower(Trip.departure_place) == departure.lower(),
                func.lower(Trip.arrival_place) == arrival.lower(),
                Trip.departure_date.between(start_date, end_date)
            ).order_by(Trip.departure_date, Trip.id)
        )
        return list(result.scalars().all())

    @store_operation("trip.list_by_rider")
    async def list_by_rider(self, rider_id: int) -> List[Trip]:
        result = await self.db.execute(
            select(Trip).where(Trip.rider_id == rider_id).order_by(Trip.id)
        )
        return list(result.scalars().all())


class SqlAlchemyTripRequestStore(TripRequestStoreIface):

    def __init__(self, db: AsyncSession):
        self.db = db

    @store_operation("trip_request.create")
    async def create(self, request: TripRequest) -> TripRequest:
        self.db.add(request)
        await self.db.commit()
        await self.db.refresh(request)
        return request

    @store_operation("trip_request.get")
    async def get_by_id(self, request_id: int) -> Optional[TripRequest]:
        # populate_existing: status may have been changed by another session
        result = await self.db.execute(
            select(TripRequest).where(TripRequest.id == request_id).execution_options(
                populate_existing=True
            )
        )
        return result.scalar_one_or_none()

    @store_operation("trip_request.list_by_trip")
    async def list_by_trip(self, trip_id: int) -> List[TripRequest]:
        result = await self.db.execute(
            select(TripRequest).where(TripRequest.trip_id == trip_id).order_by(TripRequest.id)
        )
        return list(result.scalars().all())

    @store_operation("trip_request.list_by_user")
    async def list_by_user(
        self, user_id: int, status: Optional[RequestStatus] = None
    ) -> List[TripRequest]:
        query = select(TripRequest).where(TripRequest.user_id == user_id)
        if status is not None:
            query = query.where(TripRequest.status == status)
        result = await self.db.execute(query.order_by(TripRequest.id))
        return list(result.scalars().all())

    @store_operation("trip_request.count")
    async def count_by_trip_and_status(self, trip_id: int, status: RequestStatus) -> int:
        result = await self.db.execute(
            select(func.count(TripRequest.id)).where(
                TripRequest.trip_id == trip_id,
                TripRequest.status == status
            )
        )
        return result.scalar()

    @store_operation("trip_request.exists")
    async def exists_for_user(
        self, trip_id: int, user_id: int, statuses: Iterable[RequestStatus]
    ) -> bool:
        result = await self.db.execute(
            select(func.count(TripRequest.id)).where(
                TripRequest.trip_id == trip_id,
                TripRequest.user_id == user_id,
                TripRequest.status.in_(list(statuses))
            )
        )
        return result.scalar() > 0

    @store_operation("trip_request.transition")
    async def transition(
        self,
        request: TripRequest,
        new_status: RequestStatus,
        decided_at: datetime,
        max_approved: Optional[int] = None,
    ) -> Optional[TripRequest]:
        stmt = update(TripRequest).where(
            TripRequest.id == request.id,
            TripRequest.status == RequestStatus.PENDING
        )

        if max_approved is not None:
            # Aliased so the count is not correlated to the updated row
            approved = aliased(TripRequest)
            approved_count = select(func.count(approved.id)).where(
                approved.trip_id == request.trip_id,
                approved.status == RequestStatus.APPROVED
            ).scalar_subquery()
            stmt = stmt.where(approved_count < max_approved)

        stmt = stmt.values(status=new_status, decided_at=decided_at).execution_options(
            synchronize_session=False
        )
        result = await self.db.execute(stmt)
        # Ends the transaction either way, releasing the trip row lock
        await self.db.commit()

        if result.rowcount == 0:
            return None

        await self.db.refresh(request)
        return request
