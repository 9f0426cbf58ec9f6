"""
Failure Injection Tests.

Store failures surface as StoreUnavailableError and a 503 response.
"""

import pytest
from sqlalchemy.exc import OperationalError

from backend.app.core.exceptions import StoreUnavailableError
from backend.app.storage.sqlalchemy_store import SqlAlchemyTripStore


@pytest.mark.asyncio
async def test_database_error_translated(db_session, mocker):
    mocker.patch.object(
        db_session, "execute",
        side_effect=OperationalError("SELECT", {}, Exception("connection lost"))
    )
    store = SqlAlchemyTripStore(db_session)

    with pytest.raises(StoreUnavailableError) as exc_info:
        await store.list_by_rider(1)

    assert exc_info.value.details == {"operation": "trip.list_by_rider"}
    assert isinstance(exc_info.value.__cause__, OperationalError)


@pytest.mark.asyncio
async def test_store_outage_returns_503(client, mocker):
    mocker.patch.object(
        SqlAlchemyTripStore, "search",
        side_effect=StoreUnavailableError("trip.search")
    )

    response = await client.get("/v1/trips/search", params={
        "departure": "Pune", "arrival": "Mumbai", "date": "2025-03-10"
    })

    assert response.status_code == 503
    assert response.json()["error_code"] == "ERR_STORE_001"


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Correlation-ID" in response.headers
