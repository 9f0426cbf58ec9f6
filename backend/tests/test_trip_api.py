"""
Integration tests for the trip and join request API.

Register -> post trip -> search -> join -> approve/reject, with ownership
and capacity rules.
"""

import pytest


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def owner(register_user):
    return await register_user("owner@ridematch.io", name="Owner")


@pytest.fixture
async def trip(client, owner):
    token, _ = owner
    response = await client.post("/v1/trips", json={
        "departure_place": "Pune",
        "arrival_place": "Mumbai",
        "departure_date": "2025-03-10",
        "max_seats": 1
    }, headers=bearer(token))
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_trip_owned_by_caller(trip, owner):
    _, owner_id = owner
    assert trip["rider_id"] == owner_id
    assert trip["max_seats"] == 1
    assert "id" in trip


@pytest.mark.asyncio
async def test_create_trip_requires_auth(client):
    response = await client.post("/v1/trips", json={
        "departure_place": "Pune",
        "arrival_place": "Mumbai",
        "departure_date": "2025-03-10",
        "max_seats": 2
    })
    assert response.status_code in (401, 403)


@pytest.mark.asyncio
async def test_create_trip_rejects_zero_seats(client, owner):
    token, _ = owner
    response = await client.post("/v1/trips", json={
        "departure_place": "Pune",
        "arrival_place": "Mumbai",
        "departure_date": "2025-03-10",
        "max_seats": 0
    }, headers=bearer(token))
    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"


@pytest.mark.asyncio
async def test_search_and_rider_dashboard(client, trip, owner):
    _, owner_id = owner

    hit = await client.get("/v1/trips/search", params={
        "departure": "pune", "arrival": "MUMBAI", "date": "2025-03-12"
    })
    miss = await client.get("/v1/trips/search", params={
        "departure": "Pune", "arrival": "Mumbai", "date": "2025-03-13"
    })
    mine = await client.get(f"/v1/trips/rider/{owner_id}")

    assert [t["id"] for t in hit.json()] == [trip["id"]]
    assert miss.json() == []
    assert mine.json() == [trip]


@pytest.mark.asyncio
async def test_get_unknown_trip(client):
    response = await client.get("/v1/trips/999")
    assert response.status_code == 404
    assert response.json()["error_code"] == "ERR_NOT_FOUND_001"


@pytest.mark.asyncio
async def test_join_approve_and_full_trip(client, trip, owner, register_user):
    owner_token, _ = owner
    alice_token, alice_id = await register_user("alice@ridematch.io")
    bob_token, _ = await register_user("bob@ridematch.io")

    join = await client.post(f"/v1/trips/{trip['id']}/join", headers=bearer(alice_token))
    assert join.status_code == 201
    request = join.json()
    assert request["status"] == "PENDING"
    assert request["user_id"] == alice_id

    approve = await client.post(
        f"/v1/trips/requests/{request['id']}/approve", headers=bearer(owner_token)
    )
    assert approve.status_code == 200
    assert approve.json()["status"] == "APPROVED"

    full = await client.post(f"/v1/trips/{trip['id']}/join", headers=bearer(bob_token))
    assert full.status_code == 409
    assert full.json()["message"] == "Trip is full"

    joined = await client.get(f"/v1/trips/joined/{alice_id}")
    assert [r["id"] for r in joined.json()] == [request["id"]]

    requests = await client.get(f"/v1/trips/{trip['id']}/requests")
    assert len(requests.json()) == 1


@pytest.mark.asyncio
async def test_join_unknown_trip(client, register_user):
    token, _ = await register_user("alice@ridematch.io")
    response = await client.post("/v1/trips/999/join", headers=bearer(token))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_only_owner_decides(client, trip, register_user):
    alice_token, _ = await register_user("alice@ridematch.io")
    join = await client.post(f"/v1/trips/{trip['id']}/join", headers=bearer(alice_token))

    response = await client.post(
        f"/v1/trips/requests/{join.json()['id']}/approve", headers=bearer(alice_token)
    )

    assert response.status_code == 403
    assert response.json()["error_code"] == "ERR_PERM_001"


@pytest.mark.asyncio
async def test_reject_is_final(client, trip, owner, register_user):
    owner_token, _ = owner
    alice_token, alice_id = await register_user("alice@ridematch.io")
    join = await client.post(f"/v1/trips/{trip['id']}/join", headers=bearer(alice_token))
    request_id = join.json()["id"]

    reject = await client.post(f"/v1/trips/requests/{request_id}/reject", headers=bearer(owner_token))
    again = await client.post(f"/v1/trips/requests/{request_id}/approve", headers=bearer(owner_token))
    mine = await client.get(f"/v1/trips/requests/user/{alice_id}")

    assert reject.json()["status"] == "REJECTED"
    assert again.status_code == 400
    assert again.json()["error_code"] == "ERR_STATE_001"
    assert [r["status"] for r in mine.json()] == ["REJECTED"]


@pytest.mark.asyncio
async def test_decide_unknown_request(client, owner):
    token, _ = owner
    response = await client.post("/v1/trips/requests/999/reject", headers=bearer(token))
    assert response.status_code == 404
