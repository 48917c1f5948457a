"""
Failure Injection Tests.

Store failures surface as 500 responses carrying the driver message, and
leave no partial writes behind.
"""

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch_backend.app.domain.pricing.rate_resolver import RateResolver
from dispatch_backend.app.services.booking_service import BookingService


def store_error(message):
    return OperationalError("SQL", {}, Exception(message))


@pytest.mark.asyncio
async def test_failed_commit_returns_persistence_error(client, mocker):
    mocker.patch.object(AsyncSession, "commit", side_effect=store_error("disk I/O error"))

    response = await client.post("/v1/companies", json={"name": "Acme Traders"})

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "ERR_PERSISTENCE_001"
    assert "disk I/O error" in body["details"]["reason"]


@pytest.mark.asyncio
@pytest.mark.parametrize("url,payload", [
    ("/v1/companies", {"name": "Gamma Freight"}),
    ("/v1/drivers", {"name": "Mahesh"}),
    ("/v1/vehicles", {"registrationNumber": "KA01XY0001"}),
    ("/v1/consignees", {"name": "Kiran Stores", "address": "12 MG Road", "city": "Pune", "phone": "9988776655"}),
])
async def test_failed_flush_on_create_returns_persistence_error(client, company, mocker, url, payload):
    if url == "/v1/consignees":
        payload = {**payload, "companyId": company["id"]}
    mocker.patch.object(AsyncSession, "flush", side_effect=store_error("disk full"))

    response = await client.post(url, json=payload)

    assert response.status_code == 500
    body = response.json()
    assert body["error_code"] == "ERR_PERSISTENCE_001"
    assert "disk full" in body["details"]["reason"]

    mocker.stopall()
    logs = await client.get("/v1/audit-logs")
    assert logs.json()["count"] == 1


@pytest.mark.asyncio
async def test_failed_read_returns_persistence_error(client, mocker):
    mocker.patch.object(BookingService, "list_bookings", side_effect=store_error("database is locked"))

    response = await client.get("/v1/bookings")

    assert response.status_code == 500
    body = response.json()
    assert body["error_code"] == "ERR_PERSISTENCE_001"
    assert body["details"]["reason"] == "database is locked"


@pytest.mark.asyncio
async def test_failed_assignment_leaves_bookings_booked(client, make_booking, vehicle, mocker):
    booking = await make_booking()
    mocker.patch.object(AsyncSession, "commit", side_effect=store_error("connection reset"))

    response = await client.post(f"/v1/vehicles/{vehicle['id']}/assign-bookings", json={"bookingIds": [booking["id"]]})
    assert response.status_code == 500

    mocker.stopall()
    current = (await client.get(f"/v1/bookings/{booking['id']}")).json()["data"]
    assert current["status"] == "BOOKED"
    assert current["assigned_vehicle_id"] is None

    vehicle_now = (await client.get(f"/v1/vehicles/{vehicle['id']}")).json()["data"]
    assert vehicle_now["status"] == "Available"


@pytest.mark.asyncio
async def test_rate_resolution_propagates_store_errors(mocker):
    db = mocker.AsyncMock(spec=AsyncSession)
    db.execute.side_effect = store_error("server closed the connection")

    with pytest.raises(OperationalError):
        await RateResolver.resolve_rate(db, 1)


@pytest.mark.asyncio
async def test_responses_carry_correlation_id(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "req-42"})

    assert response.status_code == 200
    assert response.headers["X-Correlation-ID"] == "req-42"
    assert "X-Process-Time" in response.headers

    generated = await client.get("/")
    assert generated.headers["X-Correlation-ID"]
