"""
Tests for revenue and dispatch reports.
"""

import pytest
from datetime import date
from decimal import Decimal

from dispatch_backend.app.models.booking import Booking
from dispatch_backend.app.models.enums import BookingStatus


def past_booking(company_id, lr_number, booking_date, grand_total, destination="Pune"):
    return Booking(
        lr_number=lr_number,
        booking_date=booking_date,
        company_id=company_id,
        consignee_name="Archive",
        origin="Warehouse",
        destination=destination,
        destination_pincode="000000",
        article_count=1,
        parcel_type="Standard",
        weight=1.0,
        per_article_rate=Decimal(grand_total),
        total_amount=Decimal(grand_total),
        grand_total=Decimal(grand_total),
        status=BookingStatus.DELIVERED
    )


# ============================================================================
# Summary and trend
# ============================================================================

@pytest.mark.asyncio
async def test_summary(client, make_booking, vehicle):
    await make_booking(article_count=3)
    moving = await make_booking(article_count=5)
    await client.post(f"/v1/vehicles/{vehicle['id']}/assign-bookings", json={"bookingIds": [moving["id"]]})

    response = await client.get("/v1/reports/summary")

    summary = response.json()["data"]
    assert Decimal(summary["total_revenue"]) == Decimal("80")
    assert summary["total_bookings"] == 2
    assert summary["total_dispatches"] == 1
    assert Decimal(summary["avg_revenue_per_booking"]) == Decimal("40")


@pytest.mark.asyncio
async def test_summary_filters(client, company, other_company, make_booking):
    await make_booking(article_count=3)
    await make_booking(article_count=2, destination="Nashik")
    await client.post("/v1/bookings", json={
        "companyId": other_company["id"],
        "consigneeName": "Z",
        "destination": "Goa",
        "articleCount": 1
    })

    by_company = (await client.get("/v1/reports/summary", params={"companyId": company["id"]})).json()["data"]
    assert by_company["total_bookings"] == 2
    assert Decimal(by_company["total_revenue"]) == Decimal("50")

    by_city = (await client.get("/v1/reports/summary", params={"city": "Nashik"})).json()["data"]
    assert by_city["total_bookings"] == 1

    for partial in ("nashik", "Nash"):
        miss = (await client.get("/v1/reports/summary", params={"city": partial})).json()["data"]
        assert miss["total_bookings"] == 0

    future = (await client.get("/v1/reports/summary", params={"dateFrom": "2999-01-01"})).json()["data"]
    assert future["total_bookings"] == 0
    assert Decimal(future["avg_revenue_per_booking"]) == Decimal("0")


@pytest.mark.asyncio
async def test_revenue_trend_last_six_months(client, company, db_session):
    for month in range(1, 9):
        db_session.add(past_booking(company["id"], f"OLD-{month}", date(2023, month, 15), f"{month * 100}"))
    db_session.add(past_booking(company["id"], "OLD-3B", date(2023, 3, 20), "50"))
    await db_session.commit()

    response = await client.get("/v1/reports/revenue-trend")

    points = response.json()["data"]
    assert [p["month"] for p in points] == ["2023-03", "2023-04", "2023-05", "2023-06", "2023-07", "2023-08"]
    assert Decimal(points[0]["revenue"]) == Decimal("350")
    assert Decimal(points[-1]["revenue"]) == Decimal("800")


@pytest.mark.asyncio
async def test_all_means_no_filter(client, company, other_company, make_booking):
    await make_booking(article_count=3)
    await make_booking(article_count=2, destination="Nashik")
    await client.post("/v1/bookings", json={
        "companyId": other_company["id"],
        "consigneeName": "Z",
        "destination": "Goa",
        "articleCount": 1
    })

    response = await client.get("/v1/reports/summary", params={"companyId": "All", "city": "All"})

    assert response.status_code == 200
    assert response.json()["data"]["total_bookings"] == 3


@pytest.mark.asyncio
async def test_invalid_company_filter(client):
    response = await client.get("/v1/reports/summary", params={"companyId": "acme"})

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_VALIDATION_001"


@pytest.mark.asyncio
async def test_revenue_trend_filters(client, company, other_company, db_session):
    db_session.add(past_booking(company["id"], "T-1", date(2023, 1, 10), "100"))
    db_session.add(past_booking(company["id"], "T-2", date(2023, 2, 10), "200", destination="Nashik"))
    db_session.add(past_booking(company["id"], "T-3", date(2023, 3, 10), "300"))
    db_session.add(past_booking(other_company["id"], "T-4", date(2023, 3, 12), "40"))
    await db_session.commit()

    ranged = (await client.get("/v1/reports/revenue-trend", params={
        "dateFrom": "2023-02-01",
        "dateTo": "2023-03-31"
    })).json()["data"]
    assert [p["month"] for p in ranged] == ["2023-02", "2023-03"]
    assert Decimal(ranged[1]["revenue"]) == Decimal("340")

    by_city = (await client.get("/v1/reports/revenue-trend", params={"city": "Nashik"})).json()["data"]
    assert [p["month"] for p in by_city] == ["2023-02"]

    by_company = (await client.get("/v1/reports/revenue-trend", params={"companyId": other_company["id"]})).json()["data"]
    assert len(by_company) == 1
    assert Decimal(by_company[0]["revenue"]) == Decimal("40")

    everyone = (await client.get("/v1/reports/revenue-trend", params={"companyId": "All"})).json()
    assert everyone["count"] == 3


# ============================================================================
# Breakdowns
# ============================================================================

@pytest.mark.asyncio
async def test_company_summary(client, company, other_company, make_booking, db_session):
    await make_booking(article_count=3)
    await make_booking(article_count=2, destination="Nashik")
    await client.post("/v1/bookings", json={
        "companyId": other_company["id"],
        "consigneeName": "Z",
        "destination": "Goa",
        "articleCount": 1
    })
    db_session.add(past_booking(other_company["id"], "ZERO-1", date(2023, 1, 1), "0"))
    await db_session.commit()

    response = await client.get("/v1/reports/company-summary")

    rows = response.json()["data"]
    assert [row["company"] for row in rows] == ["Acme Traders", "Beta Logistics"]
    assert Decimal(rows[0]["total_revenue"]) == Decimal("50")
    assert rows[0]["total_bookings"] == 2
    assert Decimal(rows[0]["avg_per_booking"]) == Decimal("25")
    # zero-value booking adds neither revenue nor count
    assert rows[1]["total_bookings"] == 1
    assert Decimal(rows[1]["avg_per_booking"]) == Decimal("10")

    nashik = (await client.get("/v1/reports/company-summary", params={"city": "Nashik"})).json()["data"]
    assert len(nashik) == 1
    assert Decimal(nashik[0]["total_revenue"]) == Decimal("20")


@pytest.mark.asyncio
async def test_parcel_type_distribution(client, company, make_booking):
    await make_booking()
    await make_booking()
    await make_booking(parcelType="Express", destination="Nashik")

    response = await client.get("/v1/reports/parcel-type-distribution")

    rows = response.json()["data"]
    assert [(row["type"], row["count"]) for row in rows] == [("Standard", 2), ("Express", 1)]
    assert Decimal(rows[0]["percentage"]) == Decimal("66.7")
    assert Decimal(rows[1]["percentage"]) == Decimal("33.3")

    express_only = (await client.get("/v1/reports/parcel-type-distribution", params={
        "city": "Nashik",
        "companyId": company["id"]
    })).json()["data"]
    assert len(express_only) == 1
    assert express_only[0]["type"] == "Express"
    assert Decimal(express_only[0]["percentage"]) == Decimal("100")


@pytest.mark.asyncio
async def test_parcel_type_distribution_empty(client):
    response = await client.get("/v1/reports/parcel-type-distribution")

    assert response.status_code == 200
    assert response.json()["data"] == []


@pytest.mark.asyncio
async def test_vehicle_dispatch(client, make_booking, vehicle):
    spare = (await client.post("/v1/vehicles", json={"registrationNumber": "KA01XY0001"})).json()["data"]
    loaded = [await make_booking() for _ in range(2)]
    await make_booking()
    single = await make_booking(destination="Nashik")
    await client.post(f"/v1/vehicles/{vehicle['id']}/assign-bookings", json={"bookingIds": [b["id"] for b in loaded]})
    await client.post(f"/v1/vehicles/{spare['id']}/assign-bookings", json={"bookingIds": [single["id"]]})

    response = await client.get("/v1/reports/vehicle-dispatch")

    assert response.json()["data"] == [
        {"vehicle": "MH12AB1234", "count": 2},
        {"vehicle": "KA01XY0001", "count": 1}
    ]

    nashik = (await client.get("/v1/reports/vehicle-dispatch", params={"city": "Nashik"})).json()["data"]
    assert nashik == [{"vehicle": "KA01XY0001", "count": 1}]


@pytest.mark.asyncio
async def test_vehicle_dispatch_top_ten(client, make_booking):
    for index in range(12):
        registration = f"GJ05AA{index:04d}"
        truck = (await client.post("/v1/vehicles", json={"registrationNumber": registration})).json()["data"]
        bookings = [await make_booking() for _ in range(1 + index % 3)]
        await client.post(
            f"/v1/vehicles/{truck['id']}/assign-bookings",
            json={"bookingIds": [b["id"] for b in bookings]}
        )

    response = await client.get("/v1/reports/vehicle-dispatch")

    rows = response.json()["data"]
    assert len(rows) == 10
    assert [row["count"] for row in rows] == sorted((row["count"] for row in rows), reverse=True)
    assert rows[0]["count"] == 3
