"""
Tests for the consignee approval workflow.

PENDING → APPROVED (with a unique consignee number) or REJECTED (with a
reason). Only APPROVED and LEGACY consignees are bookable.
"""

import pytest
from sqlalchemy import select

from dispatch_backend.app.models.consignee import Consignee
from dispatch_backend.app.models.enums import ConsigneeStatus


@pytest.fixture
def make_consignee(client, company):
    async def _make(name="Kiran Stores", company_id=None):
        response = await client.post("/v1/consignees", json={
            "companyId": company_id or company["id"],
            "name": name,
            "address": "12 MG Road",
            "city": "Pune",
            "phone": "9988776655",
            "email": "kiran@example.com"
        })
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _make


# ============================================================================
# Registration
# ============================================================================

@pytest.mark.asyncio
async def test_new_consignee_is_pending(client, make_consignee):
    consignee = await make_consignee()

    assert consignee["status"] == "PENDING"
    assert consignee["consignee_number"] is None


@pytest.mark.asyncio
async def test_consignee_fields_trimmed(client, company):
    response = await client.post("/v1/consignees", json={
        "companyId": company["id"],
        "name": "  Kiran Stores  ",
        "address": " 12 MG Road ",
        "city": " Pune",
        "phone": "9988776655 "
    })

    consignee = response.json()["data"]
    assert consignee["name"] == "Kiran Stores"
    assert consignee["city"] == "Pune"
    assert consignee["phone"] == "9988776655"


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["name", "address", "city", "phone", "companyId"])
async def test_consignee_required_fields(client, company, missing):
    payload = {
        "companyId": company["id"],
        "name": "Kiran Stores",
        "address": "12 MG Road",
        "city": "Pune",
        "phone": "9988776655"
    }
    payload.pop(missing)

    response = await client.post("/v1/consignees", json=payload)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_consignee_for_missing_company(client):
    response = await client.post("/v1/consignees", json={
        "companyId": 404,
        "name": "Kiran Stores",
        "address": "12 MG Road",
        "city": "Pune",
        "phone": "9988776655"
    })
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_pending_queue_includes_company(client, company, make_consignee):
    older = await make_consignee("Older")
    newer = await make_consignee("Newer")

    response = await client.get("/v1/consignees/pending")

    pending = response.json()["data"]
    assert [c["id"] for c in pending] == [newer["id"], older["id"]]
    assert pending[0]["company_name"] == company["name"]
    assert pending[0]["company_email"] == company["email"]


@pytest.mark.asyncio
async def test_list_company_consignees_by_name(client, company, make_consignee):
    await make_consignee("Zeta")
    await make_consignee("Alpha")

    response = await client.get("/v1/consignees", params={"companyId": company["id"]})

    assert [c["name"] for c in response.json()["data"]] == ["Alpha", "Zeta"]


# ============================================================================
# Approval
# ============================================================================

@pytest.mark.asyncio
async def test_approve_consignee(client, make_consignee):
    consignee = await make_consignee()

    response = await client.put(f"/v1/consignees/{consignee['id']}/approve", json={"consigneeNumber": "CN-001"})

    assert response.status_code == 200
    approved = response.json()["data"]
    assert approved["status"] == "APPROVED"
    assert approved["consignee_number"] == "CN-001"
    assert approved["approved_at"] is not None

    pending = await client.get("/v1/consignees/pending")
    assert pending.json()["count"] == 0


@pytest.mark.asyncio
async def test_approve_twice_reports_already_processed(client, make_consignee):
    consignee = await make_consignee()
    await client.put(f"/v1/consignees/{consignee['id']}/approve", json={"consigneeNumber": "CN-001"})

    response = await client.put(f"/v1/consignees/{consignee['id']}/approve", json={"consigneeNumber": "CN-002"})

    assert response.status_code == 404
    body = response.json()
    assert body["error_code"] == "ERR_NOT_FOUND_002"
    assert body["error"] == "Consignee not found or already processed"

    unchanged = await client.get("/v1/consignees", params={"companyId": consignee["company_id"]})
    assert unchanged.json()["data"][0]["consignee_number"] == "CN-001"


@pytest.mark.asyncio
async def test_approve_missing_consignee(client):
    response = await client.put("/v1/consignees/999/approve", json={"consigneeNumber": "CN-001"})

    assert response.status_code == 404
    assert response.json()["error_code"] == "ERR_NOT_FOUND_002"


@pytest.mark.asyncio
async def test_duplicate_consignee_number_refused(client, make_consignee, db_session):
    first = await make_consignee("First")
    second = await make_consignee("Second")
    await client.put(f"/v1/consignees/{first['id']}/approve", json={"consigneeNumber": "CN-001"})

    response = await client.put(f"/v1/consignees/{second['id']}/approve", json={"consigneeNumber": "CN-001"})

    assert response.status_code == 409
    assert response.json()["error"] == "Consignee number CN-001 is already assigned to another consignee"

    row = await db_session.scalar(select(Consignee).where(Consignee.id == second["id"]))
    assert row.status == ConsigneeStatus.PENDING
    assert row.consignee_number is None


@pytest.mark.asyncio
async def test_approve_requires_number(client, make_consignee):
    consignee = await make_consignee()

    missing = await client.put(f"/v1/consignees/{consignee['id']}/approve", json={})
    assert missing.status_code == 422

    blank = await client.put(f"/v1/consignees/{consignee['id']}/approve", json={"consigneeNumber": "   "})
    assert blank.status_code == 422


# ============================================================================
# Rejection
# ============================================================================

@pytest.mark.asyncio
async def test_reject_consignee(client, make_consignee):
    consignee = await make_consignee()

    response = await client.put(f"/v1/consignees/{consignee['id']}/reject", json={"reason": "Incomplete address"})

    assert response.status_code == 200
    rejected = response.json()["data"]
    assert rejected["status"] == "REJECTED"
    assert rejected["rejection_reason"] == "Incomplete address"


@pytest.mark.asyncio
async def test_blank_rejection_reason_refused(client, make_consignee, db_session):
    consignee = await make_consignee()

    response = await client.put(f"/v1/consignees/{consignee['id']}/reject", json={"reason": "   "})

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_VALIDATION_001"
    row = await db_session.scalar(select(Consignee).where(Consignee.id == consignee["id"]))
    assert row.status == ConsigneeStatus.PENDING


@pytest.mark.asyncio
async def test_reject_after_approval_refused(client, make_consignee):
    consignee = await make_consignee()
    await client.put(f"/v1/consignees/{consignee['id']}/approve", json={"consigneeNumber": "CN-001"})

    response = await client.put(f"/v1/consignees/{consignee['id']}/reject", json={"reason": "Too late"})

    assert response.status_code == 404
    assert response.json()["error_code"] == "ERR_NOT_FOUND_002"


@pytest.mark.asyncio
async def test_review_actions_are_audited(client, make_consignee):
    approved = await make_consignee("A")
    rejected = await make_consignee("B")
    await client.put(f"/v1/consignees/{approved['id']}/approve", json={"consigneeNumber": "CN-9"})
    await client.put(f"/v1/consignees/{rejected['id']}/reject", json={"reason": "Duplicate"})

    logs = await client.get("/v1/audit-logs", params={"entityType": "consignee"})

    actions = {(entry["action"], entry["entity_id"]) for entry in logs.json()["data"]}
    assert ("CONSIGNEE_APPROVED", approved["id"]) in actions
    assert ("CONSIGNEE_REJECTED", rejected["id"]) in actions


# ============================================================================
# Company edits
# ============================================================================

CONSIGNEE_EDIT = {
    "name": "Kiran Stores Pvt Ltd",
    "address": "14 MG Road",
    "city": "Pune",
    "phone": "9988776655"
}


@pytest.mark.asyncio
async def test_pending_consignee_cannot_be_edited_or_deleted(client, make_consignee):
    consignee = await make_consignee()

    edit = await client.put(f"/v1/consignees/{consignee['id']}", json=CONSIGNEE_EDIT)
    assert edit.status_code == 409

    delete = await client.delete(f"/v1/consignees/{consignee['id']}")
    assert delete.status_code == 409


@pytest.mark.asyncio
async def test_reviewed_consignee_can_be_edited(client, make_consignee):
    consignee = await make_consignee()
    await client.put(f"/v1/consignees/{consignee['id']}/approve", json={"consigneeNumber": "CN-001"})

    response = await client.put(f"/v1/consignees/{consignee['id']}", json=CONSIGNEE_EDIT)

    assert response.status_code == 200
    edited = response.json()["data"]
    assert edited["name"] == "Kiran Stores Pvt Ltd"
    assert edited["status"] == "APPROVED"


@pytest.mark.asyncio
async def test_rejected_consignee_can_be_deleted(client, make_consignee):
    consignee = await make_consignee()
    await client.put(f"/v1/consignees/{consignee['id']}/reject", json={"reason": "Wrong city"})

    response = await client.delete(f"/v1/consignees/{consignee['id']}")

    assert response.status_code == 200
    remaining = await client.get("/v1/consignees", params={"companyId": consignee["company_id"]})
    assert remaining.json()["count"] == 0


@pytest.mark.asyncio
async def test_mark_consignee_used(client, make_consignee):
    consignee = await make_consignee()

    response = await client.put(f"/v1/consignees/{consignee['id']}/last-used")

    assert response.status_code == 200
    assert response.json()["data"]["last_used"] is not None


# ============================================================================
# Bookability
# ============================================================================

@pytest.mark.asyncio
async def test_bookable_list_gates_booking(client, company, make_consignee, db_session):
    consignee = await make_consignee()

    empty = await client.get("/v1/consignees/bookable", params={"companyId": company["id"]})
    assert empty.json()["data"] == {"consignees": [], "booking_enabled": False}

    await client.put(f"/v1/consignees/{consignee['id']}/approve", json={"consigneeNumber": "CN-001"})
    db_session.add(Consignee(
        company_id=company["id"],
        name="Old Customer",
        address="1 Station Road",
        city="Nagpur",
        phone="9000000000"
    ))
    await db_session.commit()

    response = await client.get("/v1/consignees/bookable", params={"companyId": company["id"]})

    data = response.json()["data"]
    assert data["booking_enabled"] is True
    assert {c["status"] for c in data["consignees"]} == {"APPROVED", "LEGACY"}


@pytest.mark.asyncio
async def test_booking_against_pending_consignee_refused(client, company, make_consignee):
    consignee = await make_consignee()

    response = await client.post("/v1/bookings", json={
        "companyId": company["id"],
        "consigneeId": consignee["id"],
        "consigneeName": consignee["name"],
        "destination": "Pune",
        "articleCount": 1
    })

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_booking_against_other_companys_consignee_refused(client, other_company, make_consignee):
    consignee = await make_consignee(company_id=other_company["id"])
    await client.put(f"/v1/consignees/{consignee['id']}/approve", json={"consigneeNumber": "CN-001"})
    own = await client.post("/v1/companies", json={"name": "Gamma"})

    response = await client.post("/v1/bookings", json={
        "companyId": own.json()["data"]["id"],
        "consigneeId": consignee["id"],
        "consigneeName": consignee["name"],
        "destination": "Pune",
        "articleCount": 1
    })

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_booking_against_approved_consignee(client, company, make_consignee):
    consignee = await make_consignee()
    await client.put(f"/v1/consignees/{consignee['id']}/approve", json={"consigneeNumber": "CN-001"})

    response = await client.post("/v1/bookings", json={
        "companyId": company["id"],
        "consigneeId": consignee["id"],
        "consigneeName": consignee["name"],
        "destination": "Pune",
        "articleCount": 2
    })

    assert response.status_code == 201
    booking = response.json()["data"]
    assert booking["consignee_id"] == consignee["id"]
    assert booking["consignee_contact"] == "9988776655"
    assert booking["consignee_address"] == "12 MG Road"

    used = await client.get("/v1/consignees", params={"companyId": company["id"]})
    assert used.json()["data"][0]["last_used"] is not None
