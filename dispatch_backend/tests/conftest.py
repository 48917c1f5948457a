"""
Centralized Test Configuration.
"""

import itertools
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from dispatch_backend.app.main import app
from dispatch_backend.app.db.session import get_db, Base

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Event handler to enable foreign keys for SQLite
from sqlalchemy import event
from sqlalchemy.pool import Pool

@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


@pytest.fixture(scope="session", autouse=True)
def apply_overrides():
    """Route every request to the in-memory database."""

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def sequential_lr_numbers(mocker):
    """
    LR numbers are epoch milliseconds; two bookings created within the same
    millisecond would collide. Tests get a strictly increasing sequence.
    """
    counter = itertools.count(1_700_000_000_000)

    def next_lr_number(now_ms=None, prefix=None):
        return f"{prefix or 'LR'}{next(counter)}"

    mocker.patch(
        "dispatch_backend.app.services.booking_service.generate_lr_number",
        side_effect=next_lr_number
    )


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


# Common records

@pytest.fixture
async def company(client):
    response = await client.post("/v1/companies", json={
        "name": "Acme Traders",
        "contactPerson": "Ravi Kumar",
        "phone": "9876543210",
        "email": "ops@acme.example"
    })
    assert response.status_code == 201
    return response.json()["data"]


@pytest.fixture
async def other_company(client):
    response = await client.post("/v1/companies", json={"name": "Beta Logistics"})
    assert response.status_code == 201
    return response.json()["data"]


@pytest.fixture
async def driver(client):
    response = await client.post("/v1/drivers", json={
        "name": "Suresh",
        "phone": "9000000001",
        "licenseNumber": "DL-0420110012345"
    })
    assert response.status_code == 201
    return response.json()["data"]


@pytest.fixture
async def vehicle(client, driver):
    response = await client.post("/v1/vehicles", json={
        "registrationNumber": "MH12AB1234",
        "vehicleType": "Truck",
        "capacity": 200,
        "currentDriverId": driver["id"]
    })
    assert response.status_code == 201
    return response.json()["data"]


@pytest.fixture
def make_booking(client, company):
    """Factory creating a BOOKED booking for the default company."""

    async def _make(article_count=3, **overrides):
        payload = {
            "companyId": company["id"],
            "consigneeName": "Kiran Stores",
            "destination": "Pune",
            "articleCount": article_count,
        }
        payload.update(overrides)
        response = await client.post("/v1/bookings", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _make
