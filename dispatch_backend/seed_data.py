"""
Database seeding script for demo data.

Creates a company with an active rate card, an approved consignee, a driver
and a vehicle so bookings can be created and dispatched straight away.
Run this script after the database is set up.
"""

import asyncio
import logging
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import select

from dispatch_backend.app.core.config import settings
from dispatch_backend.app.core.observability import configure_logging
from dispatch_backend.app.db.session import AsyncSessionLocal, Base, engine
from dispatch_backend.app.models.company import Company
from dispatch_backend.app.models.consignee import Consignee
from dispatch_backend.app.models.driver import Driver
from dispatch_backend.app.models.enums import ConsigneeStatus, VehicleStatus
from dispatch_backend.app.models.rate_card import RateCard
from dispatch_backend.app.models.vehicle import Vehicle
# Imported so create_all also builds these tables
from dispatch_backend.app.models.booking import Booking
from dispatch_backend.app.models.audit_log import AuditLog

logger = logging.getLogger("dispatch.seed")

DEMO_COMPANY = "Demo Traders"


async def seed_data():
    """
    Seed demo records.

    Creates:
    - 1 company with a rate card of 12.00 per article
    - 1 approved consignee
    - 1 driver and 1 vehicle driven by them
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        existing = await db.execute(select(Company).where(Company.name == DEMO_COMPANY))
        if existing.scalar_one_or_none():
            logger.info("demo company already exists, skipping seeding")
            return

        company = Company(
            name=DEMO_COMPANY,
            contact_person="Asha Patil",
            phone="9820000000",
            email="ops@demotraders.example"
        )
        db.add(company)
        await db.flush()

        db.add(RateCard(
            company_id=company.id,
            per_article_rate=Decimal("12.00"),
            base_rate=Decimal("0.00"),
            parcel_type_charges={"Standard": 0, "Express": 0},
            effective_from=date.today(),
            is_active=True
        ))

        db.add(Consignee(
            company_id=company.id,
            name="Kiran General Stores",
            contact_person="Kiran Shah",
            address="12 MG Road",
            city="Pune",
            state="Maharashtra",
            pincode="411001",
            phone="9988776655",
            status=ConsigneeStatus.APPROVED,
            consignee_number="CN-0001",
            approved_at=datetime.now(timezone.utc)
        ))

        driver = Driver(name="Suresh Yadav", phone="9000000001", license_number="MH1220110012345")
        db.add(driver)
        await db.flush()

        vehicle = Vehicle(
            registration_number="MH12AB1234",
            vehicle_type="Truck",
            make="Tata",
            model="407",
            capacity=200,
            capacity_kg=2500,
            status=VehicleStatus.AVAILABLE,
            current_driver_id=driver.id
        )
        db.add(vehicle)
        await db.flush()
        driver.assigned_vehicle_id = vehicle.id

        await db.commit()
        logger.info(
            "seeded company_id=%s driver_id=%s vehicle_id=%s",
            company.id, driver.id, vehicle.id
        )


if __name__ == "__main__":
    configure_logging(settings.log_level)
    asyncio.run(seed_data())
