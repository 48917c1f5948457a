"""
Driver registry service.
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from dispatch_backend.app.core.exceptions import ResourceNotFoundError
from dispatch_backend.app.db.session import commit_or_raise, flush_or_raise
from dispatch_backend.app.models.driver import Driver
from dispatch_backend.app.schemas.driver import DriverCreate, DriverUpdate
from dispatch_backend.app.services.audit import log_event, AuditAction


class DriverService:

    @staticmethod
    async def create_driver(db: AsyncSession, data: DriverCreate) -> Driver:
        driver = Driver(**data.model_dump())
        db.add(driver)
        await flush_or_raise(db, "create driver")

        log_event(db, AuditAction.DRIVER_CREATED, "driver", driver.id, {"name": driver.name})
        await commit_or_raise(db, "create driver")
        await db.refresh(driver)
        return driver

    @staticmethod
    async def list_drivers(db: AsyncSession) -> List[Driver]:
        result = await db.execute(select(Driver).order_by(Driver.name))
        return result.scalars().all()

    @staticmethod
    async def get_driver(db: AsyncSession, driver_id: int) -> Driver:
        driver = await db.get(Driver, driver_id)
        if driver is None:
            raise ResourceNotFoundError("Driver", driver_id)
        return driver

    @staticmethod
    async def update_driver(db: AsyncSession, driver_id: int, data: DriverUpdate) -> Driver:
        """Partial update; only fields present in the request are written."""
        driver = await DriverService.get_driver(db, driver_id)

        update_data = data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(driver, field, value)

        log_event(db, AuditAction.DRIVER_UPDATED, "driver", driver.id, {"updated_fields": list(update_data.keys())})
        await commit_or_raise(db, "update driver")
        await db.refresh(driver)
        return driver
