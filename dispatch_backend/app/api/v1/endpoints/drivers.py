"""
Driver API Endpoints.
"""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch_backend.app.db.session import get_db
from dispatch_backend.app.schemas.common import APIResponse
from dispatch_backend.app.schemas.driver import DriverCreate, DriverUpdate, DriverResponse
from dispatch_backend.app.services.driver_service import DriverService

router = APIRouter(prefix="/drivers", tags=["Drivers"])


@router.post("", response_model=APIResponse[DriverResponse], status_code=status.HTTP_201_CREATED)
async def create_driver(
    driver_data: DriverCreate,
    db: AsyncSession = Depends(get_db)
):
    driver = await DriverService.create_driver(db, driver_data)
    return APIResponse(
        data=DriverResponse.model_validate(driver),
        message=f"Driver {driver.name} registered"
    )


@router.get("", response_model=APIResponse[List[DriverResponse]])
async def list_drivers(db: AsyncSession = Depends(get_db)):
    drivers = await DriverService.list_drivers(db)
    return APIResponse(
        data=[DriverResponse.model_validate(d) for d in drivers],
        count=len(drivers)
    )


@router.put("/{driver_id}", response_model=APIResponse[DriverResponse])
async def update_driver(
    driver_id: int,
    update_data: DriverUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update a driver's vehicle, employment status or duty status."""
    driver = await DriverService.update_driver(db, driver_id, update_data)
    return APIResponse(
        data=DriverResponse.model_validate(driver),
        message="Driver updated"
    )
