"""
Vehicle API Endpoints.

Vehicle registry and the booking assignment workflow.
"""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch_backend.app.db.session import get_db
from dispatch_backend.app.schemas.booking import BookingResponse
from dispatch_backend.app.schemas.common import APIResponse
from dispatch_backend.app.schemas.vehicle import (
    VehicleCreate,
    VehicleUpdate,
    VehicleResponse,
    VehicleListItem,
    AssignBookingsRequest,
    AssignmentResult,
)
from dispatch_backend.app.services.assignment_service import AssignmentService
from dispatch_backend.app.services.vehicle_service import VehicleService

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])


@router.post("", response_model=APIResponse[VehicleResponse], status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    vehicle_data: VehicleCreate,
    db: AsyncSession = Depends(get_db)
):
    """Register a vehicle. Registration numbers are unique (409 on duplicates)."""
    vehicle = await VehicleService.create_vehicle(db, vehicle_data)
    return APIResponse(
        data=VehicleResponse.model_validate(vehicle),
        message=f"Vehicle {vehicle.registration_number} registered"
    )


@router.get("", response_model=APIResponse[List[VehicleListItem]])
async def list_vehicles(db: AsyncSession = Depends(get_db)):
    """
    List vehicles with their in-transit parcel count and driver.

    status is reconciled against the live count; stored_status is the
    persisted value.
    """
    vehicles = await VehicleService.list_vehicles(db)
    return APIResponse(data=vehicles, count=len(vehicles))


@router.get("/{vehicle_id}", response_model=APIResponse[VehicleResponse])
async def get_vehicle(vehicle_id: int, db: AsyncSession = Depends(get_db)):
    vehicle = await VehicleService.get_vehicle(db, vehicle_id)
    return APIResponse(data=VehicleResponse.model_validate(vehicle))


@router.put("/{vehicle_id}", response_model=APIResponse[VehicleResponse])
async def update_vehicle(
    vehicle_id: int,
    update_data: VehicleUpdate,
    db: AsyncSession = Depends(get_db)
):
    vehicle = await VehicleService.update_vehicle(db, vehicle_id, update_data)
    return APIResponse(
        data=VehicleResponse.model_validate(vehicle),
        message="Vehicle updated"
    )


@router.post("/{vehicle_id}/assign-bookings", response_model=APIResponse[AssignmentResult])
async def assign_bookings(
    vehicle_id: int,
    request: AssignBookingsRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Put BOOKED bookings on the vehicle and move them IN-TRANSIT.

    Bookings that are not assignable are listed under skipped; check
    assigned_count for the outcome.
    """
    result = await AssignmentService.assign_bookings_to_vehicle(db, vehicle_id, request.booking_ids)
    return APIResponse(
        data=result,
        message=f"{result.assigned_count} booking(s) assigned to vehicle",
        count=result.assigned_count
    )


@router.get("/{vehicle_id}/bookings", response_model=APIResponse[List[BookingResponse]])
async def list_vehicle_bookings(vehicle_id: int, db: AsyncSession = Depends(get_db)):
    """Bookings currently in transit on the vehicle."""
    bookings = await VehicleService.list_vehicle_bookings(db, vehicle_id)
    return APIResponse(
        data=[BookingResponse.model_validate(b) for b in bookings],
        count=len(bookings)
    )
