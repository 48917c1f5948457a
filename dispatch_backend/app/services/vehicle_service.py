"""
Vehicle registry service.

Vehicles are listed with their live load: the number of IN-TRANSIT bookings
on each vehicle. The stored status is reconciled against that count for
display only; writes happen through assignment and delivery.
"""

import logging
from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from dispatch_backend.app.core.exceptions import ConflictError, ResourceNotFoundError
from dispatch_backend.app.db.session import commit_or_raise, flush_or_raise
from dispatch_backend.app.models.booking import Booking
from dispatch_backend.app.models.driver import Driver
from dispatch_backend.app.models.enums import BookingStatus, VehicleStatus
from dispatch_backend.app.models.vehicle import Vehicle
from dispatch_backend.app.schemas.vehicle import VehicleCreate, VehicleUpdate, VehicleListItem, DriverSummary
from dispatch_backend.app.services.audit import log_event, AuditAction
from dispatch_backend.app.services.driver_service import DriverService

logger = logging.getLogger(__name__)


def reconcile_vehicle_status(stored: VehicleStatus, in_transit_count: int) -> VehicleStatus:
    """
    Status to display for a vehicle given its live IN-TRANSIT count.

    A loaded vehicle stored as Available shows Assigned; an empty vehicle
    stored as Assigned or Dispatched shows Available.
    """
    if in_transit_count > 0 and stored == VehicleStatus.AVAILABLE:
        return VehicleStatus.ASSIGNED
    if in_transit_count == 0 and stored in (VehicleStatus.ASSIGNED, VehicleStatus.DISPATCHED):
        return VehicleStatus.AVAILABLE
    return stored


async def count_in_transit(db: AsyncSession, vehicle_id: int) -> int:
    result = await db.execute(
        select(func.count(Booking.id)).where(
            Booking.assigned_vehicle_id == vehicle_id,
            Booking.status == BookingStatus.IN_TRANSIT
        )
    )
    return result.scalar_one()


class VehicleService:

    @staticmethod
    async def create_vehicle(db: AsyncSession, data: VehicleCreate) -> Vehicle:
        if data.current_driver_id is not None:
            await DriverService.get_driver(db, data.current_driver_id)

        vehicle = Vehicle(**data.model_dump())
        db.add(vehicle)

        try:
            await flush_or_raise(db, "create vehicle")
            log_event(
                db,
                AuditAction.VEHICLE_CREATED,
                "vehicle",
                vehicle.id,
                {"registration_number": vehicle.registration_number}
            )
            await commit_or_raise(db, "create vehicle")
        except IntegrityError as exc:
            await db.rollback()
            raise ConflictError(
                f"Vehicle {data.registration_number} is already registered",
                details={"registration_number": data.registration_number}
            ) from exc

        await db.refresh(vehicle)
        logger.info("vehicle registered id=%s number=%s", vehicle.id, vehicle.registration_number)
        return vehicle

    @staticmethod
    async def get_vehicle(db: AsyncSession, vehicle_id: int) -> Vehicle:
        vehicle = await db.get(Vehicle, vehicle_id)
        if vehicle is None:
            raise ResourceNotFoundError("Vehicle", vehicle_id)
        return vehicle

    @staticmethod
    async def update_vehicle(db: AsyncSession, vehicle_id: int, data: VehicleUpdate) -> Vehicle:
        """Partial update. Status changes get their own audit entry."""
        vehicle = await VehicleService.get_vehicle(db, vehicle_id)
        old_status = vehicle.status
        if data.current_driver_id is not None:
            await DriverService.get_driver(db, data.current_driver_id)

        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("status") is None:
            update_data.pop("status", None)
        for field, value in update_data.items():
            setattr(vehicle, field, value)

        if vehicle.status != old_status:
            log_event(
                db,
                AuditAction.VEHICLE_STATUS_CHANGED,
                "vehicle",
                vehicle.id,
                {"old_status": old_status.value, "new_status": vehicle.status.value}
            )
        else:
            log_event(
                db,
                AuditAction.VEHICLE_UPDATED,
                "vehicle",
                vehicle.id,
                {"updated_fields": list(update_data.keys())}
            )

        await commit_or_raise(db, "update vehicle")
        await db.refresh(vehicle)
        return vehicle

    @staticmethod
    async def list_vehicles(db: AsyncSession) -> List[VehicleListItem]:
        """All vehicles with assigned parcel counts, driver and reconciled status."""
        counts_result = await db.execute(
            select(Booking.assigned_vehicle_id, func.count(Booking.id))
            .where(
                Booking.status == BookingStatus.IN_TRANSIT,
                Booking.assigned_vehicle_id.is_not(None)
            )
            .group_by(Booking.assigned_vehicle_id)
        )
        counts: Dict[int, int] = {vehicle_id: count for vehicle_id, count in counts_result.all()}

        result = await db.execute(
            select(Vehicle, Driver)
            .outerjoin(Driver, Vehicle.current_driver_id == Driver.id)
            .order_by(Vehicle.registration_number)
        )

        items = []
        for vehicle, driver in result.all():
            in_transit = counts.get(vehicle.id, 0)
            item = VehicleListItem.model_validate({
                **VehicleService._columns(vehicle),
                "status": reconcile_vehicle_status(vehicle.status, in_transit),
                "stored_status": vehicle.status,
                "assigned_parcels": in_transit,
                "driver": DriverSummary.model_validate(driver) if driver else None,
            })
            items.append(item)
        return items

    @staticmethod
    async def list_vehicle_bookings(db: AsyncSession, vehicle_id: int) -> List[Booking]:
        """Bookings currently travelling on the vehicle."""
        await VehicleService.get_vehicle(db, vehicle_id)
        result = await db.execute(
            select(Booking)
            .where(
                Booking.assigned_vehicle_id == vehicle_id,
                Booking.status == BookingStatus.IN_TRANSIT
            )
            .order_by(Booking.dispatched_at.desc(), Booking.id.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def release_if_empty(db: AsyncSession, vehicle_id: Optional[int]) -> Optional[VehicleStatus]:
        """
        Set a vehicle back to Available once nothing is in transit on it.

        Pending changes must be flushed first so the count sees them.
        Returns the new status when it changed, else None.
        """
        if vehicle_id is None:
            return None
        vehicle = await db.get(Vehicle, vehicle_id)
        if vehicle is None or vehicle.status == VehicleStatus.AVAILABLE:
            return None
        if await count_in_transit(db, vehicle_id) > 0:
            return None

        old_status = vehicle.status
        vehicle.status = VehicleStatus.AVAILABLE
        log_event(
            db,
            AuditAction.VEHICLE_STATUS_CHANGED,
            "vehicle",
            vehicle.id,
            {"old_status": old_status.value, "new_status": vehicle.status.value, "reason": "no bookings in transit"}
        )
        logger.info("vehicle %s released, no bookings in transit", vehicle_id)
        return vehicle.status

    @staticmethod
    def _columns(vehicle: Vehicle) -> dict:
        return {column.name: getattr(vehicle, column.name) for column in Vehicle.__table__.columns}
