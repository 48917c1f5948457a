"""
Booking API Endpoints.

Single and batch booking creation, listing and status changes.
"""

from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch_backend.app.db.session import get_db
from dispatch_backend.app.schemas.booking import (
    BookingCreate,
    BookingBatchCreate,
    BookingUpdate,
    BookingResponse,
    BookingListItem,
    BookingBatchResponse,
)
from dispatch_backend.app.schemas.common import APIResponse
from dispatch_backend.app.services.booking_service import BookingService

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("", response_model=APIResponse[BookingResponse], status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Create a booking.

    The LR number is generated and the booking is priced from the company's
    active rate card (or the default rate).
    """
    booking = await BookingService.create_booking(db, booking_data)
    return APIResponse(
        data=BookingResponse.model_validate(booking),
        message=f"Booking {booking.lr_number} created"
    )


@router.post("/batch", response_model=APIResponse[BookingBatchResponse], status_code=status.HTTP_201_CREATED)
async def create_booking_batch(
    batch_data: BookingBatchCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Create one booking per parcel under a shared LR prefix (all or nothing).
    """
    bookings = await BookingService.create_batch(db, batch_data)
    return APIResponse(
        data=BookingBatchResponse(
            bookings=[BookingResponse.model_validate(b) for b in bookings],
            count=len(bookings),
            company_id=batch_data.company_id
        ),
        message=f"{len(bookings)} bookings created",
        count=len(bookings)
    )


@router.get("", response_model=APIResponse[List[BookingListItem]])
async def list_bookings(
    company_id: Optional[int] = Query(None, alias="companyId", description="Filter by company"),
    company: Optional[str] = Query(None, description="Company name or All"),
    booking_status: Optional[str] = Query(None, alias="status", description="BOOKED, IN-TRANSIT, DELIVERED or All"),
    lr_number: Optional[str] = Query(None, alias="lrNumber", description="LR number substring"),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    db: AsyncSession = Depends(get_db)
):
    """
    List bookings, newest first.
    """
    bookings = await BookingService.list_bookings(
        db,
        company_id=company_id,
        company=company,
        status=booking_status,
        lr_number=lr_number,
        date_from=date_from,
        date_to=date_to,
        limit=limit
    )
    return APIResponse(data=bookings, count=len(bookings))


@router.get("/assignable", response_model=APIResponse[List[BookingResponse]])
async def list_assignable_bookings(db: AsyncSession = Depends(get_db)):
    """BOOKED bookings that are not on a vehicle yet."""
    bookings = await BookingService.list_assignable(db)
    return APIResponse(
        data=[BookingResponse.model_validate(b) for b in bookings],
        count=len(bookings)
    )


@router.get("/{booking_id}", response_model=APIResponse[BookingResponse])
async def get_booking(booking_id: int, db: AsyncSession = Depends(get_db)):
    booking = await BookingService.get_booking(db, booking_id)
    return APIResponse(data=BookingResponse.model_validate(booking))


@router.put("/{booking_id}", response_model=APIResponse[BookingResponse])
async def update_booking(
    booking_id: int,
    update_data: BookingUpdate,
    db: AsyncSession = Depends(get_db)
):
    """
    Change a booking's status, vehicle or driver.

    Setting a vehicle moves the booking IN-TRANSIT through the assignment
    workflow; DELIVERED releases the vehicle. Invalid transitions return 409.
    """
    booking = await BookingService.update_booking(db, booking_id, update_data)
    return APIResponse(
        data=BookingResponse.model_validate(booking),
        message="Booking updated"
    )


@router.patch("/{booking_id}/deliver", response_model=APIResponse[BookingResponse])
async def mark_booking_delivered(booking_id: int, db: AsyncSession = Depends(get_db)):
    """Mark an IN-TRANSIT booking as delivered."""
    booking = await BookingService.mark_delivered(db, booking_id)
    return APIResponse(
        data=BookingResponse.model_validate(booking),
        message=f"Booking {booking.lr_number} delivered"
    )
