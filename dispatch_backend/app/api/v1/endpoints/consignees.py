"""
Consignee API Endpoints.

Company-side consignee management and the admin approval queue.
"""

from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch_backend.app.db.session import get_db
from dispatch_backend.app.schemas.common import APIResponse
from dispatch_backend.app.schemas.consignee import (
    ConsigneeCreate,
    ConsigneeUpdate,
    ConsigneeApprove,
    ConsigneeReject,
    ConsigneeResponse,
    PendingConsigneeResponse,
    BookableConsignees,
)
from dispatch_backend.app.services.consignee_service import ConsigneeService

router = APIRouter(prefix="/consignees", tags=["Consignees"])


@router.get("", response_model=APIResponse[List[ConsigneeResponse]])
async def list_consignees(
    company_id: int = Query(..., alias="companyId", description="Owning company"),
    db: AsyncSession = Depends(get_db)
):
    consignees = await ConsigneeService.list_consignees(db, company_id)
    return APIResponse(
        data=[ConsigneeResponse.model_validate(c) for c in consignees],
        count=len(consignees)
    )


@router.get("/pending", response_model=APIResponse[List[PendingConsigneeResponse]])
async def list_pending_consignees(db: AsyncSession = Depends(get_db)):
    """Approval queue across all companies, newest first."""
    pending = await ConsigneeService.list_pending(db)
    return APIResponse(data=pending, count=len(pending))


@router.get("/bookable", response_model=APIResponse[BookableConsignees])
async def list_bookable_consignees(
    company_id: int = Query(..., alias="companyId", description="Owning company"),
    db: AsyncSession = Depends(get_db)
):
    """
    Consignees the company can book against (APPROVED or LEGACY).

    booking_enabled is false when there are none.
    """
    bookable = await ConsigneeService.list_bookable(db, company_id)
    return APIResponse(data=bookable, count=len(bookable.consignees))


@router.post("", response_model=APIResponse[ConsigneeResponse], status_code=status.HTTP_201_CREATED)
async def create_consignee(
    consignee_data: ConsigneeCreate,
    db: AsyncSession = Depends(get_db)
):
    """Register a consignee; it stays PENDING until an admin reviews it."""
    consignee = await ConsigneeService.create_consignee(db, consignee_data)
    return APIResponse(
        data=ConsigneeResponse.model_validate(consignee),
        message="Consignee submitted for approval"
    )


@router.put("/{consignee_id}", response_model=APIResponse[ConsigneeResponse])
async def update_consignee(
    consignee_id: int,
    update_data: ConsigneeUpdate,
    db: AsyncSession = Depends(get_db)
):
    consignee = await ConsigneeService.update_consignee(db, consignee_id, update_data)
    return APIResponse(
        data=ConsigneeResponse.model_validate(consignee),
        message="Consignee updated"
    )


@router.delete("/{consignee_id}", response_model=APIResponse)
async def delete_consignee(consignee_id: int, db: AsyncSession = Depends(get_db)):
    await ConsigneeService.delete_consignee(db, consignee_id)
    return APIResponse(message="Consignee deleted")


@router.put("/{consignee_id}/last-used", response_model=APIResponse[ConsigneeResponse])
async def mark_consignee_used(consignee_id: int, db: AsyncSession = Depends(get_db)):
    consignee = await ConsigneeService.mark_used(db, consignee_id)
    return APIResponse(data=ConsigneeResponse.model_validate(consignee))


@router.put("/{consignee_id}/approve", response_model=APIResponse[ConsigneeResponse])
async def approve_consignee(
    consignee_id: int,
    request: ConsigneeApprove,
    db: AsyncSession = Depends(get_db)
):
    """
    Approve a PENDING consignee and assign its consignee number.

    409 when the number is taken; 404 when the consignee is missing or was
    already reviewed.
    """
    consignee = await ConsigneeService.approve(db, consignee_id, request.consignee_number)
    return APIResponse(
        data=ConsigneeResponse.model_validate(consignee),
        message="Consignee approved"
    )


@router.put("/{consignee_id}/reject", response_model=APIResponse[ConsigneeResponse])
async def reject_consignee(
    consignee_id: int,
    request: ConsigneeReject,
    db: AsyncSession = Depends(get_db)
):
    consignee = await ConsigneeService.reject(db, consignee_id, request.reason)
    return APIResponse(
        data=ConsigneeResponse.model_validate(consignee),
        message="Consignee rejected"
    )
