"""
Consignee Approval Workflow.

Companies register consignees, which start PENDING. An admin approves a
consignee (assigning a unique consignee number) or rejects it with a reason.
Only APPROVED and LEGACY consignees can be booked against.

Approval and rejection are conditional updates on status = PENDING, so two
admins acting on the same consignee cannot both succeed.
"""

import logging
from datetime import datetime, timezone
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from dispatch_backend.app.core.exceptions import (
    AlreadyProcessedError,
    ConflictError,
    ResourceNotFoundError,
    ValidationFailedError,
)
from dispatch_backend.app.db.session import commit_or_raise, flush_or_raise
from dispatch_backend.app.models.company import Company
from dispatch_backend.app.models.consignee import Consignee
from dispatch_backend.app.models.enums import ConsigneeStatus, BOOKABLE_CONSIGNEE_STATUSES
from dispatch_backend.app.schemas.consignee import (
    ConsigneeCreate,
    ConsigneeUpdate,
    PendingConsigneeResponse,
    BookableConsignees,
    ConsigneeResponse,
)
from dispatch_backend.app.services.audit import log_event, AuditAction
from dispatch_backend.app.services.company_service import CompanyService

logger = logging.getLogger(__name__)


class ConsigneeService:

    @staticmethod
    async def create_consignee(db: AsyncSession, data: ConsigneeCreate) -> Consignee:
        """Register a consignee for a company; it waits for approval."""
        await CompanyService.get_company(db, data.company_id)

        consignee = Consignee(**data.model_dump(), status=ConsigneeStatus.PENDING)
        db.add(consignee)
        await flush_or_raise(db, "create consignee")

        log_event(
            db,
            AuditAction.CONSIGNEE_CREATED,
            "consignee",
            consignee.id,
            {"company_id": data.company_id, "name": consignee.name}
        )
        await commit_or_raise(db, "create consignee")
        await db.refresh(consignee)

        logger.info("consignee %s submitted for approval by company_id=%s", consignee.id, data.company_id)
        return consignee

    @staticmethod
    async def get_consignee(db: AsyncSession, consignee_id: int) -> Consignee:
        consignee = await db.get(Consignee, consignee_id)
        if consignee is None:
            raise ResourceNotFoundError("Consignee", consignee_id)
        return consignee

    @staticmethod
    async def list_consignees(db: AsyncSession, company_id: int) -> List[Consignee]:
        result = await db.execute(
            select(Consignee)
            .where(Consignee.company_id == company_id)
            .order_by(Consignee.name)
        )
        return result.scalars().all()

    @staticmethod
    async def list_pending(db: AsyncSession) -> List[PendingConsigneeResponse]:
        """PENDING consignees across all companies, newest first, with company contact."""
        result = await db.execute(
            select(Consignee, Company.name, Company.email)
            .join(Company, Consignee.company_id == Company.id)
            .where(Consignee.status == ConsigneeStatus.PENDING)
            .order_by(Consignee.created_at.desc(), Consignee.id.desc())
        )

        return [
            PendingConsigneeResponse(
                **ConsigneeResponse.model_validate(consignee).model_dump(),
                company_name=company_name,
                company_email=company_email
            )
            for consignee, company_name, company_email in result.all()
        ]

    @staticmethod
    async def list_bookable(db: AsyncSession, company_id: int) -> BookableConsignees:
        result = await db.execute(
            select(Consignee)
            .where(
                Consignee.company_id == company_id,
                Consignee.status.in_(BOOKABLE_CONSIGNEE_STATUSES)
            )
            .order_by(Consignee.name)
        )
        consignees = result.scalars().all()

        return BookableConsignees(
            consignees=[ConsigneeResponse.model_validate(c) for c in consignees],
            booking_enabled=len(consignees) > 0
        )

    @staticmethod
    async def approve(db: AsyncSession, consignee_id: int, consignee_number: str) -> Consignee:
        """
        Approve a PENDING consignee and assign its consignee number.

        Raises:
            ValidationFailedError: Number is blank
            ConflictError: Number already belongs to another consignee
            AlreadyProcessedError: Consignee missing or no longer PENDING
        """
        consignee_number = (consignee_number or "").strip()
        if not consignee_number:
            raise ValidationFailedError("Consignee number is required")

        holder = await db.execute(
            select(Consignee.id).where(
                Consignee.consignee_number == consignee_number,
                Consignee.id != consignee_id
            )
        )
        if holder.scalar_one_or_none() is not None:
            raise ConflictError(
                f"Consignee number {consignee_number} is already assigned to another consignee",
                details={"consignee_number": consignee_number}
            )

        now = datetime.now(timezone.utc)
        try:
            result = await db.execute(
                update(Consignee)
                .where(Consignee.id == consignee_id, Consignee.status == ConsigneeStatus.PENDING)
                .values(
                    status=ConsigneeStatus.APPROVED,
                    consignee_number=consignee_number,
                    approved_at=now,
                    rejection_reason=None,
                    updated_at=now
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await db.rollback()
                raise AlreadyProcessedError("Consignee", consignee_id)

            log_event(
                db,
                AuditAction.CONSIGNEE_APPROVED,
                "consignee",
                consignee_id,
                {"consignee_number": consignee_number}
            )
            await commit_or_raise(db, "approve consignee")
        except IntegrityError as exc:
            await db.rollback()
            raise ConflictError(
                f"Consignee number {consignee_number} is already assigned to another consignee",
                details={"consignee_number": consignee_number}
            ) from exc

        logger.info("consignee %s approved as %s", consignee_id, consignee_number)
        return await ConsigneeService._reload(db, consignee_id)

    @staticmethod
    async def reject(db: AsyncSession, consignee_id: int, reason: str) -> Consignee:
        """
        Reject a PENDING consignee.

        Raises:
            ValidationFailedError: Reason is blank
            AlreadyProcessedError: Consignee missing or no longer PENDING
        """
        reason = (reason or "").strip()
        if not reason:
            raise ValidationFailedError("Rejection reason is required")

        now = datetime.now(timezone.utc)
        result = await db.execute(
            update(Consignee)
            .where(Consignee.id == consignee_id, Consignee.status == ConsigneeStatus.PENDING)
            .values(
                status=ConsigneeStatus.REJECTED,
                rejection_reason=reason,
                approved_at=now,
                updated_at=now
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await db.rollback()
            raise AlreadyProcessedError("Consignee", consignee_id)

        log_event(db, AuditAction.CONSIGNEE_REJECTED, "consignee", consignee_id, {"reason": reason})
        await commit_or_raise(db, "reject consignee")

        logger.info("consignee %s rejected", consignee_id)
        return await ConsigneeService._reload(db, consignee_id)

    @staticmethod
    async def update_consignee(db: AsyncSession, consignee_id: int, data: ConsigneeUpdate) -> Consignee:
        """Edit a reviewed consignee. PENDING consignees are locked until reviewed."""
        consignee = await ConsigneeService.get_consignee(db, consignee_id)
        ConsigneeService._ensure_editable(consignee)

        update_data = data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(consignee, field, value)

        log_event(
            db,
            AuditAction.CONSIGNEE_UPDATED,
            "consignee",
            consignee.id,
            {"updated_fields": list(update_data.keys())}
        )
        await commit_or_raise(db, "update consignee")
        await db.refresh(consignee)
        return consignee

    @staticmethod
    async def delete_consignee(db: AsyncSession, consignee_id: int) -> None:
        consignee = await ConsigneeService.get_consignee(db, consignee_id)
        ConsigneeService._ensure_editable(consignee)

        await db.delete(consignee)
        log_event(
            db,
            AuditAction.CONSIGNEE_DELETED,
            "consignee",
            consignee_id,
            {"company_id": consignee.company_id, "name": consignee.name}
        )
        await commit_or_raise(db, "delete consignee")
        logger.info("consignee %s deleted", consignee_id)

    @staticmethod
    async def mark_used(db: AsyncSession, consignee_id: int) -> Consignee:
        consignee = await ConsigneeService.get_consignee(db, consignee_id)
        consignee.last_used = datetime.now(timezone.utc)
        await commit_or_raise(db, "update consignee last used")
        await db.refresh(consignee)
        return consignee

    @staticmethod
    def _ensure_editable(consignee: Consignee) -> None:
        if consignee.status == ConsigneeStatus.PENDING:
            raise ConflictError(
                "Consignee is pending approval and cannot be changed",
                details={"consignee_id": consignee.id, "status": consignee.status.value}
            )

    @staticmethod
    async def _reload(db: AsyncSession, consignee_id: int) -> Consignee:
        consignee = await db.get(Consignee, consignee_id, populate_existing=True)
        if consignee is None:
            raise ResourceNotFoundError("Consignee", consignee_id)
        return consignee
