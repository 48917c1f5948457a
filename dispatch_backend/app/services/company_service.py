"""
Company registry service.
"""

import logging
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from dispatch_backend.app.core.exceptions import ResourceNotFoundError
from dispatch_backend.app.db.session import commit_or_raise, flush_or_raise
from dispatch_backend.app.models.company import Company
from dispatch_backend.app.schemas.company import CompanyCreate
from dispatch_backend.app.services.audit import log_event, AuditAction

logger = logging.getLogger(__name__)


class CompanyService:

    @staticmethod
    async def create_company(db: AsyncSession, data: CompanyCreate) -> Company:
        company = Company(**data.model_dump())
        db.add(company)
        await flush_or_raise(db, "create company")

        log_event(db, AuditAction.COMPANY_CREATED, "company", company.id, {"name": company.name})
        await commit_or_raise(db, "create company")
        await db.refresh(company)

        logger.info("company registered id=%s name=%s", company.id, company.name)
        return company

    @staticmethod
    async def list_companies(db: AsyncSession) -> List[Company]:
        result = await db.execute(select(Company).order_by(Company.name))
        return result.scalars().all()

    @staticmethod
    async def get_company(db: AsyncSession, company_id: int) -> Company:
        company = await db.get(Company, company_id)
        if company is None:
            raise ResourceNotFoundError("Company", company_id)
        return company
