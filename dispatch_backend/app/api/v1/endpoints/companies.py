"""
Company API Endpoints.
"""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch_backend.app.db.session import get_db
from dispatch_backend.app.schemas.common import APIResponse
from dispatch_backend.app.schemas.company import CompanyCreate, CompanyResponse
from dispatch_backend.app.schemas.rate_card import RateCardResponse
from dispatch_backend.app.services.company_service import CompanyService
from dispatch_backend.app.services.rate_card_service import RateCardService

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.post("", response_model=APIResponse[CompanyResponse], status_code=status.HTTP_201_CREATED)
async def create_company(
    company_data: CompanyCreate,
    db: AsyncSession = Depends(get_db)
):
    company = await CompanyService.create_company(db, company_data)
    return APIResponse(
        data=CompanyResponse.model_validate(company),
        message=f"Company {company.name} registered"
    )


@router.get("", response_model=APIResponse[List[CompanyResponse]])
async def list_companies(db: AsyncSession = Depends(get_db)):
    companies = await CompanyService.list_companies(db)
    return APIResponse(
        data=[CompanyResponse.model_validate(c) for c in companies],
        count=len(companies)
    )


@router.get("/{company_id}", response_model=APIResponse[CompanyResponse])
async def get_company(company_id: int, db: AsyncSession = Depends(get_db)):
    company = await CompanyService.get_company(db, company_id)
    return APIResponse(data=CompanyResponse.model_validate(company))


@router.get("/{company_id}/ratecards", response_model=APIResponse[List[RateCardResponse]])
async def list_company_rate_cards(company_id: int, db: AsyncSession = Depends(get_db)):
    """Rate card history of a company, active and superseded."""
    rate_cards = await RateCardService.list_company_rate_history(db, company_id)
    return APIResponse(
        data=[RateCardResponse.model_validate(rc) for rc in rate_cards],
        count=len(rate_cards)
    )
