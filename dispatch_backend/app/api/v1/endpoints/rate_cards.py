"""
Rate Card API Endpoints.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch_backend.app.db.session import get_db
from dispatch_backend.app.schemas.common import APIResponse
from dispatch_backend.app.schemas.rate_card import RateCardCreate, RateCardUpdate, RateCardResponse
from dispatch_backend.app.services.rate_card_service import RateCardService

router = APIRouter(prefix="/ratecards", tags=["Rate Cards"])


@router.get("", response_model=APIResponse[List[RateCardResponse]])
async def list_rate_cards(
    company_id: Optional[int] = Query(None, alias="companyId", description="Filter by company"),
    db: AsyncSession = Depends(get_db)
):
    """Active rate cards, optionally for one company."""
    rate_cards = await RateCardService.list_active_rate_cards(db, company_id)
    return APIResponse(
        data=[RateCardResponse.model_validate(rc) for rc in rate_cards],
        count=len(rate_cards)
    )


@router.post("", response_model=APIResponse[RateCardResponse], status_code=status.HTTP_201_CREATED)
async def create_rate_card(
    rate_card_data: RateCardCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Create a rate card for a company.

    The company's previous cards are deactivated in the same transaction.
    """
    rate_card = await RateCardService.create_rate_card(db, rate_card_data)
    return APIResponse(
        data=RateCardResponse.model_validate(rate_card),
        message="Rate card created"
    )


@router.get("/{rate_card_id}", response_model=APIResponse[RateCardResponse])
async def get_rate_card(rate_card_id: int, db: AsyncSession = Depends(get_db)):
    rate_card = await RateCardService.get_rate_card(db, rate_card_id)
    return APIResponse(data=RateCardResponse.model_validate(rate_card))


@router.put("/{rate_card_id}", response_model=APIResponse[RateCardResponse])
async def update_rate_card(
    rate_card_id: int,
    update_data: RateCardUpdate,
    db: AsyncSession = Depends(get_db)
):
    rate_card = await RateCardService.update_rate_card(db, rate_card_id, update_data)
    return APIResponse(
        data=RateCardResponse.model_validate(rate_card),
        message="Rate card updated"
    )
