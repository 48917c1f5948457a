"""
Rate Card service.

Creating a card replaces the company's active card: previous cards are
deactivated (kept as history) and the new card is inserted in the same
transaction, so no reader sees a company with zero active cards. The
partial unique index on (company_id WHERE is_active) rejects a concurrent
second active card.
"""

import logging
from datetime import date
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from dispatch_backend.app.core.exceptions import ConflictError, ResourceNotFoundError
from dispatch_backend.app.db.session import commit_or_raise, flush_or_raise
from dispatch_backend.app.domain.pricing.pricing_engine import to_money
from dispatch_backend.app.models.rate_card import RateCard
from dispatch_backend.app.schemas.rate_card import RateCardCreate, RateCardUpdate
from dispatch_backend.app.services.audit import log_event, AuditAction
from dispatch_backend.app.services.company_service import CompanyService

logger = logging.getLogger(__name__)


class RateCardService:

    @staticmethod
    async def create_rate_card(db: AsyncSession, data: RateCardCreate) -> RateCard:
        """
        Replace the company's active rate card.

        Raises:
            ResourceNotFoundError: Company does not exist
            ConflictError: Another active card was written concurrently
        """
        await CompanyService.get_company(db, data.company_id)

        try:
            deactivated = await db.execute(
                update(RateCard)
                .where(RateCard.company_id == data.company_id, RateCard.is_active == True)
                .values(is_active=False)
                .execution_options(synchronize_session=False)
            )

            rate_card = RateCard(
                company_id=data.company_id,
                per_article_rate=to_money(data.per_article_rate),
                base_rate=to_money(data.base_rate),
                parcel_type_charges=data.parcel_type_charges,
                effective_from=data.effective_from or date.today(),
                is_active=True
            )
            db.add(rate_card)
            await flush_or_raise(db, "create rate card")

            log_event(
                db,
                AuditAction.RATE_CARD_CREATED,
                "rate_card",
                rate_card.id,
                {
                    "company_id": data.company_id,
                    "per_article_rate": str(rate_card.per_article_rate),
                    "deactivated_cards": deactivated.rowcount
                }
            )
            await commit_or_raise(db, "create rate card")
        except IntegrityError as exc:
            raise ConflictError(
                "Another active rate card was created for this company at the same time",
                details={"company_id": data.company_id}
            ) from exc

        await db.refresh(rate_card)
        logger.info(
            "rate card %s active for company_id=%s at %s per article",
            rate_card.id, rate_card.company_id, rate_card.per_article_rate
        )
        return rate_card

    @staticmethod
    async def update_rate_card(db: AsyncSession, rate_card_id: int, data: RateCardUpdate) -> RateCard:
        rate_card = await RateCardService.get_rate_card(db, rate_card_id)

        update_data = data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if value is None and field in ("per_article_rate", "base_rate", "effective_from"):
                continue
            setattr(rate_card, field, value)

        log_event(
            db,
            AuditAction.RATE_CARD_UPDATED,
            "rate_card",
            rate_card.id,
            {"updated_fields": list(update_data.keys())}
        )
        await commit_or_raise(db, "update rate card")
        await db.refresh(rate_card)
        return rate_card

    @staticmethod
    async def get_rate_card(db: AsyncSession, rate_card_id: int) -> RateCard:
        rate_card = await db.get(RateCard, rate_card_id)
        if rate_card is None:
            raise ResourceNotFoundError("Rate card", rate_card_id)
        return rate_card

    @staticmethod
    async def list_active_rate_cards(db: AsyncSession, company_id: Optional[int] = None) -> List[RateCard]:
        query = select(RateCard).where(RateCard.is_active == True)
        if company_id is not None:
            query = query.where(RateCard.company_id == company_id)
        query = query.order_by(RateCard.effective_from.desc(), RateCard.id.desc())

        result = await db.execute(query)
        return result.scalars().all()

    @staticmethod
    async def list_company_rate_history(db: AsyncSession, company_id: int) -> List[RateCard]:
        """All cards of a company, active and superseded, newest first."""
        await CompanyService.get_company(db, company_id)
        result = await db.execute(
            select(RateCard)
            .where(RateCard.company_id == company_id)
            .order_by(RateCard.effective_from.desc(), RateCard.id.desc())
        )
        return result.scalars().all()
