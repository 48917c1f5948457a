"""
Rate Card Resolver.

Responsible for determining the rate card that prices a company's bookings.
A company without a usable active card is priced at the default rate, so
resolution returns None instead of failing the booking.
"""

import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from dispatch_backend.app.models.rate_card import RateCard
from dispatch_backend.app.domain.pricing.pricing_engine import usable_rate

logger = logging.getLogger(__name__)


class RateResolver:

    @staticmethod
    async def resolve_rate(db: AsyncSession, company_id: int) -> Optional[RateCard]:
        """
        Find the company's active rate card, most recent effective_from first.

        Returns:
            The RateCard, or None when the company has no active card or the
            card's per-article rate is missing or not positive.
        """
        query = select(RateCard).where(
            RateCard.company_id == company_id,
            RateCard.is_active == True
        ).order_by(RateCard.effective_from.desc(), RateCard.id.desc()).limit(1)

        result = await db.execute(query)
        rate_card = result.scalar_one_or_none()

        if rate_card is None:
            logger.info("no active rate card for company_id=%s, using default rate", company_id)
            return None

        if usable_rate(rate_card) is None:
            logger.warning(
                "rate card %s for company_id=%s has unusable per_article_rate=%r, using default rate",
                rate_card.id, company_id, rate_card.per_article_rate
            )
            return None

        return rate_card
