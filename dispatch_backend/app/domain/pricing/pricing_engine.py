"""
Booking Pricing Engine.

Computes a booking's charges from its article count and the company's
resolved rate card:

    per_article_rate = rate card rate, or the default rate when no usable card
    total_amount     = article_count × per_article_rate
    grand_total      = total_amount

Base rate, parcel type, zone and GST components are recorded as zero.
The rate model carries those fields but pricing does not apply them.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from dispatch_backend.app.core.config import settings
from dispatch_backend.app.core.exceptions import ValidationFailedError
from dispatch_backend.app.models.rate_card import RateCard

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Largest value a Numeric(10, 2) money column holds
MAX_AMOUNT = Decimal("99999999.99")
MAX_ARTICLE_COUNT = 100_000


def to_money(value) -> Decimal:
    """Quantize to two decimal places (ROUND_HALF_UP)."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def usable_rate(rate_card: Optional[RateCard]) -> Optional[Decimal]:
    """Return the card's per-article rate, or None when missing or malformed."""
    if rate_card is None or rate_card.per_article_rate is None:
        return None
    try:
        rate = Decimal(str(rate_card.per_article_rate))
    except ArithmeticError:
        return None
    if not rate.is_finite() or rate <= 0:
        return None
    return rate


@dataclass(frozen=True)
class PriceBreakdown:
    per_article_rate: Decimal
    total_amount: Decimal
    grand_total: Decimal
    used_rate_card: bool
    base_rate: Decimal = ZERO
    parcel_type_charge: Decimal = ZERO
    zone_charge: Decimal = ZERO
    gst_amount: Decimal = ZERO

    def as_booking_fields(self) -> dict:
        return {
            "base_rate": self.base_rate,
            "per_article_rate": self.per_article_rate,
            "parcel_type_charge": self.parcel_type_charge,
            "zone_charge": self.zone_charge,
            "total_amount": self.total_amount,
            "gst_amount": self.gst_amount,
            "grand_total": self.grand_total,
        }


def compute_price(
    article_count: int,
    rate_card: Optional[RateCard],
    default_rate: Optional[Decimal] = None
) -> PriceBreakdown:
    """
    Price a booking.

    Args:
        article_count: Number of articles (must be positive)
        rate_card: Resolved active rate card, or None
        default_rate: Fallback per-article rate (settings default when omitted)

    Returns:
        PriceBreakdown with grand_total == article_count × per_article_rate

    Raises:
        ValueError: If article_count is not a positive integer
        ValidationFailedError: If the total does not fit a money column
    """
    if isinstance(article_count, bool) or not isinstance(article_count, int) or article_count <= 0:
        raise ValueError(f"article_count must be a positive integer, got {article_count!r}")

    rate = usable_rate(rate_card)
    used_rate_card = rate is not None
    if rate is None:
        rate = default_rate if default_rate is not None else settings.default_per_article_rate

    per_article_rate = to_money(rate)
    total_amount = to_money(per_article_rate * article_count)
    if total_amount > MAX_AMOUNT:
        raise ValidationFailedError(
            "Booking total exceeds the maximum amount",
            details={
                "article_count": article_count,
                "per_article_rate": str(per_article_rate),
                "max_amount": str(MAX_AMOUNT)
            }
        )

    return PriceBreakdown(
        per_article_rate=per_article_rate,
        total_amount=total_amount,
        grand_total=total_amount,
        used_rate_card=used_rate_card,
    )
