"""Protection service price quote calculator.

Pure Python, Decimal arithmetic. Implements:
- Base fee: hourly rate × minimum billable hours (always charged in full)
- Member discount: a fixed fraction of the base fee for eligible accounts
- Final fee: base fee − discount

Business rules:
- Every tier bills a 2-hour minimum; there is no proration below it,
  even if the protection detail ends early
- The discount applies only to non-guest accounts that unlocked a reward;
  eligibility is decided upstream and passed in as a boolean
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from armora.config import settings
from armora.schemas.booking import PriceQuote, ServiceTier


def _to_pounds(value: Decimal) -> Decimal:
    """Round to 2 decimal places."""
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def compute_quote(
    tier: ServiceTier,
    discount_eligible: bool,
    discount_rate: Decimal | None = None,
) -> PriceQuote:
    """Compute the quote for a tier at its minimum billable duration.

    Args:
        tier: Catalog tier with hourly rate and minimum billable hours.
        discount_eligible: Whether the acting account gets the member discount.
        discount_rate: Override for the configured discount fraction.

    Returns:
        PriceQuote with base fee, discount amount and final fee.
    """
    rate = settings.booking.member_discount_rate if discount_rate is None else discount_rate

    base_fee = _to_pounds(tier.hourly_rate * tier.minimum_billable_hours)
    discount_amount = _to_pounds(base_fee * rate) if discount_eligible else Decimal("0.00")
    final_fee = _to_pounds(base_fee - discount_amount)

    return PriceQuote(
        tier_id=tier.id,
        hourly_rate=_to_pounds(tier.hourly_rate),
        billable_hours=tier.minimum_billable_hours,
        base_fee=base_fee,
        discount_applied=discount_eligible,
        discount_amount=discount_amount,
        final_fee=final_fee,
        currency=settings.booking.currency,
    )
