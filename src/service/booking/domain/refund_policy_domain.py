"""
Refund Policy Engine

Refund is a pure function of (departure time, amounts paid, now). The refund preview
and the actual cancellation both call `calculate_refund`, so what a passenger is shown
is exactly what they get if they cancel at the same instant.

Tiers are platform-wide and read from settings:

    >= FULL_REFUND_LEAD_HOURS   100% of (total - platform fee) minus service fee
    >= BOOKING_DEADLINE_HOURS   PARTIAL_REFUND_PERCENTAGE% of (total - platform fee)
    <  BOOKING_DEADLINE_HOURS   nothing
    departed                    not eligible

The platform fee is never refunded.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Sequence

import attrs

from src.platform.config.core_setting import settings
from src.service.booking.domain.value_object.money import ZERO, MoneyLike, percent_of, to_money
from src.service.booking.domain.value_object.refund_calculation import RefundCalculation


PAST_TRIP_REASON = 'Cannot cancel past trips'


@attrs.define(frozen=True)
class RefundTier:
    min_hours_before: float
    refund_percentage: Decimal
    service_fee: Decimal
    description: str


def default_refund_tiers() -> list[RefundTier]:
    service_fee = to_money(settings.CANCELLATION_SERVICE_FEE)
    partial = Decimal(settings.PARTIAL_REFUND_PERCENTAGE)
    return [
        RefundTier(
            min_hours_before=settings.FULL_REFUND_LEAD_HOURS,
            refund_percentage=Decimal(100),
            service_fee=service_fee,
            description=f'Full refund (minus ₹{service_fee:.0f} service fee)',
        ),
        RefundTier(
            min_hours_before=settings.BOOKING_DEADLINE_HOURS,
            refund_percentage=partial,
            service_fee=ZERO,
            description=f'{partial:.0f}% refund',
        ),
        RefundTier(
            min_hours_before=0,
            refund_percentage=Decimal(0),
            service_fee=ZERO,
            description='No refund',
        ),
    ]


def hours_until(departure_time: datetime, now: datetime) -> float:
    return (departure_time - now).total_seconds() / 3600


def select_tier(hours_before: float, tiers: Sequence[RefundTier]) -> RefundTier:
    for tier in sorted(tiers, key=lambda t: t.min_hours_before, reverse=True):
        if hours_before >= tier.min_hours_before:
            return tier
    return tiers[-1]


def calculate_refund(
    *,
    departure_time: datetime,
    total_amount: MoneyLike,
    platform_fee_paid: MoneyLike,
    now: Optional[datetime] = None,
    tiers: Optional[Sequence[RefundTier]] = None,
) -> RefundCalculation:
    now = now or datetime.now(timezone.utc)
    total = to_money(total_amount)
    hours_before = hours_until(departure_time, now)

    if hours_before <= 0:
        return RefundCalculation.not_eligible(original_amount=total, reason=PAST_TRIP_REASON)

    tier = select_tier(hours_before, tiers or default_refund_tiers())
    refundable_base = max(ZERO, total - to_money(platform_fee_paid))
    refund_amount = percent_of(refundable_base, tier.refund_percentage) - tier.service_fee
    refund_amount = min(max(ZERO, refund_amount), total)

    return RefundCalculation(
        is_eligible=refund_amount > 0,
        original_amount=total,
        refund_percentage=tier.refund_percentage,
        service_fee=tier.service_fee,
        refund_amount=refund_amount,
        reason=tier.description,
    )
