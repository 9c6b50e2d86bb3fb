"""
Pricing Engine

Pure and deterministic: the same inputs always produce the same breakdown, with no
I/O, so it is safe to call for previews as often as the caller likes.

    base_fare    = price_per_seat * seats + toll_charges - discount
    platform_fee = clamp(base_fare * 5%, min=10, max=100)
    gst          = platform_fee * 18%
    total        = base_fare + platform_fee + gst
"""

from decimal import Decimal

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import ValidationError
from src.service.booking.domain.value_object.money import MoneyLike, percent_of, to_money
from src.service.booking.domain.value_object.price_breakdown import PriceBreakdown


def calculate_platform_fee(base_fare: Decimal) -> Decimal:
    fee = percent_of(base_fare, settings.PLATFORM_FEE_PERCENTAGE)
    fee = max(fee, to_money(settings.PLATFORM_FEE_MIN))
    return min(fee, to_money(settings.PLATFORM_FEE_MAX))


def calculate_gst(platform_fee: Decimal) -> Decimal:
    return percent_of(platform_fee, settings.GST_PERCENTAGE)


def calculate_booking_price(
    *,
    price_per_seat: MoneyLike,
    seats_count: int,
    toll_charges: MoneyLike = 0,
    discount: MoneyLike = 0,
) -> PriceBreakdown:
    price = to_money(price_per_seat)
    tolls = to_money(toll_charges)
    discount_amount = to_money(discount)

    errors: list[str] = []
    if isinstance(seats_count, bool) or not isinstance(seats_count, int) or seats_count <= 0:
        errors.append('Must book at least 1 seat.')
    if price < 0:
        errors.append('Price per seat cannot be negative.')
    if tolls < 0:
        errors.append('Toll charges cannot be negative.')
    if discount_amount < 0:
        errors.append('Discount cannot be negative.')
    if errors:
        raise ValidationError(errors[0], errors=errors)

    base_fare = to_money(price * seats_count + tolls - discount_amount)
    if base_fare < 0:
        raise ValidationError('Discount cannot exceed the fare.')

    platform_fee = calculate_platform_fee(base_fare)
    gst = calculate_gst(platform_fee)

    return PriceBreakdown(
        base_fare=base_fare,
        seats_booked=seats_count,
        price_per_seat=price,
        platform_fee=platform_fee,
        gst=gst,
        toll_charges=tolls,
        discount_amount=discount_amount,
        total_amount=base_fare + platform_fee + gst,
        currency=settings.CURRENCY,
    )
