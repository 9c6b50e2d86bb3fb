from typing import List

import attrs

from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.payment_entity import Payment
from src.service.booking.domain.value_object.price_breakdown import PriceBreakdown


@attrs.define(frozen=True)
class BookingResult:
    """Outcome of a committed reservation"""

    booking: Booking
    payment: Payment
    price: PriceBreakdown
    warnings: List[str] = attrs.field(factory=list)
