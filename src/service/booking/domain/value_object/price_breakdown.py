from decimal import Decimal

import attrs


@attrs.define(frozen=True)
class PriceBreakdown:
    """Itemized price of a booking. total_amount == base_fare + platform_fee + gst."""

    base_fare: Decimal
    seats_booked: int
    price_per_seat: Decimal
    platform_fee: Decimal
    gst: Decimal
    toll_charges: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    currency: str = 'INR'

    @property
    def booking_fee(self) -> Decimal:
        """Platform fee plus the GST charged on it"""
        return self.platform_fee + self.gst
