from decimal import Decimal

import pytest

from src.platform.exception.exceptions import ValidationError
from src.service.booking.domain.pricing_domain import (
    calculate_booking_price,
    calculate_gst,
    calculate_platform_fee,
)


@pytest.mark.unit
class TestCalculateBookingPrice:
    def test_two_seats_at_500(self):
        price = calculate_booking_price(price_per_seat=500, seats_count=2)

        assert price.base_fare == Decimal('1000.00')
        assert price.platform_fee == Decimal('50.00')
        assert price.gst == Decimal('9.00')
        assert price.total_amount == Decimal('1059.00')
        assert price.currency == 'INR'

    def test_same_input_same_breakdown(self):
        first = calculate_booking_price(price_per_seat='500', seats_count=2)
        second = calculate_booking_price(price_per_seat=Decimal('500'), seats_count=2)

        assert first == second

    @pytest.mark.parametrize(
        'price_per_seat,seats,tolls,discount',
        [
            (333.33, 3, 0, 0),
            (99.99, 1, 12.5, 0),
            (1234.56, 4, 80, 100),
            (0.01, 1, 0, 0),
        ],
    )
    def test_total_is_exact_sum_of_parts(self, price_per_seat, seats, tolls, discount):
        price = calculate_booking_price(
            price_per_seat=price_per_seat,
            seats_count=seats,
            toll_charges=tolls,
            discount=discount,
        )

        assert price.total_amount == price.base_fare + price.platform_fee + price.gst
        assert price.total_amount.as_tuple().exponent == -2

    def test_tolls_and_discount_adjust_base_fare(self):
        price = calculate_booking_price(
            price_per_seat=500, seats_count=2, toll_charges=60, discount=100
        )

        assert price.base_fare == Decimal('960.00')
        assert price.toll_charges == Decimal('60.00')
        assert price.discount_amount == Decimal('100.00')

    def test_booking_fee_is_fee_plus_gst(self):
        price = calculate_booking_price(price_per_seat=500, seats_count=2)

        assert price.booking_fee == Decimal('59.00')

    def test_zero_seats_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            calculate_booking_price(price_per_seat=500, seats_count=0)

        assert exc_info.value.status_code == 400
        assert 'Must book at least 1 seat.' in exc_info.value.errors

    def test_all_violations_reported(self):
        with pytest.raises(ValidationError) as exc_info:
            calculate_booking_price(price_per_seat=-1, seats_count=0, toll_charges=-5)

        assert len(exc_info.value.errors) == 3

    def test_discount_larger_than_fare_rejected(self):
        with pytest.raises(ValidationError):
            calculate_booking_price(price_per_seat=100, seats_count=1, discount=500)

    @pytest.mark.parametrize('price_per_seat', [float('nan'), float('inf'), 'abc', 'NaN'])
    def test_non_finite_price_rejected(self, price_per_seat):
        with pytest.raises(ValidationError) as exc_info:
            calculate_booking_price(price_per_seat=price_per_seat, seats_count=1)

        assert exc_info.value.status_code == 400


@pytest.mark.unit
class TestPlatformFee:
    @pytest.mark.parametrize(
        'base_fare,expected',
        [
            (Decimal('100.00'), Decimal('10.00')),  # 5 -> min 10
            (Decimal('1000.00'), Decimal('50.00')),
            (Decimal('5000.00'), Decimal('100.00')),  # 250 -> max 100
        ],
    )
    def test_fee_is_clamped(self, base_fare, expected):
        assert calculate_platform_fee(base_fare) == expected

    def test_gst_rounds_half_up(self):
        # 18% of 10.25 = 1.845
        assert calculate_gst(Decimal('10.25')) == Decimal('1.85')
