"""Booking Domain Value Objects"""

from src.service.booking.domain.value_object.price_breakdown import PriceBreakdown
from src.service.booking.domain.value_object.refund_calculation import RefundCalculation

__all__ = ['PriceBreakdown', 'RefundCalculation']
