from decimal import Decimal

import attrs

from src.service.booking.domain.value_object.money import ZERO


@attrs.define(frozen=True)
class RefundCalculation:
    is_eligible: bool
    original_amount: Decimal
    refund_percentage: Decimal
    service_fee: Decimal
    refund_amount: Decimal
    reason: str

    @classmethod
    def not_eligible(cls, *, original_amount: Decimal, reason: str) -> 'RefundCalculation':
        return cls(
            is_eligible=False,
            original_amount=original_amount,
            refund_percentage=Decimal(0),
            service_fee=ZERO,
            refund_amount=ZERO,
            reason=reason,
        )
