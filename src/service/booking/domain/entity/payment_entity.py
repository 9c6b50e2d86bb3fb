from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

import attrs
from uuid_utils import UUID

from src.service.booking.domain.entity.booking_entity import PaymentStatus
from src.service.booking.domain.value_object.price_breakdown import PriceBreakdown


@attrs.define
class Payment:
    """Payment record, one per booking. amount is the base fare, booking_fee is fee + GST."""

    id: UUID
    booking_id: UUID
    amount: Decimal
    booking_fee: Decimal
    total_amount: Decimal
    currency: str
    status: PaymentStatus
    transaction_id: str
    paid_at: datetime
    payment_method_id: Optional[str] = None
    refund_amount: Optional[Decimal] = None
    refunded_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        id: UUID,
        booking_id: UUID,
        price: PriceBreakdown,
        payment_method_id: Optional[str] = None,
    ) -> 'Payment':
        now = datetime.now(timezone.utc)
        return cls(
            id=id,
            booking_id=booking_id,
            amount=price.base_fare,
            booking_fee=price.booking_fee,
            total_amount=price.total_amount,
            currency=price.currency,
            status=PaymentStatus.COMPLETED,
            transaction_id=f'TXN{int(now.timestamp() * 1000)}{str(id)[-6:].upper()}',
            paid_at=now,
            payment_method_id=payment_method_id,
        )

    def refund(self, *, refund_amount: Decimal) -> 'Payment':
        return attrs.evolve(
            self,
            status=PaymentStatus.REFUNDED,
            refund_amount=refund_amount,
            refunded_at=datetime.now(timezone.utc),
        )
