from datetime import datetime, timezone
from decimal import Decimal
from enum import StrEnum
from typing import Optional

import attrs
from uuid_utils import UUID

from src.platform.exception.exceptions import AlreadyCancelledError, DomainError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.value_object.price_breakdown import PriceBreakdown
from src.service.booking.domain.value_object.refund_calculation import RefundCalculation


class BookingStatus(StrEnum):
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'


class PaymentStatus(StrEnum):
    COMPLETED = 'completed'
    REFUNDED = 'refunded'


class RefundStatus(StrEnum):
    PENDING = 'pending'
    NOT_ELIGIBLE = 'not_eligible'


@attrs.define
class Booking:
    id: UUID
    trip_id: UUID
    passenger_id: UUID
    seats_booked: int
    total_amount: Decimal
    platform_fee: Decimal
    gst_amount: Decimal
    booking_status: BookingStatus = BookingStatus.CONFIRMED
    payment_status: PaymentStatus = PaymentStatus.COMPLETED
    pickup_location: Optional[str] = None
    dropoff_location: Optional[str] = None
    cancellation_reason: Optional[str] = None
    cancelled_by: Optional[UUID] = None
    cancelled_at: Optional[datetime] = None
    refund_amount: Optional[Decimal] = None
    refund_status: Optional[RefundStatus] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        id: UUID,
        trip_id: UUID,
        passenger_id: UUID,
        price: PriceBreakdown,
        pickup_location: Optional[str] = None,
        dropoff_location: Optional[str] = None,
    ) -> 'Booking':
        if price.seats_booked < 1:
            raise DomainError('Must book at least 1 seat.', 400)

        now = datetime.now(timezone.utc)
        return cls(
            id=id,
            trip_id=trip_id,
            passenger_id=passenger_id,
            seats_booked=price.seats_booked,
            total_amount=price.total_amount,
            platform_fee=price.platform_fee,
            gst_amount=price.gst,
            booking_status=BookingStatus.CONFIRMED,
            payment_status=PaymentStatus.COMPLETED,
            pickup_location=pickup_location,
            dropoff_location=dropoff_location,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_cancelled(self) -> bool:
        return self.booking_status == BookingStatus.CANCELLED

    @Logger.io
    def cancel(self, *, cancelled_by: UUID, reason: str, refund: RefundCalculation) -> 'Booking':
        # Once cancelled only refund bookkeeping may change
        if self.is_cancelled:
            raise AlreadyCancelledError('Booking is already cancelled')

        now = datetime.now(timezone.utc)
        return attrs.evolve(
            self,
            booking_status=BookingStatus.CANCELLED,
            cancellation_reason=reason,
            cancelled_by=cancelled_by,
            cancelled_at=now,
            refund_amount=refund.refund_amount,
            refund_status=RefundStatus.PENDING if refund.is_eligible else RefundStatus.NOT_ELIGIBLE,
            payment_status=PaymentStatus.REFUNDED if refund.is_eligible else self.payment_status,
            updated_at=now,
        )
