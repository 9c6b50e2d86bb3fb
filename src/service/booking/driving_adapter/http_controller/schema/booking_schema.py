from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel

from src.platform.types import UtilsUUID7
from src.service.booking.app.dto.booking_dto import BookingResult
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.value_object.price_breakdown import PriceBreakdown
from src.service.booking.domain.value_object.refund_calculation import RefundCalculation


class BookingCreateRequest(BaseModel):
    trip_id: UtilsUUID7
    seats_count: int
    pickup_location: Optional[str] = None
    dropoff_location: Optional[str] = None
    payment_method_id: Optional[str] = None

    class Config:
        json_schema_extra = {
            'examples': [
                {
                    'trip_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                    'seats_count': 2,
                    'pickup_location': 'Koramangala',
                    'dropoff_location': 'Mysuru bus stand',
                    'payment_method_id': 'pm_card_visa',
                },
                {'trip_id': '01936d8f-5e73-7c4e-a9c5-123456789abc', 'seats_count': 1},
            ]
        }


class CancelBookingRequest(BaseModel):
    reason: str

    class Config:
        json_schema_extra = {'example': {'reason': 'Change of plans'}}


class PriceBreakdownResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'base_fare': '1000.00',
                'seats_booked': 2,
                'price_per_seat': '500.00',
                'platform_fee': '50.00',
                'gst': '9.00',
                'toll_charges': '0.00',
                'discount_amount': '0.00',
                'total_amount': '1059.00',
                'currency': 'INR',
            }
        },
    }

    base_fare: Decimal
    seats_booked: int
    price_per_seat: Decimal
    platform_fee: Decimal
    gst: Decimal
    toll_charges: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    currency: str

    @classmethod
    def from_price(cls, price: PriceBreakdown) -> 'PriceBreakdownResponse':
        return cls(
            base_fare=price.base_fare,
            seats_booked=price.seats_booked,
            price_per_seat=price.price_per_seat,
            platform_fee=price.platform_fee,
            gst=price.gst,
            toll_charges=price.toll_charges,
            discount_amount=price.discount_amount,
            total_amount=price.total_amount,
            currency=price.currency,
        )


class BookingResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'id': '01936d8f-5e73-7c4e-a9c5-123456789abc',  # UUID7
                'trip_id': '01936d8f-1111-7c4e-a9c5-123456789abc',
                'passenger_id': '01936d8f-2222-7c4e-a9c5-123456789abc',
                'seats_booked': 2,
                'total_amount': '1059.00',
                'platform_fee': '50.00',
                'gst_amount': '9.00',
                'booking_status': 'confirmed',
                'payment_status': 'completed',
                'created_at': '2025-01-10T10:30:00Z',
            }
        },
    }

    id: UtilsUUID7  # UUID7
    trip_id: UtilsUUID7
    passenger_id: UtilsUUID7
    seats_booked: int
    total_amount: Decimal
    platform_fee: Decimal
    gst_amount: Decimal
    booking_status: str
    payment_status: str
    pickup_location: Optional[str] = None
    dropoff_location: Optional[str] = None
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    refund_amount: Optional[Decimal] = None
    refund_status: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_booking(cls, booking: Booking) -> 'BookingResponse':
        return cls(
            id=booking.id,
            trip_id=booking.trip_id,
            passenger_id=booking.passenger_id,
            seats_booked=booking.seats_booked,
            total_amount=booking.total_amount,
            platform_fee=booking.platform_fee,
            gst_amount=booking.gst_amount,
            booking_status=booking.booking_status.value,
            payment_status=booking.payment_status.value,
            pickup_location=booking.pickup_location,
            dropoff_location=booking.dropoff_location,
            cancellation_reason=booking.cancellation_reason,
            cancelled_at=booking.cancelled_at,
            refund_amount=booking.refund_amount,
            refund_status=booking.refund_status.value if booking.refund_status else None,
            created_at=booking.created_at,
        )


class BookingCreatedResponse(BaseModel):
    booking: BookingResponse
    price: PriceBreakdownResponse
    transaction_id: str
    warnings: List[str] = []

    @classmethod
    def from_result(cls, result: BookingResult) -> 'BookingCreatedResponse':
        return cls(
            booking=BookingResponse.from_booking(result.booking),
            price=PriceBreakdownResponse.from_price(result.price),
            transaction_id=result.payment.transaction_id,
            warnings=list(result.warnings),
        )


class RefundCalculationResponse(BaseModel):
    is_eligible: bool
    original_amount: Decimal
    refund_percentage: Decimal
    service_fee: Decimal
    refund_amount: Decimal
    reason: str

    class Config:
        json_schema_extra = {
            'example': {
                'is_eligible': True,
                'original_amount': '1059.00',
                'refund_percentage': '100',
                'service_fee': '25.00',
                'refund_amount': '984.00',
                'reason': 'Full refund (minus ₹25 service fee)',
            }
        }

    @classmethod
    def from_refund(cls, refund: RefundCalculation) -> 'RefundCalculationResponse':
        return cls(
            is_eligible=refund.is_eligible,
            original_amount=refund.original_amount,
            refund_percentage=refund.refund_percentage,
            service_fee=refund.service_fee,
            refund_amount=refund.refund_amount,
            reason=refund.reason,
        )
