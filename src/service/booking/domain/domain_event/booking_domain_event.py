"""
Booking Domain Events

Raised by the reservation use cases once a booking is committed or cancelled and
handed to the notification dispatcher. They carry everything needed to render the
passenger and driver notifications, so delivery never reads the database.
"""

from datetime import datetime
from decimal import Decimal

import attrs
from uuid_utils import UUID

from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.trip_entity import Trip
from src.service.booking.domain.value_object.refund_calculation import RefundCalculation


@attrs.define(frozen=True)
class BookingCreatedEvent:
    booking_id: UUID
    trip_id: UUID
    passenger_id: UUID
    passenger_name: str
    driver_id: UUID
    seats_booked: int
    total_amount: Decimal
    departure_location: str
    arrival_location: str
    departure_time: datetime

    @classmethod
    def from_booking(
        cls, *, booking: Booking, trip: Trip, passenger_name: str
    ) -> 'BookingCreatedEvent':
        return cls(
            booking_id=booking.id,
            trip_id=trip.id,
            passenger_id=booking.passenger_id,
            passenger_name=passenger_name,
            driver_id=trip.driver_id,
            seats_booked=booking.seats_booked,
            total_amount=booking.total_amount,
            departure_location=trip.departure_location,
            arrival_location=trip.arrival_location,
            departure_time=trip.departure_time,
        )


@attrs.define(frozen=True)
class BookingCancelledEvent:
    booking_id: UUID
    trip_id: UUID
    passenger_id: UUID
    passenger_name: str
    driver_id: UUID
    seats_booked: int
    departure_location: str
    arrival_location: str
    departure_time: datetime
    refund_eligible: bool
    refund_amount: Decimal
    refund_reason: str

    @classmethod
    def from_booking(
        cls, *, booking: Booking, trip: Trip, passenger_name: str, refund: RefundCalculation
    ) -> 'BookingCancelledEvent':
        return cls(
            booking_id=booking.id,
            trip_id=trip.id,
            passenger_id=booking.passenger_id,
            passenger_name=passenger_name,
            driver_id=trip.driver_id,
            seats_booked=booking.seats_booked,
            departure_location=trip.departure_location,
            arrival_location=trip.arrival_location,
            departure_time=trip.departure_time,
            refund_eligible=refund.is_eligible,
            refund_amount=refund.refund_amount,
            refund_reason=refund.reason,
        )


BookingDomainEvent = BookingCreatedEvent | BookingCancelledEvent
