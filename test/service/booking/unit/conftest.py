"""
In-memory repositories honouring the store contracts, shared by booking use case tests.

Every call yields to the event loop once, so concurrent use cases interleave at each
await point the way they would against a real database. The seat decrement itself
compares and sets without yielding in between.
"""

from decimal import Decimal
from typing import Dict, List, Optional

import anyio
import attrs
import pytest
from uuid_utils import UUID

from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.booking.app.interface.i_payment_command_repo import IPaymentCommandRepo
from src.service.booking.app.interface.i_trip_command_repo import ITripCommandRepo
from src.service.booking.app.interface.i_trip_query_repo import ITripQueryRepo
from src.service.booking.domain.entity.booking_entity import Booking, BookingStatus
from src.service.booking.domain.entity.payment_entity import Payment
from src.service.booking.domain.entity.trip_entity import Trip


class InMemoryTripRepo(ITripQueryRepo, ITripCommandRepo):
    def __init__(self, *trips: Trip) -> None:
        self.trips: Dict[UUID, Trip] = {t.id: t for t in trips}
        self.decrement_calls = 0

    def add(self, trip: Trip) -> Trip:
        self.trips[trip.id] = trip
        return trip

    async def get_by_id(self, *, trip_id: UUID) -> Optional[Trip]:
        await anyio.sleep(0)
        trip = self.trips.get(trip_id)
        return attrs.evolve(trip) if trip else None

    async def get_available_seats(self, *, trip_id: UUID) -> Optional[int]:
        await anyio.sleep(0)
        trip = self.trips.get(trip_id)
        return trip.available_seats if trip else None

    async def decrement_seats_if_unchanged(
        self, *, trip_id: UUID, expected_available: int, seats: int
    ) -> bool:
        await anyio.sleep(0)
        self.decrement_calls += 1
        trip = self.trips.get(trip_id)
        if trip is None or trip.available_seats != expected_available:
            return False
        trip.available_seats = expected_available - seats
        return True

    async def restore_seats(self, *, trip_id: UUID, seats: int) -> bool:
        await anyio.sleep(0)
        trip = self.trips.get(trip_id)
        if trip is None:
            return False
        trip.available_seats = min(trip.available_seats + seats, trip.total_seats)
        return True


class InMemoryBookingRepo(IBookingQueryRepo, IBookingCommandRepo):
    def __init__(self) -> None:
        self.bookings: Dict[UUID, Booking] = {}

    async def create(self, *, booking: Booking) -> Booking:
        await anyio.sleep(0)
        self.bookings[booking.id] = booking
        return booking

    async def delete(self, *, booking_id: UUID) -> None:
        await anyio.sleep(0)
        self.bookings.pop(booking_id, None)

    async def cancel(self, *, booking: Booking) -> bool:
        await anyio.sleep(0)
        stored = self.bookings.get(booking.id)
        if stored is None or stored.booking_status != BookingStatus.CONFIRMED:
            return False
        self.bookings[booking.id] = booking
        return True

    async def get_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        await anyio.sleep(0)
        return self.bookings.get(booking_id)

    async def list_by_passenger(self, *, passenger_id: UUID) -> List[Booking]:
        return [b for b in self.bookings.values() if b.passenger_id == passenger_id]

    async def list_by_trip(self, *, trip_id: UUID) -> List[Booking]:
        return [b for b in self.bookings.values() if b.trip_id == trip_id]


class InMemoryPaymentRepo(IPaymentCommandRepo):
    def __init__(self) -> None:
        self.payments: Dict[UUID, Payment] = {}

    async def create(self, *, payment: Payment) -> Payment:
        await anyio.sleep(0)
        self.payments[payment.booking_id] = payment
        return payment

    async def delete_by_booking_id(self, *, booking_id: UUID) -> None:
        await anyio.sleep(0)
        self.payments.pop(booking_id, None)

    async def mark_refunded(self, *, booking_id: UUID, refund_amount: Decimal) -> bool:
        await anyio.sleep(0)
        payment = self.payments.get(booking_id)
        if payment is None:
            return False
        self.payments[booking_id] = payment.refund(refund_amount=refund_amount)
        return True


@pytest.fixture
def trip_repo() -> InMemoryTripRepo:
    return InMemoryTripRepo()


@pytest.fixture
def booking_repo() -> InMemoryBookingRepo:
    return InMemoryBookingRepo()


@pytest.fixture
def payment_repo() -> InMemoryPaymentRepo:
    return InMemoryPaymentRepo()
