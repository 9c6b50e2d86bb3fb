"""
Concurrent reservations against in-memory stores with compare-and-set semantics.
"""

from unittest.mock import Mock

import anyio
import pytest
import uuid_utils

from src.platform.exception.exceptions import (
    ConcurrentModificationError,
    InsufficientSeatsError,
)
from src.service.booking.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.booking.app.command.create_booking_use_case import CreateBookingUseCase


def _create_use_case(trip_repo, booking_repo, payment_repo) -> CreateBookingUseCase:
    return CreateBookingUseCase(
        trip_query_repo=trip_repo,
        trip_command_repo=trip_repo,
        booking_command_repo=booking_repo,
        payment_command_repo=payment_repo,
        notification_dispatcher=Mock(),
    )


@pytest.mark.unit
class TestConcurrentBooking:
    @pytest.mark.asyncio
    async def test_two_requests_for_last_two_seats(
        self, make_trip, trip_repo, booking_repo, payment_repo
    ):
        trip = trip_repo.add(make_trip(available_seats=2, total_seats=4))
        use_case = _create_use_case(trip_repo, booking_repo, payment_repo)
        passengers = [uuid_utils.uuid7(), uuid_utils.uuid7()]
        successes = []
        failures = []

        async def attempt(passenger_id):
            try:
                successes.append(
                    await use_case.create_booking(
                        trip_id=trip.id,
                        passenger_id=passenger_id,
                        passenger_name='Passenger',
                        seats_count=2,
                    )
                )
            except (ConcurrentModificationError, InsufficientSeatsError) as e:
                failures.append(e)

        async with anyio.create_task_group() as tg:
            for passenger_id in passengers:
                tg.start_soon(attempt, passenger_id)

        assert len(successes) == 1
        assert len(failures) == 1
        assert trip_repo.trips[trip.id].available_seats == 0

        winner = successes[0].booking
        assert list(booking_repo.bookings) == [winner.id]
        assert list(payment_repo.payments) == [winner.id]

    @pytest.mark.asyncio
    async def test_both_snapshots_taken_before_either_write(
        self, make_trip, trip_repo, booking_repo, payment_repo
    ):
        trip = trip_repo.add(make_trip(available_seats=2, total_seats=2))
        use_case = _create_use_case(trip_repo, booking_repo, payment_repo)
        failures = []

        async def attempt():
            try:
                await use_case.create_booking(
                    trip_id=trip.id,
                    passenger_id=uuid_utils.uuid7(),
                    passenger_name='Passenger',
                    seats_count=2,
                )
            except ConcurrentModificationError as e:
                failures.append(e)

        async with anyio.create_task_group() as tg:
            tg.start_soon(attempt)
            tg.start_soon(attempt)

        # Lockstep interleaving: both reach the conditional update with snapshot 2
        assert trip_repo.decrement_calls == 2
        assert len(failures) == 1
        assert failures[0].retryable
        assert failures[0].available_seats == 0

    @pytest.mark.asyncio
    async def test_many_single_seat_requests_never_oversell(
        self, make_trip, trip_repo, booking_repo, payment_repo
    ):
        trip = trip_repo.add(make_trip(available_seats=3, total_seats=3))
        use_case = _create_use_case(trip_repo, booking_repo, payment_repo)
        committed = []

        async def attempt():
            try:
                result = await use_case.create_booking(
                    trip_id=trip.id,
                    passenger_id=uuid_utils.uuid7(),
                    passenger_name='Passenger',
                    seats_count=1,
                )
            except (ConcurrentModificationError, InsufficientSeatsError):
                return
            committed.append(result)

        async with anyio.create_task_group() as tg:
            for _ in range(8):
                tg.start_soon(attempt)

        remaining = trip_repo.trips[trip.id].available_seats
        assert remaining >= 0
        assert len(committed) == 3 - remaining
        assert len(booking_repo.bookings) == len(committed)
        assert len(payment_repo.payments) == len(committed)


@pytest.mark.unit
class TestCancelRestoresSeats:
    @pytest.mark.asyncio
    async def test_cancel_two_seat_booking_on_full_trip(
        self, make_trip, trip_repo, booking_repo, payment_repo, passenger_id
    ):
        trip = trip_repo.add(make_trip(available_seats=2, total_seats=2))
        create = _create_use_case(trip_repo, booking_repo, payment_repo)
        result = await create.create_booking(
            trip_id=trip.id, passenger_id=passenger_id, passenger_name='Asha', seats_count=2
        )
        assert trip_repo.trips[trip.id].available_seats == 0

        cancel = CancelBookingUseCase(
            booking_query_repo=booking_repo,
            booking_command_repo=booking_repo,
            trip_query_repo=trip_repo,
            trip_command_repo=trip_repo,
            payment_command_repo=payment_repo,
            notification_dispatcher=Mock(),
        )
        refund = await cancel.cancel_booking(
            booking_id=result.booking.id,
            user_id=passenger_id,
            user_name='Asha',
            reason='Plans changed',
        )

        assert trip_repo.trips[trip.id].available_seats == 2
        assert refund.is_eligible
        assert booking_repo.bookings[result.booking.id].is_cancelled
