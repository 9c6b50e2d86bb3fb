"""
Unit tests for CreateBookingUseCase

Flow under test:
1. Validate trip and request
2. Fresh seat snapshot
3. Insert booking + payment
4. Conditional seat decrement, compensation when it matches zero rows
5. Fire-and-forget notification dispatch
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest

from src.platform.exception.exceptions import (
    ConcurrentModificationError,
    InsufficientSeatsError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from src.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.booking.domain.domain_event.booking_domain_event import BookingCreatedEvent


@pytest.fixture
def trip(make_trip):
    return make_trip(available_seats=4, total_seats=4)


@pytest.fixture
def mock_trip_query_repo(trip) -> AsyncMock:
    repo = AsyncMock()
    repo.get_by_id.return_value = trip
    return repo


@pytest.fixture
def mock_trip_command_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.get_available_seats.return_value = 4
    repo.decrement_seats_if_unchanged.return_value = True
    return repo


@pytest.fixture
def mock_booking_command_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.create.side_effect = lambda *, booking: booking
    return repo


@pytest.fixture
def mock_payment_command_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.create.side_effect = lambda *, payment: payment
    return repo


@pytest.fixture
def mock_dispatcher() -> Mock:
    return Mock()


@pytest.fixture
def use_case(
    mock_trip_query_repo,
    mock_trip_command_repo,
    mock_booking_command_repo,
    mock_payment_command_repo,
    mock_dispatcher,
) -> CreateBookingUseCase:
    return CreateBookingUseCase(
        trip_query_repo=mock_trip_query_repo,
        trip_command_repo=mock_trip_command_repo,
        booking_command_repo=mock_booking_command_repo,
        payment_command_repo=mock_payment_command_repo,
        notification_dispatcher=mock_dispatcher,
    )


@pytest.mark.unit
class TestCreateBookingUseCase:
    @pytest.mark.asyncio
    async def test_create_booking_success(
        self, use_case, trip, passenger_id, mock_trip_command_repo, mock_dispatcher
    ):
        result = await use_case.create_booking(
            trip_id=trip.id, passenger_id=passenger_id, passenger_name='Asha', seats_count=2
        )

        assert result.booking.seats_booked == 2
        assert result.booking.total_amount == Decimal('1059.00')
        assert result.payment.booking_id == result.booking.id
        assert result.price.total_amount == Decimal('1059.00')
        mock_trip_command_repo.decrement_seats_if_unchanged.assert_awaited_once_with(
            trip_id=trip.id, expected_available=4, seats=2
        )

        mock_dispatcher.dispatch.assert_called_once()
        event = mock_dispatcher.dispatch.call_args.kwargs['event']
        assert isinstance(event, BookingCreatedEvent)
        assert event.passenger_name == 'Asha'
        assert event.driver_id == trip.driver_id

    @pytest.mark.asyncio
    async def test_writes_happen_in_order(
        self,
        use_case,
        trip,
        passenger_id,
        mock_trip_command_repo,
        mock_booking_command_repo,
        mock_payment_command_repo,
    ):
        manager = MagicMock()
        manager.attach_mock(mock_trip_command_repo.get_available_seats, 'snapshot')
        manager.attach_mock(mock_booking_command_repo.create, 'insert_booking')
        manager.attach_mock(mock_payment_command_repo.create, 'insert_payment')
        manager.attach_mock(mock_trip_command_repo.decrement_seats_if_unchanged, 'decrement')

        await use_case.create_booking(
            trip_id=trip.id, passenger_id=passenger_id, passenger_name='Asha', seats_count=1
        )

        assert [c[0] for c in manager.mock_calls] == [
            'snapshot',
            'insert_booking',
            'insert_payment',
            'decrement',
        ]

    @pytest.mark.asyncio
    async def test_trip_not_found(self, use_case, trip, passenger_id, mock_trip_query_repo):
        mock_trip_query_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await use_case.create_booking(
                trip_id=trip.id, passenger_id=passenger_id, passenger_name='Asha', seats_count=1
            )

    @pytest.mark.asyncio
    async def test_validation_failure_writes_nothing(
        self, use_case, trip, driver_id, mock_booking_command_repo, mock_dispatcher
    ):
        with pytest.raises(ValidationError) as exc_info:
            await use_case.create_booking(
                trip_id=trip.id, passenger_id=driver_id, passenger_name='Driver', seats_count=0
            )

        assert len(exc_info.value.errors) == 2
        mock_booking_command_repo.create.assert_not_awaited()
        mock_dispatcher.dispatch.assert_not_called()

    @pytest.mark.asyncio
    async def test_fresh_snapshot_below_request(
        self, use_case, trip, passenger_id, mock_trip_command_repo, mock_booking_command_repo
    ):
        mock_trip_command_repo.get_available_seats.return_value = 1

        with pytest.raises(InsufficientSeatsError) as exc_info:
            await use_case.create_booking(
                trip_id=trip.id, passenger_id=passenger_id, passenger_name='Asha', seats_count=2
            )

        assert exc_info.value.available_seats == 1
        assert 'only 1 seat(s) are now available' in exc_info.value.message
        mock_booking_command_repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lost_race_compensates_and_raises_retryable(
        self,
        use_case,
        trip,
        passenger_id,
        mock_trip_command_repo,
        mock_booking_command_repo,
        mock_payment_command_repo,
        mock_dispatcher,
    ):
        mock_trip_command_repo.decrement_seats_if_unchanged.return_value = False
        mock_trip_command_repo.get_available_seats.side_effect = [4, 1]

        with pytest.raises(ConcurrentModificationError) as exc_info:
            await use_case.create_booking(
                trip_id=trip.id, passenger_id=passenger_id, passenger_name='Asha', seats_count=2
            )

        assert exc_info.value.retryable is True
        assert exc_info.value.available_seats == 1
        assert 'Only 1 seat(s) now available' in exc_info.value.message

        booking_id = mock_booking_command_repo.create.call_args.kwargs['booking'].id
        mock_payment_command_repo.delete_by_booking_id.assert_awaited_once_with(
            booking_id=booking_id
        )
        mock_booking_command_repo.delete.assert_awaited_once_with(booking_id=booking_id)
        mock_dispatcher.dispatch.assert_not_called()

    @pytest.mark.asyncio
    async def test_payment_insert_failure_removes_booking(
        self,
        use_case,
        trip,
        passenger_id,
        mock_trip_command_repo,
        mock_booking_command_repo,
        mock_payment_command_repo,
    ):
        mock_payment_command_repo.create.side_effect = PersistenceError()

        with pytest.raises(PersistenceError):
            await use_case.create_booking(
                trip_id=trip.id, passenger_id=passenger_id, passenger_name='Asha', seats_count=1
            )

        mock_payment_command_repo.delete_by_booking_id.assert_not_awaited()
        mock_booking_command_repo.delete.assert_awaited_once()
        mock_trip_command_repo.decrement_seats_if_unchanged.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_decrement_failure_is_compensated(
        self,
        use_case,
        trip,
        passenger_id,
        mock_trip_command_repo,
        mock_booking_command_repo,
        mock_payment_command_repo,
    ):
        mock_trip_command_repo.decrement_seats_if_unchanged.side_effect = PersistenceError()

        with pytest.raises(PersistenceError):
            await use_case.create_booking(
                trip_id=trip.id, passenger_id=passenger_id, passenger_name='Asha', seats_count=1
            )

        mock_payment_command_repo.delete_by_booking_id.assert_awaited_once()
        mock_booking_command_repo.delete.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_rollback_still_raises_original_error(
        self,
        use_case,
        trip,
        passenger_id,
        mock_trip_command_repo,
        mock_booking_command_repo,
    ):
        mock_trip_command_repo.decrement_seats_if_unchanged.return_value = False
        mock_booking_command_repo.delete.side_effect = PersistenceError()

        with pytest.raises(ConcurrentModificationError):
            await use_case.create_booking(
                trip_id=trip.id, passenger_id=passenger_id, passenger_name='Asha', seats_count=1
            )

