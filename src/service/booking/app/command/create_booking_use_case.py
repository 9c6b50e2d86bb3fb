import time
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
import uuid_utils
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    ConcurrentModificationError,
    CustomBaseError,
    InsufficientSeatsError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.booking.app.dto.booking_dto import BookingResult
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.app.interface.i_notification_dispatcher import INotificationDispatcher
from src.service.booking.app.interface.i_payment_command_repo import IPaymentCommandRepo
from src.service.booking.app.interface.i_trip_command_repo import ITripCommandRepo
from src.service.booking.app.interface.i_trip_query_repo import ITripQueryRepo
from src.service.booking.domain.booking_rules import ensure_bookable
from src.service.booking.domain.domain_event.booking_domain_event import BookingCreatedEvent
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.payment_entity import Payment
from src.service.booking.domain.pricing_domain import calculate_booking_price


class CreateBookingUseCase:
    """
    Seat reservation: read, validate, conditional write, compensate.

    Flow:
    1. Validating: load trip, check every booking rule (all violations reported together)
    2. SeatCheck: re-read available_seats from the primary store -> snapshot S
    3. Price the booking, reject if S < requested seats
    4. Reserving: insert booking and payment rows
    5. Decrement seats only if available_seats still equals S
       - one row changed  -> Committed, notifications dispatched in the background
       - zero rows        -> RolledBack, booking and payment deleted, caller may retry

    No locks are held between steps; the conditional update is the only point where
    concurrent bookings for the same trip are ordered. The use case never retries.
    """

    def __init__(
        self,
        *,
        trip_query_repo: ITripQueryRepo,
        trip_command_repo: ITripCommandRepo,
        booking_command_repo: IBookingCommandRepo,
        payment_command_repo: IPaymentCommandRepo,
        notification_dispatcher: INotificationDispatcher,
    ) -> None:
        self.trip_query_repo = trip_query_repo
        self.trip_command_repo = trip_command_repo
        self.booking_command_repo = booking_command_repo
        self.payment_command_repo = payment_command_repo
        self.notification_dispatcher = notification_dispatcher
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        trip_query_repo: ITripQueryRepo = Depends(Provide[Container.trip_query_repo]),
        trip_command_repo: ITripCommandRepo = Depends(Provide[Container.trip_command_repo]),
        booking_command_repo: IBookingCommandRepo = Depends(
            Provide[Container.booking_command_repo]
        ),
        payment_command_repo: IPaymentCommandRepo = Depends(
            Provide[Container.payment_command_repo]
        ),
        notification_dispatcher: INotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
    ) -> Self:
        return cls(
            trip_query_repo=trip_query_repo,
            trip_command_repo=trip_command_repo,
            booking_command_repo=booking_command_repo,
            payment_command_repo=payment_command_repo,
            notification_dispatcher=notification_dispatcher,
        )

    @Logger.io
    async def create_booking(
        self,
        *,
        trip_id: UUID,
        passenger_id: UUID,
        passenger_name: str,
        seats_count: int,
        pickup_location: Optional[str] = None,
        dropoff_location: Optional[str] = None,
        payment_method_id: Optional[str] = None,
    ) -> BookingResult:
        """
        Reserve seats on a trip and record the payment.

        Args:
            trip_id: Trip to book
            passenger_id: Booking passenger (from the caller's token)
            passenger_name: Shown to the driver in the new-booking notification
            seats_count: Seats requested, at least 1

        Returns:
            BookingResult with the confirmed booking, payment, price and warnings

        Raises:
            NotFoundError: Trip does not exist
            ValidationError: One or more booking rules violated
            InsufficientSeatsError: Fresh seat count is below the request
            ConcurrentModificationError: Seats changed between read and write (retryable)
            PersistenceError: Store unavailable
        """
        started = time.perf_counter()
        with self.tracer.start_as_current_span(
            'use_case.create_booking',
            attributes={
                'trip.id': str(trip_id),
                'passenger.id': str(passenger_id),
                'seats.requested': seats_count,
            },
        ) as span:
            try:
                result = await self._reserve(
                    trip_id=trip_id,
                    passenger_id=passenger_id,
                    passenger_name=passenger_name,
                    seats_count=seats_count,
                    pickup_location=pickup_location,
                    dropoff_location=dropoff_location,
                    payment_method_id=payment_method_id,
                )
            except CustomBaseError as e:
                span.set_attribute('booking.result', _result_label(e))
                metrics.record_booking_attempt(
                    result=_result_label(e), duration=time.perf_counter() - started
                )
                raise

            span.set_attribute('booking.id', str(result.booking.id))
            span.set_attribute('booking.result', 'committed')
            metrics.record_booking_attempt(
                result='committed', duration=time.perf_counter() - started
            )
            return result

    async def _reserve(
        self,
        *,
        trip_id: UUID,
        passenger_id: UUID,
        passenger_name: str,
        seats_count: int,
        pickup_location: Optional[str],
        dropoff_location: Optional[str],
        payment_method_id: Optional[str],
    ) -> BookingResult:
        # Validating
        trip = await self.trip_query_repo.get_by_id(trip_id=trip_id)
        if trip is None:
            raise NotFoundError('Trip not found')

        warnings = ensure_bookable(trip=trip, requested_seats=seats_count, passenger_id=passenger_id)

        # SeatCheck
        snapshot = await self.trip_command_repo.get_available_seats(trip_id=trip_id)
        if snapshot is None:
            raise NotFoundError('Trip not found')

        price = calculate_booking_price(
            price_per_seat=trip.price_per_seat,
            seats_count=seats_count,
            toll_charges=trip.toll_charges,
        )

        if snapshot < seats_count:
            raise InsufficientSeatsError(
                f'Sorry, only {snapshot} seat(s) are now available. Please adjust your booking.',
                available_seats=snapshot,
            )

        # Reserving
        booking = Booking.create(
            id=uuid_utils.uuid7(),
            trip_id=trip_id,
            passenger_id=passenger_id,
            price=price,
            pickup_location=pickup_location,
            dropoff_location=dropoff_location,
        )
        booking = await self.booking_command_repo.create(booking=booking)
        Logger.base.info(
            f'📝 [CREATE-BOOKING] Booking {booking.id} inserted, '
            f'claiming {seats_count} of {snapshot} seat(s) on trip {trip_id}'
        )

        try:
            payment = await self.payment_command_repo.create(
                payment=Payment.create(
                    id=uuid_utils.uuid7(),
                    booking_id=booking.id,
                    price=price,
                    payment_method_id=payment_method_id,
                )
            )
        except PersistenceError:
            await self._rollback_reservation(booking_id=booking.id, payment_created=False)
            raise

        try:
            committed = await self.trip_command_repo.decrement_seats_if_unchanged(
                trip_id=trip_id, expected_available=snapshot, seats=seats_count
            )
        except PersistenceError:
            # Outcome unknown: undo the rows so no booking exists without its seats
            await self._rollback_reservation(booking_id=booking.id, payment_created=True)
            raise

        if not committed:
            # RolledBack
            metrics.record_seat_conflict()
            await self._rollback_reservation(booking_id=booking.id, payment_created=True)
            raise await self._conflict_error(trip_id=trip_id)

        # Committed
        Logger.base.info(
            f'✅ [CREATE-BOOKING] Booking {booking.id} committed, '
            f'trip {trip_id} seats {snapshot} -> {snapshot - seats_count}'
        )
        self.notification_dispatcher.dispatch(
            event=BookingCreatedEvent.from_booking(
                booking=booking, trip=trip, passenger_name=passenger_name
            )
        )
        return BookingResult(booking=booking, payment=payment, price=price, warnings=warnings)

    async def _rollback_reservation(self, *, booking_id: UUID, payment_created: bool) -> None:
        """
        Compensation for a reservation that did not get its seats.

        Payment goes first so a payment row never outlives its booking.
        """
        try:
            if payment_created:
                await self.payment_command_repo.delete_by_booking_id(booking_id=booking_id)
            await self.booking_command_repo.delete(booking_id=booking_id)
            Logger.base.warning(f'↩️ [CREATE-BOOKING] Rolled back booking {booking_id}')
        except PersistenceError as e:
            # The caller still gets the original failure; the orphan needs manual cleanup
            Logger.base.critical(
                f'🚨 [CREATE-BOOKING] Rollback of booking {booking_id} failed: {e.message}'
            )

    async def _conflict_error(self, *, trip_id: UUID) -> ConcurrentModificationError:
        try:
            remaining = await self.trip_command_repo.get_available_seats(trip_id=trip_id)
        except PersistenceError:
            remaining = None

        if remaining is None:
            message = 'Seats were booked by someone else. Please try again.'
        else:
            message = (
                f'Seats were booked by someone else. Only {remaining} seat(s) now available. '
                'Please try again.'
            )
        return ConcurrentModificationError(message, available_seats=remaining)


def _result_label(error: CustomBaseError) -> str:
    if isinstance(error, ConcurrentModificationError):
        return 'conflict'
    if isinstance(error, InsufficientSeatsError):
        return 'insufficient_seats'
    if isinstance(error, ValidationError):
        return 'validation_failed'
    if isinstance(error, NotFoundError):
        return 'not_found'
    return 'error'
