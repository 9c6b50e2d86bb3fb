from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    AlreadyCancelledError,
    ForbiddenError,
    NotFoundError,
    PersistenceError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.booking.app.interface.i_notification_dispatcher import INotificationDispatcher
from src.service.booking.app.interface.i_payment_command_repo import IPaymentCommandRepo
from src.service.booking.app.interface.i_trip_command_repo import ITripCommandRepo
from src.service.booking.app.interface.i_trip_query_repo import ITripQueryRepo
from src.service.booking.domain.domain_event.booking_domain_event import BookingCancelledEvent
from src.service.booking.domain.refund_policy_domain import calculate_refund
from src.service.booking.domain.value_object.refund_calculation import RefundCalculation


class CancelBookingUseCase:
    """
    Cancel a confirmed booking and give its seats back.

    Flow:
    1. Load booking and trip, only the booking's passenger may cancel
    2. Compute the refund against the trip's departure time
    3. Flip the booking to cancelled (guarded: only a confirmed row is updated)
    4. Restore seats additively, capped at total_seats
    5. Mark the payment refunded when a refund is due
    6. Dispatch cancellation notifications in the background

    Steps 4 and 5 run after the cancellation is durable; their failures are logged and
    the cancellation still succeeds.
    """

    def __init__(
        self,
        *,
        booking_query_repo: IBookingQueryRepo,
        booking_command_repo: IBookingCommandRepo,
        trip_query_repo: ITripQueryRepo,
        trip_command_repo: ITripCommandRepo,
        payment_command_repo: IPaymentCommandRepo,
        notification_dispatcher: INotificationDispatcher,
    ) -> None:
        self.booking_query_repo = booking_query_repo
        self.booking_command_repo = booking_command_repo
        self.trip_query_repo = trip_query_repo
        self.trip_command_repo = trip_command_repo
        self.payment_command_repo = payment_command_repo
        self.notification_dispatcher = notification_dispatcher
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo]),
        booking_command_repo: IBookingCommandRepo = Depends(
            Provide[Container.booking_command_repo]
        ),
        trip_query_repo: ITripQueryRepo = Depends(Provide[Container.trip_query_repo]),
        trip_command_repo: ITripCommandRepo = Depends(Provide[Container.trip_command_repo]),
        payment_command_repo: IPaymentCommandRepo = Depends(
            Provide[Container.payment_command_repo]
        ),
        notification_dispatcher: INotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
    ) -> Self:
        return cls(
            booking_query_repo=booking_query_repo,
            booking_command_repo=booking_command_repo,
            trip_query_repo=trip_query_repo,
            trip_command_repo=trip_command_repo,
            payment_command_repo=payment_command_repo,
            notification_dispatcher=notification_dispatcher,
        )

    @Logger.io
    async def cancel_booking(
        self, *, booking_id: UUID, user_id: UUID, user_name: str, reason: str
    ) -> RefundCalculation:
        """
        Raises:
            NotFoundError: Booking or its trip does not exist
            ForbiddenError: Caller is not the booking's passenger
            AlreadyCancelledError: Booking was cancelled before (or concurrently)
            PersistenceError: Store unavailable before the cancellation was recorded
        """
        with self.tracer.start_as_current_span(
            'use_case.cancel_booking',
            attributes={'booking.id': str(booking_id), 'user.id': str(user_id)},
        ) as span:
            booking = await self.booking_query_repo.get_by_id(booking_id=booking_id)
            if booking is None:
                raise NotFoundError('Booking not found')
            if booking.passenger_id != user_id:
                raise ForbiddenError('Only the passenger who made this booking can cancel it')
            if booking.is_cancelled:
                raise AlreadyCancelledError('Booking is already cancelled')

            trip = await self.trip_query_repo.get_by_id(trip_id=booking.trip_id)
            if trip is None:
                raise NotFoundError('Trip not found')

            refund = calculate_refund(
                departure_time=trip.departure_time,
                total_amount=booking.total_amount,
                platform_fee_paid=booking.platform_fee,
            )
            cancelled = booking.cancel(cancelled_by=user_id, reason=reason, refund=refund)

            if not await self.booking_command_repo.cancel(booking=cancelled):
                raise AlreadyCancelledError('Booking is already cancelled')

            Logger.base.info(
                f'🚫 [CANCEL] Booking {booking_id} cancelled, '
                f'refund={refund.refund_amount} ({refund.reason})'
            )
            span.set_attribute('refund.amount', str(refund.refund_amount))
            span.set_attribute('refund.eligible', refund.is_eligible)
            metrics.record_cancellation(refund_status=str(cancelled.refund_status))

            await self._restore_seats(trip_id=trip.id, seats=booking.seats_booked)
            if refund.is_eligible:
                await self._mark_payment_refunded(booking_id=booking_id, refund=refund)

            self.notification_dispatcher.dispatch(
                event=BookingCancelledEvent.from_booking(
                    booking=cancelled, trip=trip, passenger_name=user_name, refund=refund
                )
            )
            return refund

    async def _restore_seats(self, *, trip_id: UUID, seats: int) -> None:
        # Not retried
        try:
            restored = await self.trip_command_repo.restore_seats(trip_id=trip_id, seats=seats)
        except PersistenceError as e:
            restored = False
            Logger.base.error(f'❌ [CANCEL] Seat restore on trip {trip_id} failed: {e.message}')

        if restored:
            Logger.base.info(f'💺 [CANCEL] Restored {seats} seat(s) on trip {trip_id}')
        else:
            metrics.record_seat_restore_failure()
            Logger.base.error(f'❌ [CANCEL] {seats} seat(s) not restored on trip {trip_id}')

    async def _mark_payment_refunded(self, *, booking_id: UUID, refund: RefundCalculation) -> None:
        try:
            updated = await self.payment_command_repo.mark_refunded(
                booking_id=booking_id, refund_amount=refund.refund_amount
            )
        except PersistenceError as e:
            Logger.base.error(f'❌ [CANCEL] Payment refund for {booking_id} failed: {e.message}')
            return

        if not updated:
            Logger.base.error(f'❌ [CANCEL] No payment record to refund for booking {booking_id}')
