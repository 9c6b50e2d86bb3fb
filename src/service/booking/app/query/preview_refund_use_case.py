from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.booking.app.interface.i_trip_query_repo import ITripQueryRepo
from src.service.booking.domain.refund_policy_domain import calculate_refund
from src.service.booking.domain.value_object.refund_calculation import RefundCalculation


class PreviewRefundUseCase:
    """Same refund computation as cancellation, without touching any row."""

    def __init__(self, *, booking_query_repo: IBookingQueryRepo, trip_query_repo: ITripQueryRepo):
        self.booking_query_repo = booking_query_repo
        self.trip_query_repo = trip_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo]),
        trip_query_repo: ITripQueryRepo = Depends(Provide[Container.trip_query_repo]),
    ) -> Self:
        return cls(booking_query_repo=booking_query_repo, trip_query_repo=trip_query_repo)

    @Logger.io
    async def preview_refund(
        self, *, booking_id: UUID, user_id: Optional[UUID] = None
    ) -> Optional[RefundCalculation]:
        booking = await self.booking_query_repo.get_by_id(booking_id=booking_id)
        if booking is None:
            return None
        if user_id is not None and booking.passenger_id != user_id:
            raise ForbiddenError('Only the passenger who made this booking can preview its refund')

        trip = await self.trip_query_repo.get_by_id(trip_id=booking.trip_id)
        if trip is None:
            return None

        return calculate_refund(
            departure_time=trip.departure_time,
            total_amount=booking.total_amount,
            platform_fee_paid=booking.platform_fee,
        )
