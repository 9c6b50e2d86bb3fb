from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.booking.app.interface.i_trip_query_repo import ITripQueryRepo
from src.service.booking.domain.entity.booking_entity import Booking


class GetBookingUseCase:
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
    async def get_booking(self, *, booking_id: UUID, user_id: UUID) -> Booking:
        """Visible to the booking's passenger and to the trip's driver"""
        booking = await self.booking_query_repo.get_by_id(booking_id=booking_id)
        if not booking:
            raise NotFoundError('Booking not found')

        if booking.passenger_id == user_id:
            return booking

        trip = await self.trip_query_repo.get_by_id(trip_id=booking.trip_id)
        if trip is None or not trip.is_driver(user_id):
            raise ForbiddenError('You can only view your own bookings')
        return booking
