from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.booking.app.interface.i_trip_query_repo import ITripQueryRepo
from src.service.booking.domain.entity.booking_entity import Booking


class ListBookingsUseCase:
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
    async def list_passenger_bookings(self, *, passenger_id: UUID) -> List[Booking]:
        return await self.booking_query_repo.list_by_passenger(passenger_id=passenger_id)

    @Logger.io
    async def list_trip_bookings(self, *, trip_id: UUID, driver_id: UUID) -> List[Booking]:
        trip = await self.trip_query_repo.get_by_id(trip_id=trip_id)
        if trip is None:
            raise NotFoundError('Trip not found')
        if not trip.is_driver(driver_id):
            raise ForbiddenError("Only the trip's driver can list its bookings")
        return await self.booking_query_repo.list_by_trip(trip_id=trip_id)
