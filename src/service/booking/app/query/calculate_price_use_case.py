from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_trip_query_repo import ITripQueryRepo
from src.service.booking.domain.pricing_domain import calculate_booking_price
from src.service.booking.domain.value_object.price_breakdown import PriceBreakdown


class CalculatePriceUseCase:
    def __init__(self, *, trip_query_repo: ITripQueryRepo):
        self.trip_query_repo = trip_query_repo

    @classmethod
    @inject
    def depends(
        cls, trip_query_repo: ITripQueryRepo = Depends(Provide[Container.trip_query_repo])
    ) -> Self:
        return cls(trip_query_repo=trip_query_repo)

    @Logger.io
    async def calculate_price(self, *, trip_id: UUID, seats_count: int) -> PriceBreakdown:
        """Price preview shown before booking; tolls come from the trip"""
        trip = await self.trip_query_repo.get_by_id(trip_id=trip_id)
        if trip is None:
            raise NotFoundError('Trip not found')

        return calculate_booking_price(
            price_per_seat=trip.price_per_seat,
            seats_count=seats_count,
            toll_charges=trip.toll_charges,
        )
