from typing import Optional

from sqlalchemy import select
from uuid_utils import UUID

from src.platform.database.base_repo import BaseSqlRepo
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_trip_query_repo import ITripQueryRepo
from src.service.booking.domain.entity.trip_entity import Trip, TripStatus
from src.service.booking.driven_adapter.model.trip_model import TripModel


class TripQueryRepoImpl(BaseSqlRepo, ITripQueryRepo):
    @staticmethod
    def _to_entity(db_trip: TripModel) -> Trip:
        # as_uuid=True yields stdlib uuid.UUID; entities use uuid_utils.UUID
        return Trip(
            id=UUID(str(db_trip.id)),
            driver_id=UUID(str(db_trip.driver_id)),
            departure_time=db_trip.departure_time,
            price_per_seat=db_trip.price_per_seat,
            available_seats=db_trip.available_seats,
            total_seats=db_trip.total_seats,
            status=TripStatus(db_trip.status),
            departure_location=db_trip.departure_location,
            arrival_location=db_trip.arrival_location,
            toll_charges=db_trip.toll_charges,
            booking_deadline_hours=db_trip.booking_deadline_hours,
            created_at=db_trip.created_at,
        )

    @Logger.io
    async def get_by_id(self, *, trip_id: UUID) -> Optional[Trip]:
        async with self._get_session() as session:
            result = await session.execute(select(TripModel).where(TripModel.id == trip_id))
            db_trip = result.scalar_one_or_none()
            return self._to_entity(db_trip) if db_trip else None
