from typing import Optional

from sqlalchemy import func, select, update
from uuid_utils import UUID

from src.platform.database.base_repo import BaseSqlRepo
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_trip_command_repo import ITripCommandRepo
from src.service.booking.driven_adapter.model.trip_model import TripModel


class TripCommandRepoImpl(BaseSqlRepo, ITripCommandRepo):
    @Logger.io
    async def get_available_seats(self, *, trip_id: UUID) -> Optional[int]:
        async with self._get_session() as session:
            result = await session.execute(
                select(TripModel.available_seats).where(TripModel.id == trip_id)
            )
            return result.scalar_one_or_none()

    @Logger.io
    async def decrement_seats_if_unchanged(
        self, *, trip_id: UUID, expected_available: int, seats: int
    ) -> bool:
        """
        UPDATE trip SET available_seats = :expected - :seats
        WHERE id = :trip_id AND available_seats = :expected
        """
        async with self._get_session() as session:
            result = await session.execute(
                update(TripModel)
                .where(
                    TripModel.id == trip_id,
                    TripModel.available_seats == expected_available,
                )
                .values(available_seats=expected_available - seats)
                .execution_options(synchronize_session=False)
            )
            await session.commit()
            return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def restore_seats(self, *, trip_id: UUID, seats: int) -> bool:
        async with self._get_session() as session:
            result = await session.execute(
                update(TripModel)
                .where(TripModel.id == trip_id)
                .values(
                    available_seats=func.least(
                        TripModel.available_seats + seats, TripModel.total_seats
                    )
                )
                .execution_options(synchronize_session=False)
            )
            await session.commit()
            return result.rowcount == 1  # type: ignore[attr-defined]
