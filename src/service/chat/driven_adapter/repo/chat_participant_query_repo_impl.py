from sqlalchemy import exists, select
from uuid_utils import UUID

from src.platform.database.base_repo import BaseSqlRepo
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.booking_entity import BookingStatus
from src.service.booking.driven_adapter.model.booking_model import BookingModel
from src.service.booking.driven_adapter.model.trip_model import TripModel
from src.service.chat.app.interface.i_chat_participant_query_repo import (
    IChatParticipantQueryRepo,
)


class ChatParticipantQueryRepoImpl(BaseSqlRepo, IChatParticipantQueryRepo):
    """Reads the booking context's tables; chat owns no participant data"""

    @Logger.io
    async def is_participant(self, *, trip_id: UUID, user_id: UUID) -> bool:
        is_driver = exists().where(TripModel.id == trip_id, TripModel.driver_id == user_id)
        is_passenger = exists().where(
            BookingModel.trip_id == trip_id,
            BookingModel.passenger_id == user_id,
            BookingModel.booking_status == BookingStatus.CONFIRMED.value,
        )
        async with self._get_session() as session:
            result = await session.execute(select(is_driver | is_passenger))
            return bool(result.scalar())
