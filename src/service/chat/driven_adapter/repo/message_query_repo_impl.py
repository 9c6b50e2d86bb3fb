from typing import List, Optional

from sqlalchemy import func, or_, select
from uuid_utils import UUID

from src.platform.database.base_repo import BaseSqlRepo
from src.platform.logging.loguru_io import Logger
from src.service.chat.app.interface.i_message_query_repo import IMessageQueryRepo
from src.service.chat.domain.entity.message_entity import Message
from src.service.chat.driven_adapter.model.message_model import MessageModel
from src.service.chat.driven_adapter.repo.message_mapper import to_entity


class MessageQueryRepoImpl(BaseSqlRepo, IMessageQueryRepo):
    @Logger.io
    async def get_by_id(self, *, message_id: UUID) -> Optional[Message]:
        async with self._get_session() as session:
            result = await session.execute(
                select(MessageModel).where(MessageModel.id == message_id)
            )
            db_message = result.scalar_one_or_none()
            return to_entity(db_message) if db_message else None

    @Logger.io
    async def list_for_participant(self, *, trip_id: UUID, user_id: UUID) -> List[Message]:
        async with self._get_session() as session:
            result = await session.execute(
                select(MessageModel)
                .where(
                    MessageModel.trip_id == trip_id,
                    or_(MessageModel.sender_id == user_id, MessageModel.receiver_id == user_id),
                )
                .order_by(MessageModel.created_at, MessageModel.id)
            )
            return [to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def count_unread(self, *, trip_id: UUID, user_id: UUID) -> int:
        async with self._get_session() as session:
            result = await session.execute(
                select(func.count())
                .select_from(MessageModel)
                .where(
                    MessageModel.trip_id == trip_id,
                    MessageModel.receiver_id == user_id,
                    MessageModel.is_read.is_(False),
                )
            )
            return result.scalar_one()
