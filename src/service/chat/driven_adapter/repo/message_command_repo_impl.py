from typing import List, Optional

from sqlalchemy import func, update
from uuid_utils import UUID

from src.platform.database.base_repo import BaseSqlRepo
from src.platform.logging.loguru_io import Logger
from src.service.chat.app.interface.i_message_command_repo import IMessageCommandRepo
from src.service.chat.domain.entity.message_entity import Message
from src.service.chat.driven_adapter.model.message_model import MessageModel
from src.service.chat.driven_adapter.repo.message_mapper import to_entity


class MessageCommandRepoImpl(BaseSqlRepo, IMessageCommandRepo):
    @Logger.io
    async def create(self, *, message: Message) -> Message:
        async with self._get_session() as session:
            db_message = MessageModel(
                id=message.id,
                trip_id=message.trip_id,
                sender_id=message.sender_id,
                receiver_id=message.receiver_id,
                message=message.text,
                message_type=message.message_type.value,
                is_read=False,
            )
            session.add(db_message)
            await session.commit()
            await session.refresh(db_message)
            return to_entity(db_message)

    @Logger.io
    async def mark_read(self, *, message_id: UUID, reader_id: UUID) -> Optional[Message]:
        async with self._get_session() as session:
            result = await session.execute(
                update(MessageModel)
                .where(
                    MessageModel.id == message_id,
                    MessageModel.receiver_id == reader_id,
                    MessageModel.is_read.is_(False),
                )
                .values(is_read=True, read_at=func.now())
                .returning(MessageModel)
            )
            db_message = result.scalar_one_or_none()
            updated = to_entity(db_message) if db_message else None
            await session.commit()
            return updated

    @Logger.io
    async def mark_trip_read(self, *, trip_id: UUID, reader_id: UUID) -> List[Message]:
        async with self._get_session() as session:
            result = await session.execute(
                update(MessageModel)
                .where(
                    MessageModel.trip_id == trip_id,
                    MessageModel.receiver_id == reader_id,
                    MessageModel.is_read.is_(False),
                )
                .values(is_read=True, read_at=func.now())
                .returning(MessageModel)
            )
            changed = [to_entity(row) for row in result.scalars().all()]
            await session.commit()
            return changed
