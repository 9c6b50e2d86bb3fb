from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.event.i_trip_channel_broadcaster import ITripChannelBroadcaster
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.chat.app.interface.i_message_command_repo import IMessageCommandRepo
from src.service.chat.app.interface.i_message_query_repo import IMessageQueryRepo
from src.service.chat.domain.channel_event import update_event
from src.service.chat.domain.entity.message_entity import Message


class MarkMessageReadUseCase:
    """Read receipt. Idempotent: marking an already-read message returns it unchanged."""

    def __init__(
        self,
        *,
        message_command_repo: IMessageCommandRepo,
        message_query_repo: IMessageQueryRepo,
        broadcaster: ITripChannelBroadcaster,
    ) -> None:
        self.message_command_repo = message_command_repo
        self.message_query_repo = message_query_repo
        self.broadcaster = broadcaster

    @classmethod
    @inject
    def depends(
        cls,
        message_command_repo: IMessageCommandRepo = Depends(
            Provide[Container.message_command_repo]
        ),
        message_query_repo: IMessageQueryRepo = Depends(Provide[Container.message_query_repo]),
        broadcaster: ITripChannelBroadcaster = Depends(
            Provide[Container.trip_channel_broadcaster]
        ),
    ) -> Self:
        return cls(
            message_command_repo=message_command_repo,
            message_query_repo=message_query_repo,
            broadcaster=broadcaster,
        )

    @Logger.io
    async def mark_as_read(self, *, message_id: UUID, reader_id: UUID) -> Message:
        message = await self.message_query_repo.get_by_id(message_id=message_id)
        if message is None:
            raise NotFoundError('Message not found')
        if message.receiver_id != reader_id:
            raise ForbiddenError('Only the receiver can mark a message as read')
        if message.is_read:
            return message

        updated = await self.message_command_repo.mark_read(
            message_id=message_id, reader_id=reader_id
        )
        if updated is None:
            # Marked concurrently (another open session of the same user)
            return await self.message_query_repo.get_by_id(message_id=message_id) or message

        await self.broadcaster.broadcast(trip_id=updated.trip_id, event_data=update_event(updated))
        return updated
