from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.event.i_trip_channel_broadcaster import ITripChannelBroadcaster
from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.service.chat.app.interface.i_chat_participant_query_repo import (
    IChatParticipantQueryRepo,
)
from src.service.chat.app.interface.i_message_command_repo import IMessageCommandRepo
from src.service.chat.app.interface.i_message_query_repo import IMessageQueryRepo
from src.service.chat.domain.channel_event import update_event
from src.service.chat.domain.entity.message_entity import Message


class ListTripMessagesUseCase:
    def __init__(
        self,
        *,
        message_query_repo: IMessageQueryRepo,
        message_command_repo: IMessageCommandRepo,
        participant_repo: IChatParticipantQueryRepo,
        broadcaster: ITripChannelBroadcaster,
    ) -> None:
        self.message_query_repo = message_query_repo
        self.message_command_repo = message_command_repo
        self.participant_repo = participant_repo
        self.broadcaster = broadcaster

    @classmethod
    @inject
    def depends(
        cls,
        message_query_repo: IMessageQueryRepo = Depends(Provide[Container.message_query_repo]),
        message_command_repo: IMessageCommandRepo = Depends(
            Provide[Container.message_command_repo]
        ),
        participant_repo: IChatParticipantQueryRepo = Depends(
            Provide[Container.chat_participant_query_repo]
        ),
        broadcaster: ITripChannelBroadcaster = Depends(
            Provide[Container.trip_channel_broadcaster]
        ),
    ) -> Self:
        return cls(
            message_query_repo=message_query_repo,
            message_command_repo=message_command_repo,
            participant_repo=participant_repo,
            broadcaster=broadcaster,
        )

    async def _ensure_participant(self, *, trip_id: UUID, user_id: UUID) -> None:
        if not await self.participant_repo.is_participant(trip_id=trip_id, user_id=user_id):
            raise ForbiddenError('Only the driver and booked passengers can read this chat')

    @Logger.io
    async def list_messages(
        self, *, trip_id: UUID, user_id: UUID, mark_read: bool = True
    ) -> List[Message]:
        """
        Conversation history for one participant, oldest first.

        Opening the conversation counts as reading it: unread messages addressed to
        the user are marked read and their receipts published.
        """
        await self._ensure_participant(trip_id=trip_id, user_id=user_id)
        messages = await self.message_query_repo.list_for_participant(
            trip_id=trip_id, user_id=user_id
        )
        if not mark_read or not any(m.receiver_id == user_id and not m.is_read for m in messages):
            return messages

        changed = {
            m.id: m
            for m in await self.message_command_repo.mark_trip_read(
                trip_id=trip_id, reader_id=user_id
            )
        }
        for message in changed.values():
            await self.broadcaster.broadcast(trip_id=trip_id, event_data=update_event(message))

        return [changed.get(m.id, m) for m in messages]

    @Logger.io
    async def unread_count(self, *, trip_id: UUID, user_id: UUID) -> int:
        await self._ensure_participant(trip_id=trip_id, user_id=user_id)
        return await self.message_query_repo.count_unread(trip_id=trip_id, user_id=user_id)
