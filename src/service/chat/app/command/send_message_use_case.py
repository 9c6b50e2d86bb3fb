from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
import uuid_utils
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.event.i_trip_channel_broadcaster import ITripChannelBroadcaster
from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.chat.app.interface.i_chat_participant_query_repo import (
    IChatParticipantQueryRepo,
)
from src.service.chat.app.interface.i_message_command_repo import IMessageCommandRepo
from src.service.chat.domain.channel_event import insert_event
from src.service.chat.domain.entity.message_entity import Message, MessageType


class SendMessageUseCase:
    def __init__(
        self,
        *,
        message_command_repo: IMessageCommandRepo,
        participant_repo: IChatParticipantQueryRepo,
        broadcaster: ITripChannelBroadcaster,
    ) -> None:
        self.message_command_repo = message_command_repo
        self.participant_repo = participant_repo
        self.broadcaster = broadcaster
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
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
            message_command_repo=message_command_repo,
            participant_repo=participant_repo,
            broadcaster=broadcaster,
        )

    @Logger.io
    async def send_message(
        self,
        *,
        trip_id: UUID,
        sender_id: UUID,
        receiver_id: UUID,
        text: str,
        message_type: MessageType = MessageType.TEXT,
    ) -> Message:
        """
        Persist a message and publish it on the trip's live channel.

        Raises:
            ValidationError: Blank or oversized text, or sender == receiver
            ForbiddenError: Sender or receiver is not part of the trip
            PersistenceError: Message was not stored (nothing is published)
        """
        with self.tracer.start_as_current_span(
            'use_case.send_message',
            attributes={'trip.id': str(trip_id), 'sender.id': str(sender_id)},
        ):
            message = Message.create(
                id=uuid_utils.uuid7(),
                trip_id=trip_id,
                sender_id=sender_id,
                receiver_id=receiver_id,
                text=text,
                message_type=message_type,
            )

            for user_id in (sender_id, receiver_id):
                if not await self.participant_repo.is_participant(trip_id=trip_id, user_id=user_id):
                    raise ForbiddenError('Only the driver and booked passengers can chat on this trip')

            stored = await self.message_command_repo.create(message=message)
            await self.broadcaster.broadcast(trip_id=trip_id, event_data=insert_event(stored))

            metrics.record_chat_message(message_type=stored.message_type.value)
            Logger.base.info(f'💬 [CHAT] {sender_id} -> {receiver_id} on trip {trip_id}: {stored.id}')
            return stored
