from datetime import datetime, timezone
from typing import Dict, List, Optional, Set, Tuple

import anyio
import attrs
import pytest
import uuid_utils
from uuid_utils import UUID

from src.platform.event.trip_channel_broadcaster import TripChannelBroadcasterImpl
from src.platform.exception.exceptions import PersistenceError
from src.service.chat.app.command.mark_message_read_use_case import MarkMessageReadUseCase
from src.service.chat.app.command.send_message_use_case import SendMessageUseCase
from src.service.chat.app.query.list_trip_messages_use_case import ListTripMessagesUseCase
from src.service.chat.domain.entity.message_entity import Message


class InMemoryMessageRepo:
    """Implements both the message command and query repos"""

    def __init__(self) -> None:
        self.messages: Dict[str, Message] = {}
        self.fail_writes = False

    async def create(self, *, message: Message) -> Message:
        await anyio.sleep(0)
        if self.fail_writes:
            raise PersistenceError('Database unavailable')
        self.messages[str(message.id)] = message
        return message

    async def mark_read(self, *, message_id: UUID, reader_id: UUID) -> Optional[Message]:
        await anyio.sleep(0)
        message = self.messages.get(str(message_id))
        if message is None or message.receiver_id != reader_id or message.is_read:
            return None
        read = message.mark_read()
        self.messages[str(message_id)] = read
        return read

    async def mark_trip_read(self, *, trip_id: UUID, reader_id: UUID) -> List[Message]:
        await anyio.sleep(0)
        changed = []
        for key, message in list(self.messages.items()):
            if message.trip_id == trip_id and message.receiver_id == reader_id and not message.is_read:
                self.messages[key] = message.mark_read()
                changed.append(self.messages[key])
        return changed

    async def get_by_id(self, *, message_id: UUID) -> Optional[Message]:
        return self.messages.get(str(message_id))

    async def list_for_participant(self, *, trip_id: UUID, user_id: UUID) -> List[Message]:
        return sorted(
            (
                m
                for m in self.messages.values()
                if m.trip_id == trip_id and user_id in (m.sender_id, m.receiver_id)
            ),
            key=lambda m: (m.created_at, str(m.id)),
        )

    async def count_unread(self, *, trip_id: UUID, user_id: UUID) -> int:
        return sum(
            1
            for m in self.messages.values()
            if m.trip_id == trip_id and m.receiver_id == user_id and not m.is_read
        )

    def seed(self, *, trip_id: UUID, sender_id: UUID, receiver_id: UUID, text: str) -> Message:
        message = Message(
            id=uuid_utils.uuid7(),
            trip_id=trip_id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            text=text,
            created_at=datetime.now(timezone.utc),
        )
        self.messages[str(message.id)] = message
        return message


class InMemoryParticipantRepo:
    def __init__(self, *participants: Tuple[UUID, UUID]) -> None:
        self.participants: Set[Tuple[str, str]] = {(str(t), str(u)) for t, u in participants}

    async def is_participant(self, *, trip_id: UUID, user_id: UUID) -> bool:
        return (str(trip_id), str(user_id)) in self.participants


@attrs.define
class ChatFixture:
    trip_id: UUID
    driver_id: UUID
    passenger_id: UUID
    repo: InMemoryMessageRepo
    participants: InMemoryParticipantRepo
    broadcaster: TripChannelBroadcasterImpl
    send: SendMessageUseCase
    mark_read: MarkMessageReadUseCase
    list_messages: ListTripMessagesUseCase


@pytest.fixture
def chat(driver_id, passenger_id) -> ChatFixture:
    trip_id = uuid_utils.uuid7()
    repo = InMemoryMessageRepo()
    participants = InMemoryParticipantRepo((trip_id, driver_id), (trip_id, passenger_id))
    broadcaster = TripChannelBroadcasterImpl(max_buffer_size=10)
    return ChatFixture(
        trip_id=trip_id,
        driver_id=driver_id,
        passenger_id=passenger_id,
        repo=repo,
        participants=participants,
        broadcaster=broadcaster,
        send=SendMessageUseCase(
            message_command_repo=repo, participant_repo=participants, broadcaster=broadcaster
        ),
        mark_read=MarkMessageReadUseCase(
            message_command_repo=repo, message_query_repo=repo, broadcaster=broadcaster
        ),
        list_messages=ListTripMessagesUseCase(
            message_query_repo=repo,
            message_command_repo=repo,
            participant_repo=participants,
            broadcaster=broadcaster,
        ),
    )
