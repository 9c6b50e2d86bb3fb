from unittest.mock import AsyncMock

import pytest
import uuid_utils

from src.platform.exception.exceptions import (
    ForbiddenError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from src.service.chat.domain.channel_event import ChannelEventType


@pytest.mark.unit
class TestSendMessage:
    @pytest.mark.asyncio
    async def test_stores_and_broadcasts_insert(self, chat):
        stream = await chat.broadcaster.subscribe(trip_id=chat.trip_id, user_id=chat.driver_id)

        message = await chat.send.send_message(
            trip_id=chat.trip_id,
            sender_id=chat.passenger_id,
            receiver_id=chat.driver_id,
            text=' Where exactly is the pickup? ',
        )

        assert message.text == 'Where exactly is the pickup?'
        assert str(message.id) in chat.repo.messages
        event = stream.receive_nowait()
        assert event['type'] == ChannelEventType.INSERT
        assert event['message']['id'] == str(message.id)

    @pytest.mark.asyncio
    async def test_outsider_cannot_send(self, chat):
        with pytest.raises(ForbiddenError):
            await chat.send.send_message(
                trip_id=chat.trip_id,
                sender_id=uuid_utils.uuid7(),
                receiver_id=chat.driver_id,
                text='hi',
            )
        assert chat.repo.messages == {}

    @pytest.mark.asyncio
    async def test_cannot_send_to_outsider(self, chat):
        with pytest.raises(ForbiddenError):
            await chat.send.send_message(
                trip_id=chat.trip_id,
                sender_id=chat.passenger_id,
                receiver_id=uuid_utils.uuid7(),
                text='hi',
            )

    @pytest.mark.asyncio
    async def test_blank_text_rejected_before_lookup(self, chat):
        chat.participants.is_participant = AsyncMock(return_value=True)

        with pytest.raises(ValidationError):
            await chat.send.send_message(
                trip_id=chat.trip_id,
                sender_id=chat.passenger_id,
                receiver_id=chat.driver_id,
                text='   ',
            )
        chat.participants.is_participant.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_failure_publishes_nothing(self, chat):
        stream = await chat.broadcaster.subscribe(trip_id=chat.trip_id, user_id=chat.driver_id)
        chat.repo.fail_writes = True

        with pytest.raises(PersistenceError):
            await chat.send.send_message(
                trip_id=chat.trip_id,
                sender_id=chat.passenger_id,
                receiver_id=chat.driver_id,
                text='hi',
            )
        assert stream.statistics().current_buffer_used == 0


@pytest.mark.unit
class TestMarkMessageRead:
    @pytest.mark.asyncio
    async def test_marks_and_broadcasts_update(self, chat):
        seeded = chat.repo.seed(
            trip_id=chat.trip_id, sender_id=chat.driver_id, receiver_id=chat.passenger_id, text='hi'
        )
        stream = await chat.broadcaster.subscribe(trip_id=chat.trip_id, user_id=chat.driver_id)

        read = await chat.mark_read.mark_as_read(message_id=seeded.id, reader_id=chat.passenger_id)

        assert read.is_read
        assert read.read_at is not None
        event = stream.receive_nowait()
        assert event['type'] == ChannelEventType.UPDATE
        assert event['message']['is_read'] is True

    @pytest.mark.asyncio
    async def test_second_mark_is_a_no_op(self, chat):
        seeded = chat.repo.seed(
            trip_id=chat.trip_id, sender_id=chat.driver_id, receiver_id=chat.passenger_id, text='hi'
        )
        first = await chat.mark_read.mark_as_read(message_id=seeded.id, reader_id=chat.passenger_id)
        stream = await chat.broadcaster.subscribe(trip_id=chat.trip_id, user_id=chat.driver_id)

        second = await chat.mark_read.mark_as_read(
            message_id=seeded.id, reader_id=chat.passenger_id
        )

        assert second.read_at == first.read_at
        assert stream.statistics().current_buffer_used == 0

    @pytest.mark.asyncio
    async def test_only_receiver_can_mark(self, chat):
        seeded = chat.repo.seed(
            trip_id=chat.trip_id, sender_id=chat.driver_id, receiver_id=chat.passenger_id, text='hi'
        )

        with pytest.raises(ForbiddenError):
            await chat.mark_read.mark_as_read(message_id=seeded.id, reader_id=chat.driver_id)

    @pytest.mark.asyncio
    async def test_unknown_message(self, chat):
        with pytest.raises(NotFoundError):
            await chat.mark_read.mark_as_read(
                message_id=uuid_utils.uuid7(), reader_id=chat.passenger_id
            )


@pytest.mark.unit
class TestListTripMessages:
    @pytest.mark.asyncio
    async def test_opening_marks_incoming_read(self, chat):
        incoming = chat.repo.seed(
            trip_id=chat.trip_id, sender_id=chat.driver_id, receiver_id=chat.passenger_id, text='a'
        )
        outgoing = chat.repo.seed(
            trip_id=chat.trip_id, sender_id=chat.passenger_id, receiver_id=chat.driver_id, text='b'
        )
        stream = await chat.broadcaster.subscribe(trip_id=chat.trip_id, user_id=chat.driver_id)

        messages = await chat.list_messages.list_messages(
            trip_id=chat.trip_id, user_id=chat.passenger_id
        )

        by_id = {str(m.id): m for m in messages}
        assert by_id[str(incoming.id)].is_read
        assert not by_id[str(outgoing.id)].is_read
        assert stream.receive_nowait()['message']['id'] == str(incoming.id)
        assert await chat.list_messages.unread_count(
            trip_id=chat.trip_id, user_id=chat.passenger_id
        ) == 0

    @pytest.mark.asyncio
    async def test_mark_read_false_leaves_unread(self, chat):
        chat.repo.seed(
            trip_id=chat.trip_id, sender_id=chat.driver_id, receiver_id=chat.passenger_id, text='a'
        )

        messages = await chat.list_messages.list_messages(
            trip_id=chat.trip_id, user_id=chat.passenger_id, mark_read=False
        )

        assert not messages[0].is_read
        assert await chat.list_messages.unread_count(
            trip_id=chat.trip_id, user_id=chat.passenger_id
        ) == 1

    @pytest.mark.asyncio
    async def test_other_passengers_conversation_is_hidden(self, chat):
        other = uuid_utils.uuid7()
        chat.participants.participants.add((str(chat.trip_id), str(other)))
        chat.repo.seed(
            trip_id=chat.trip_id, sender_id=chat.driver_id, receiver_id=other, text='private'
        )

        assert await chat.list_messages.list_messages(
            trip_id=chat.trip_id, user_id=chat.passenger_id
        ) == []

    @pytest.mark.asyncio
    async def test_outsider_cannot_read(self, chat):
        with pytest.raises(ForbiddenError):
            await chat.list_messages.list_messages(trip_id=chat.trip_id, user_id=uuid_utils.uuid7())
