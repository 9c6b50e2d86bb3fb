from contextlib import aclosing
from datetime import date
from unittest.mock import AsyncMock
from zoneinfo import ZoneInfo

import anyio
import pytest
import uuid_utils

from src.platform.exception.exceptions import (
    DeliveryFailureError,
    PersistenceError,
    ValidationError,
)
from src.service.chat.app.session.trip_chat_session import TripChatSession
from src.service.chat.domain.conversation import PendingMessage


def _session(chat, *, user_id, peer_id=None) -> TripChatSession:
    return TripChatSession(
        trip_id=chat.trip_id,
        user_id=user_id,
        peer_id=peer_id,
        send_message_use_case=chat.send,
        mark_message_read_use_case=chat.mark_read,
        list_trip_messages_use_case=chat.list_messages,
        broadcaster=chat.broadcaster,
    )


async def _drain(session: TripChatSession) -> int:
    """Apply everything currently buffered on the session's stream"""
    applied = 0
    while True:
        try:
            event = session._stream.receive_nowait()
        except anyio.WouldBlock:
            return applied
        if await session.apply(event):
            applied += 1


@pytest.mark.unit
class TestTripChatSession:
    @pytest.mark.asyncio
    async def test_online_while_open(self, chat):
        session = _session(chat, user_id=chat.passenger_id, peer_id=chat.driver_id)

        async with session:
            assert session.online
            assert chat.broadcaster.is_online(trip_id=chat.trip_id, user_id=chat.passenger_id)

        assert not session.online
        assert not chat.broadcaster.is_online(trip_id=chat.trip_id, user_id=chat.passenger_id)

    @pytest.mark.asyncio
    async def test_open_loads_history(self, chat):
        chat.repo.seed(
            trip_id=chat.trip_id, sender_id=chat.driver_id, receiver_id=chat.passenger_id, text='a'
        )

        async with _session(chat, user_id=chat.passenger_id) as session:
            assert [m.text for m in session.messages()] == ['a']
            assert session.messages()[0].is_read

    @pytest.mark.asyncio
    async def test_failed_open_releases_subscription(self, chat):
        chat.list_messages.list_messages = AsyncMock(side_effect=RuntimeError('boom'))
        session = _session(chat, user_id=chat.passenger_id)

        with pytest.raises(RuntimeError):
            await session.open()

        assert not session.online
        assert chat.broadcaster.subscriber_count(trip_id=chat.trip_id) == 0

    @pytest.mark.asyncio
    async def test_own_echo_appears_once(self, chat):
        async with _session(chat, user_id=chat.passenger_id, peer_id=chat.driver_id) as session:
            sent = await session.send('On my way')

            assert await _drain(session) == 0
            assert [m.id for m in session.messages()] == [sent.id]

    @pytest.mark.asyncio
    async def test_failed_send_leaves_no_phantom(self, chat):
        chat.repo.fail_writes = True

        async with _session(chat, user_id=chat.passenger_id, peer_id=chat.driver_id) as session:
            with pytest.raises(DeliveryFailureError):
                await session.send('hello?')

            assert session.messages() == []

    @pytest.mark.asyncio
    async def test_pending_visible_while_in_flight(self, chat):
        session = _session(chat, user_id=chat.passenger_id, peer_id=chat.driver_id)
        seen = []

        store = chat.send.send_message

        async def observe_then_store(**kwargs):
            seen.extend(session.messages())
            return await store(**kwargs)

        chat.send.send_message = observe_then_store
        async with session:
            await session.send('typing fast')

        assert len(seen) == 1
        assert isinstance(seen[0], PendingMessage)
        assert seen[0].text == 'typing fast'
        assert not isinstance(session.messages()[0], PendingMessage)

    @pytest.mark.asyncio
    async def test_send_requires_receiver(self, chat):
        async with _session(chat, user_id=chat.passenger_id) as session:
            with pytest.raises(ValidationError):
                await session.send('hello')

    @pytest.mark.asyncio
    async def test_receiver_marks_incoming_read(self, chat):
        driver = _session(chat, user_id=chat.driver_id, peer_id=chat.passenger_id)
        passenger = _session(chat, user_id=chat.passenger_id, peer_id=chat.driver_id)

        async with driver, passenger:
            sent = await driver.send('Running 5 minutes late')

            # the insert, then its own read receipt
            assert await _drain(passenger) == 2
            received = passenger.conversation.get(sent.id)
            assert received.is_read

            # driver sees its own insert (duplicate) and then the read receipt
            assert await _drain(driver) == 1
            assert driver.conversation.get(sent.id).is_read

    @pytest.mark.asyncio
    async def test_failed_read_receipt_keeps_message_unread(self, chat):
        driver = _session(chat, user_id=chat.driver_id, peer_id=chat.passenger_id)
        passenger = _session(chat, user_id=chat.passenger_id, peer_id=chat.driver_id)
        chat.mark_read.mark_as_read = AsyncMock(
            side_effect=PersistenceError('Database unavailable')
        )

        async with driver, passenger:
            sent = await driver.send('Pickup at gate 2')

            assert await _drain(passenger) == 1
            received = passenger.conversation.get(sent.id)
            assert received is not None
            assert received.is_read is False
            assert passenger.online

    @pytest.mark.asyncio
    async def test_ignores_other_conversations_on_trip(self, chat):
        other = uuid_utils.uuid7()
        chat.participants.participants.add((str(chat.trip_id), str(other)))

        async with _session(chat, user_id=chat.passenger_id) as session:
            await chat.send.send_message(
                trip_id=chat.trip_id, sender_id=chat.driver_id, receiver_id=other, text='hi'
            )

            assert await _drain(session) == 0
            assert session.messages() == []

    @pytest.mark.asyncio
    async def test_events_stream(self, chat):
        passenger = _session(chat, user_id=chat.passenger_id)
        received = []

        async with passenger:

            async def listen():
                async with aclosing(passenger.events()) as events:
                    async for event in events:
                        received.append(event)
                        return

            async with anyio.create_task_group() as tg:
                tg.start_soon(listen)
                await anyio.sleep(0)
                await chat.send.send_message(
                    trip_id=chat.trip_id,
                    sender_id=chat.driver_id,
                    receiver_id=chat.passenger_id,
                    text='Here',
                )

        assert len(received) == 1
        assert received[0]['message']['text'] == 'Here'

    @pytest.mark.asyncio
    async def test_events_requires_open_session(self, chat):
        session = _session(chat, user_id=chat.passenger_id)

        with pytest.raises(RuntimeError):
            async for _ in session.events():
                pass

    @pytest.mark.asyncio
    async def test_grouped_by_day(self, chat):
        async with _session(chat, user_id=chat.passenger_id, peer_id=chat.driver_id) as session:
            await session.send('one')
            await session.send('two')
            today = session.messages()[0].created_at.astimezone(ZoneInfo('Asia/Kolkata')).date()

            groups = session.grouped(today=today)

        assert len(groups) == 1
        assert groups[0].label == 'Today'
        assert [m.text for m in groups[0].messages] == ['one', 'two']
        assert isinstance(groups[0].day, date)
