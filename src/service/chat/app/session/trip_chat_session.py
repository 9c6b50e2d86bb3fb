"""
Trip Chat Session

One participant's live view of a trip conversation: history plus channel events,
with optimistic echo for outgoing messages.
"""

from datetime import date, datetime, timezone, tzinfo
from typing import Any, AsyncIterator, Dict, List, Optional
from zoneinfo import ZoneInfo

from anyio.streams.memory import MemoryObjectReceiveStream
import uuid_utils
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.event.i_trip_channel_broadcaster import ITripChannelBroadcaster
from src.platform.exception.exceptions import (
    CustomBaseError,
    DeliveryFailureError,
    PersistenceError,
    ValidationError,
)
from src.platform.logging.loguru_io import Logger
from src.service.chat.app.command.mark_message_read_use_case import MarkMessageReadUseCase
from src.service.chat.app.command.send_message_use_case import SendMessageUseCase
from src.service.chat.app.query.list_trip_messages_use_case import ListTripMessagesUseCase
from src.service.chat.domain.channel_event import ChannelEventType
from src.service.chat.domain.conversation import (
    TEMP_ID_PREFIX,
    Conversation,
    ConversationEntry,
    DayGroup,
    PendingMessage,
    group_by_day,
)
from src.service.chat.domain.entity.message_entity import (
    Message,
    MessageType,
    validate_message_text,
)


class TripChatSession:
    """
    Usage:
        async with TripChatSession(...) as session:
            await session.send('On my way')
            async for event in session.events():
                ...

    `online` is True exactly while the session holds a channel subscription.
    """

    def __init__(
        self,
        *,
        trip_id: UUID,
        user_id: UUID,
        send_message_use_case: SendMessageUseCase,
        mark_message_read_use_case: MarkMessageReadUseCase,
        list_trip_messages_use_case: ListTripMessagesUseCase,
        broadcaster: ITripChannelBroadcaster,
        peer_id: Optional[UUID] = None,
    ) -> None:
        self.trip_id = trip_id
        self.user_id = user_id
        self.peer_id = peer_id
        self.send_message_use_case = send_message_use_case
        self.mark_message_read_use_case = mark_message_read_use_case
        self.list_trip_messages_use_case = list_trip_messages_use_case
        self.broadcaster = broadcaster
        self.conversation = Conversation()
        self._stream: Optional[MemoryObjectReceiveStream[dict]] = None

    @property
    def online(self) -> bool:
        return self._stream is not None

    async def __aenter__(self) -> 'TripChatSession':
        await self.open()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @Logger.io
    async def open(self) -> None:
        if self._stream is not None:
            return

        # Subscribe before loading so nothing published in between is missed
        self._stream = await self.broadcaster.subscribe(trip_id=self.trip_id, user_id=self.user_id)
        try:
            history = await self.list_trip_messages_use_case.list_messages(
                trip_id=self.trip_id, user_id=self.user_id
            )
        except Exception:
            await self.close()
            raise
        self.conversation.load(history)
        Logger.base.info(
            f'💬 [CHAT] {self.user_id} opened trip {self.trip_id} ({len(history)} messages)'
        )

    async def close(self) -> None:
        if self._stream is None:
            return
        stream, self._stream = self._stream, None
        await self.broadcaster.unsubscribe(trip_id=self.trip_id, stream=stream)

    @Logger.io
    async def send(
        self,
        text: str,
        *,
        receiver_id: Optional[UUID] = None,
        message_type: MessageType = MessageType.TEXT,
    ) -> Message:
        """
        Raises:
            ValidationError: Blank or oversized text, or no receiver
            ForbiddenError: Not allowed to chat on this trip
            DeliveryFailureError: The message was not stored; safe to send again
        """
        receiver_id = receiver_id or self.peer_id
        if receiver_id is None:
            raise ValidationError('Message receiver is required')

        pending = PendingMessage(
            temp_id=f'{TEMP_ID_PREFIX}{uuid_utils.uuid4()}',
            trip_id=self.trip_id,
            sender_id=self.user_id,
            receiver_id=receiver_id,
            text=validate_message_text(text),
            created_at=datetime.now(timezone.utc),
            message_type=message_type,
        )
        self.conversation.add_pending(pending)

        try:
            message = await self.send_message_use_case.send_message(
                trip_id=self.trip_id,
                sender_id=self.user_id,
                receiver_id=receiver_id,
                text=pending.text,
                message_type=message_type,
            )
        except PersistenceError as e:
            self.conversation.discard(pending.temp_id)
            raise DeliveryFailureError('Message could not be sent. Please try again.') from e
        except Exception:
            self.conversation.discard(pending.temp_id)
            raise

        self.conversation.confirm(pending.temp_id, message)
        return message

    def _is_own(self, message: Message) -> bool:
        return self.user_id in (message.sender_id, message.receiver_id)

    async def apply(self, event: Dict[str, Any]) -> bool:
        """
        Reconcile one channel event into the local view.

        Returns False when the view is unchanged: a duplicate insert, or an event
        about another participant's conversation on the same trip.
        """
        message = Message.from_payload(event['message'])
        if not self._is_own(message):
            return False
        if event.get('type') == ChannelEventType.UPDATE:
            self.conversation.apply_update(message)
            return True

        if not self.conversation.apply_insert(message):
            return False
        if message.receiver_id == self.user_id and not message.is_read:
            try:
                read = await self.mark_message_read_use_case.mark_as_read(
                    message_id=message.id, reader_id=self.user_id
                )
            except CustomBaseError as e:
                # Message stays unread; the next history load marks it
                Logger.base.warning(
                    f'⚠️ [CHAT] DeliveryFailure: read receipt for {message.id} '
                    f'by {self.user_id} not recorded: {e.message}'
                )
                return True
            self.conversation.apply_update(read)
        return True

    async def events(self) -> AsyncIterator[Dict[str, Any]]:
        """Apply and yield channel events until the session is closed"""
        if self._stream is None:
            raise RuntimeError('Chat session is not open')

        async for event in self._stream:
            if await self.apply(event):
                yield event

    def messages(self) -> List[ConversationEntry]:
        return self.conversation.messages()

    def grouped(
        self, *, tz: Optional[tzinfo] = None, today: Optional[date] = None
    ) -> List[DayGroup]:
        return group_by_day(
            self.conversation.messages(),
            tz=tz or ZoneInfo(settings.DISPLAY_TIMEZONE),
            today=today,
        )
