"""
In-memory Trip Channel Broadcaster

Singleton pub/sub distributing chat events (message inserts and read receipts)
from chat use cases to SSE endpoints and participant sessions.
"""

from typing import Dict, List

import attrs
from anyio import BrokenResourceError, ClosedResourceError, WouldBlock, create_memory_object_stream
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


@attrs.define
class _Subscriber:
    user_id: UUID
    send_stream: MemoryObjectSendStream[dict]
    receive_stream: MemoryObjectReceiveStream[dict]


class TripChannelBroadcasterImpl:
    """
    In-memory pub/sub for trip chat events

    - Each trip_id has a list of subscribers (one per open participant session)
    - The subscriber list doubles as the presence registry
    - Stream buffer is bounded; events for a slow consumer are dropped, the
      consumer recovers by reloading history
    - Empty subscriber lists are removed on unsubscribe
    """

    def __init__(self, *, max_buffer_size: int | None = None):
        self._max_buffer_size = max_buffer_size or settings.CHAT_STREAM_BUFFER_SIZE
        self._subscribers: Dict[UUID, List[_Subscriber]] = {}

    async def subscribe(self, *, trip_id: UUID, user_id: UUID) -> MemoryObjectReceiveStream[dict]:
        send_stream, receive_stream = create_memory_object_stream[dict](
            max_buffer_size=self._max_buffer_size
        )
        self._subscribers.setdefault(trip_id, []).append(
            _Subscriber(user_id=user_id, send_stream=send_stream, receive_stream=receive_stream)
        )

        Logger.base.debug(
            f'📡 [CHANNEL] {user_id} joined trip {trip_id} '
            f'(total subscribers: {len(self._subscribers[trip_id])})'
        )
        return receive_stream

    async def broadcast(self, *, trip_id: UUID, event_data: dict) -> None:
        subscribers = self._subscribers.get(trip_id)
        if not subscribers:
            Logger.base.debug(f'📡 [CHANNEL] No subscribers for trip {trip_id}')
            return

        delivered = 0
        dropped = 0
        for subscriber in subscribers:
            try:
                subscriber.send_stream.send_nowait(event_data)
                delivered += 1
            except WouldBlock:
                dropped += 1
                Logger.base.warning(
                    f'⚠️ [CHANNEL] Stream full for {subscriber.user_id} on trip {trip_id}, '
                    f'dropping event (type={event_data.get("type")})'
                )
            except (BrokenResourceError, ClosedResourceError):
                # Receiver went away without unsubscribing
                dropped += 1

        Logger.base.debug(
            f'📡 [CHANNEL] Broadcast to trip {trip_id}: delivered={delivered}, dropped={dropped}'
        )

    async def unsubscribe(self, *, trip_id: UUID, stream: MemoryObjectReceiveStream[dict]) -> None:
        subscribers = self._subscribers.get(trip_id)
        if subscribers is None:
            return

        for i, subscriber in enumerate(subscribers):
            if subscriber.receive_stream is stream:
                await subscriber.send_stream.aclose()
                await subscriber.receive_stream.aclose()
                subscribers.pop(i)
                Logger.base.debug(
                    f'📡 [CHANNEL] {subscriber.user_id} left trip {trip_id} '
                    f'(remaining: {len(subscribers)})'
                )
                break

        if not subscribers:
            del self._subscribers[trip_id]

    def is_online(self, *, trip_id: UUID, user_id: UUID) -> bool:
        return any(s.user_id == user_id for s in self._subscribers.get(trip_id, []))

    def subscriber_count(self, *, trip_id: UUID) -> int:
        return len(self._subscribers.get(trip_id, []))
