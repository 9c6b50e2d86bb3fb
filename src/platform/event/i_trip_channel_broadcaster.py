"""
Trip Channel Broadcaster Interface

Per-trip pub/sub used to push chat inserts and read receipts to every
participant currently listening on that trip.
"""

from typing import Protocol

from anyio.streams.memory import MemoryObjectReceiveStream
from uuid_utils import UUID


class ITripChannelBroadcaster(Protocol):
    async def subscribe(self, *, trip_id: UUID, user_id: UUID) -> MemoryObjectReceiveStream[dict]:
        """
        Subscribe to a trip's live channel

        Args:
            trip_id: Trip whose channel to join
            user_id: Listening participant, recorded for presence

        Returns:
            MemoryObjectReceiveStream that will receive event dictionaries
        """
        ...

    async def broadcast(self, *, trip_id: UUID, event_data: dict) -> None:
        """
        Send event to all subscribers of this trip

        Note:
            - Silently ignores if no subscribers exist
            - Drops event for a subscriber whose buffer is full
        """
        ...

    async def unsubscribe(self, *, trip_id: UUID, stream: MemoryObjectReceiveStream[dict]) -> None:
        """Remove subscriber and close its streams. Safe to call twice."""
        ...

    def is_online(self, *, trip_id: UUID, user_id: UUID) -> bool:
        """True while the participant holds at least one subscription on the trip"""
        ...
