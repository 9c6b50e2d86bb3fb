from abc import ABC, abstractmethod
from typing import List, Optional

from uuid_utils import UUID

from src.service.chat.domain.entity.message_entity import Message


class IMessageCommandRepo(ABC):
    """Repository interface for chat message writes"""

    @abstractmethod
    async def create(self, *, message: Message) -> Message:
        """Persist and return the stored row (server created_at)"""
        pass

    @abstractmethod
    async def mark_read(self, *, message_id: UUID, reader_id: UUID) -> Optional[Message]:
        """
        Set is_read/read_at if the reader is the receiver and it is still unread.

        Returns:
            The updated message, or None when nothing changed
        """
        pass

    @abstractmethod
    async def mark_trip_read(self, *, trip_id: UUID, reader_id: UUID) -> List[Message]:
        """Mark every unread message received by reader on the trip; returns the changed rows"""
        pass
