from abc import ABC, abstractmethod
from typing import List, Optional

from uuid_utils import UUID

from src.service.chat.domain.entity.message_entity import Message


class IMessageQueryRepo(ABC):
    """Repository interface for chat message reads"""

    @abstractmethod
    async def get_by_id(self, *, message_id: UUID) -> Optional[Message]:
        pass

    @abstractmethod
    async def list_for_participant(self, *, trip_id: UUID, user_id: UUID) -> List[Message]:
        """Messages on the trip sent or received by user, oldest first"""
        pass

    @abstractmethod
    async def count_unread(self, *, trip_id: UUID, user_id: UUID) -> int:
        pass
