from abc import ABC, abstractmethod

from uuid_utils import UUID


class IChatParticipantQueryRepo(ABC):
    @abstractmethod
    async def is_participant(self, *, trip_id: UUID, user_id: UUID) -> bool:
        """True for the trip's driver and for passengers holding a confirmed booking"""
        pass
