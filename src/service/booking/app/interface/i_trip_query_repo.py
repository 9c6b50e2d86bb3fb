from abc import ABC, abstractmethod
from typing import Optional

from uuid_utils import UUID

from src.service.booking.domain.entity.trip_entity import Trip


class ITripQueryRepo(ABC):
    """Repository interface for trip read operations"""

    @abstractmethod
    async def get_by_id(self, *, trip_id: UUID) -> Optional[Trip]:
        pass
