from abc import ABC, abstractmethod
from typing import List, Optional

from uuid_utils import UUID

from src.service.booking.domain.entity.booking_entity import Booking


class IBookingQueryRepo(ABC):
    """Repository interface for booking read operations"""

    @abstractmethod
    async def get_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        pass

    @abstractmethod
    async def list_by_passenger(self, *, passenger_id: UUID) -> List[Booking]:
        """Newest first"""
        pass

    @abstractmethod
    async def list_by_trip(self, *, trip_id: UUID) -> List[Booking]:
        pass
