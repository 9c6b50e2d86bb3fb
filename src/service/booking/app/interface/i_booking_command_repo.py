from abc import ABC, abstractmethod

from uuid_utils import UUID

from src.service.booking.domain.entity.booking_entity import Booking


class IBookingCommandRepo(ABC):
    """Repository interface for booking write operations"""

    @abstractmethod
    async def create(self, *, booking: Booking) -> Booking:
        pass

    @abstractmethod
    async def delete(self, *, booking_id: UUID) -> None:
        """Physical delete, used only to roll back a reservation that lost its seats"""
        pass

    @abstractmethod
    async def cancel(self, *, booking: Booking) -> bool:
        """
        Persist the cancellation fields of an already-cancelled entity.

        Guarded on the stored row still being confirmed, so two concurrent
        cancellations cannot both succeed. Returns False when the guard failed.
        """
        pass
