from abc import ABC, abstractmethod
from typing import Optional

from uuid_utils import UUID


class ITripCommandRepo(ABC):
    """
    Sole writer of trip.available_seats.

    Seats only go down through `decrement_seats_if_unchanged` (compare-and-set on the
    snapshot the caller validated against) and only go up through `restore_seats`.
    """

    @abstractmethod
    async def get_available_seats(self, *, trip_id: UUID) -> Optional[int]:
        """Fresh read from the primary store; None when the trip does not exist"""
        pass

    @abstractmethod
    async def decrement_seats_if_unchanged(
        self, *, trip_id: UUID, expected_available: int, seats: int
    ) -> bool:
        """
        Set available_seats = expected_available - seats only if it still equals
        expected_available.

        Returns:
            True when exactly one row changed, False when another writer got there first
        """
        pass

    @abstractmethod
    async def restore_seats(self, *, trip_id: UUID, seats: int) -> bool:
        """Additive restore capped at total_seats. Returns False when no row matched."""
        pass
