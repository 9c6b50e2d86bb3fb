from abc import ABC, abstractmethod
from decimal import Decimal

from uuid_utils import UUID

from src.service.booking.domain.entity.payment_entity import Payment


class IPaymentCommandRepo(ABC):
    """Repository interface for payment records (one per booking)"""

    @abstractmethod
    async def create(self, *, payment: Payment) -> Payment:
        pass

    @abstractmethod
    async def delete_by_booking_id(self, *, booking_id: UUID) -> None:
        pass

    @abstractmethod
    async def mark_refunded(self, *, booking_id: UUID, refund_amount: Decimal) -> bool:
        pass
