from abc import ABC, abstractmethod

from src.service.booking.domain.entity.notification_entity import Notification


class INotificationSender(ABC):
    """Notification transport. Implementations may raise; the dispatcher absorbs failures."""

    @abstractmethod
    async def send(self, *, notification: Notification) -> None:
        pass
