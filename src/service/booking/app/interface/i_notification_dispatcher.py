from abc import ABC, abstractmethod

from src.service.booking.domain.domain_event.booking_domain_event import BookingDomainEvent


class INotificationDispatcher(ABC):
    @abstractmethod
    def dispatch(self, *, event: BookingDomainEvent) -> None:
        """
        Schedule passenger and driver notifications for the event and return at once.

        Never raises and never waits for delivery.
        """
        pass
