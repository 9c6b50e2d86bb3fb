from typing import Optional

from anyio.abc import TaskGroup

from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.booking.app.interface.i_notification_dispatcher import INotificationDispatcher
from src.service.booking.app.interface.i_notification_sender import INotificationSender
from src.service.booking.domain.domain_event.booking_domain_event import BookingDomainEvent
from src.service.booking.domain.entity.notification_entity import Notification
from src.service.booking.domain.notification_template import build_notifications


class NotificationDispatcherImpl(INotificationDispatcher):
    """
    Fire-and-forget delivery of booking notifications.

    `dispatch` only schedules work on the application's background task group, so the
    booking request returns before any notification is written. Every failure is
    caught per notification: a failed passenger notification does not stop the
    driver's, and nothing ever propagates back to the booking path.
    """

    def __init__(self, *, sender: INotificationSender, task_group: Optional[TaskGroup] = None):
        self.sender = sender
        self.task_group = task_group

    def dispatch(self, *, event: BookingDomainEvent) -> None:
        try:
            notifications = build_notifications(event)
        except Exception as e:
            Logger.base.exception(f'❌ [NOTIFY] Could not build notifications: {e}')
            return

        if self.task_group is None:
            Logger.base.error(
                f'❌ [NOTIFY] No background task group, dropping {len(notifications)} '
                f'notification(s) for booking {event.booking_id}'
            )
            for notification in notifications:
                metrics.record_notification(kind=notification.type.value, delivered=False)
            return

        for notification in notifications:
            self.task_group.start_soon(self._deliver, notification)

    async def _deliver(self, notification: Notification) -> None:
        try:
            await self.sender.send(notification=notification)
        except Exception as e:
            # DeliveryFailure: logged and counted, never retried
            Logger.base.warning(
                f'⚠️ [NOTIFY] DeliveryFailure {notification.type} to {notification.user_id}: '
                f'{type(e).__name__}: {e}'
            )
            metrics.record_notification(kind=notification.type.value, delivered=False)
            return

        metrics.record_notification(kind=notification.type.value, delivered=True)
        Logger.base.debug(f'📨 [NOTIFY] {notification.type} delivered to {notification.user_id}')
