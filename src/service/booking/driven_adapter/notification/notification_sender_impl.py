import uuid_utils

from src.platform.database.base_repo import BaseSqlRepo
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_notification_sender import INotificationSender
from src.service.booking.domain.entity.notification_entity import Notification
from src.service.booking.driven_adapter.model.user_notification_model import (
    UserNotificationModel,
)


class NotificationSenderImpl(BaseSqlRepo, INotificationSender):
    """Writes the notification to the user_notification inbox table; push fan-out reads from there."""

    @Logger.io
    async def send(self, *, notification: Notification) -> None:
        async with self._get_session() as session:
            session.add(
                UserNotificationModel(
                    id=notification.id or uuid_utils.uuid7(),
                    user_id=notification.user_id,
                    title=notification.title,
                    body=notification.body,
                    type=notification.type.value,
                    data=notification.data,
                    action_url=notification.action_url,
                )
            )
            await session.commit()
