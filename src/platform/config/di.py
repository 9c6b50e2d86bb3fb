"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.database.orm_db_setting import Database
from src.platform.event.trip_channel_broadcaster import TripChannelBroadcasterImpl
from src.service.booking.driven_adapter.notification.notification_dispatcher_impl import (
    NotificationDispatcherImpl,
)
from src.service.booking.driven_adapter.notification.notification_sender_impl import (
    NotificationSenderImpl,
)
from src.service.booking.driven_adapter.repo.booking_command_repo_impl import (
    BookingCommandRepoImpl,
)
from src.service.booking.driven_adapter.repo.booking_query_repo_impl import BookingQueryRepoImpl
from src.service.booking.driven_adapter.repo.payment_command_repo_impl import (
    PaymentCommandRepoImpl,
)
from src.service.booking.driven_adapter.repo.trip_command_repo_impl import TripCommandRepoImpl
from src.service.booking.driven_adapter.repo.trip_query_repo_impl import TripQueryRepoImpl
from src.service.chat.driven_adapter.repo.chat_participant_query_repo_impl import (
    ChatParticipantQueryRepoImpl,
)
from src.service.chat.driven_adapter.repo.message_command_repo_impl import (
    MessageCommandRepoImpl,
)
from src.service.chat.driven_adapter.repo.message_query_repo_impl import MessageQueryRepoImpl
from src.service.shared_kernel.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Database (primary only, reads and writes)
    database = providers.Singleton(Database)

    # Background task group (set by main.py lifespan)
    # Used for fire-and-forget notification delivery
    task_group = providers.Object(None)

    # Booking repositories (stateless - use session_factory per-request)
    trip_query_repo = providers.Singleton(
        TripQueryRepoImpl, session_factory=database.provided.session
    )
    trip_command_repo = providers.Singleton(
        TripCommandRepoImpl, session_factory=database.provided.session
    )
    booking_query_repo = providers.Singleton(
        BookingQueryRepoImpl, session_factory=database.provided.session
    )
    booking_command_repo = providers.Singleton(
        BookingCommandRepoImpl, session_factory=database.provided.session
    )
    payment_command_repo = providers.Singleton(
        PaymentCommandRepoImpl, session_factory=database.provided.session
    )

    # Notifications
    notification_sender = providers.Singleton(
        NotificationSenderImpl, session_factory=database.provided.session
    )
    notification_dispatcher = providers.Singleton(
        NotificationDispatcherImpl,
        sender=notification_sender,
        task_group=task_group,
    )

    # Chat repositories
    message_command_repo = providers.Singleton(
        MessageCommandRepoImpl, session_factory=database.provided.session
    )
    message_query_repo = providers.Singleton(
        MessageQueryRepoImpl, session_factory=database.provided.session
    )
    chat_participant_query_repo = providers.Singleton(
        ChatParticipantQueryRepoImpl, session_factory=database.provided.session
    )

    # In-process live channel, doubles as presence registry
    trip_channel_broadcaster = providers.Singleton(TripChannelBroadcasterImpl)

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth)


container = Container()
