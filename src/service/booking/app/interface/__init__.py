"""Application layer interfaces (Ports)"""

from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.booking.app.interface.i_notification_dispatcher import INotificationDispatcher
from src.service.booking.app.interface.i_notification_sender import INotificationSender
from src.service.booking.app.interface.i_payment_command_repo import IPaymentCommandRepo
from src.service.booking.app.interface.i_trip_command_repo import ITripCommandRepo
from src.service.booking.app.interface.i_trip_query_repo import ITripQueryRepo

__all__ = [
    'IBookingCommandRepo',
    'IBookingQueryRepo',
    'INotificationDispatcher',
    'INotificationSender',
    'IPaymentCommandRepo',
    'ITripCommandRepo',
    'ITripQueryRepo',
]
