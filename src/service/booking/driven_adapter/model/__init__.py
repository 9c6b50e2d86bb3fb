"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.booking.driven_adapter.model.booking_model import BookingModel
from src.service.booking.driven_adapter.model.payment_model import PaymentModel
from src.service.booking.driven_adapter.model.trip_model import TripModel
from src.service.booking.driven_adapter.model.user_notification_model import (
    UserNotificationModel,
)

__all__ = [
    'BookingModel',
    'PaymentModel',
    'TripModel',
    'UserNotificationModel',
]
