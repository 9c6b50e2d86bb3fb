"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.booking.app.command import cancel_booking_use_case, create_booking_use_case
from src.service.booking.app.query import (
    calculate_price_use_case,
    get_booking_use_case,
    list_bookings_use_case,
    preview_refund_use_case,
)
from src.service.chat.app.command import mark_message_read_use_case, send_message_use_case
from src.service.chat.app.query import list_trip_messages_use_case
from src.service.shared_kernel.driving_adapter.http_controller.auth import current_user


WIRE_MODULES: list[ModuleType] = [
    create_booking_use_case,
    cancel_booking_use_case,
    calculate_price_use_case,
    get_booking_use_case,
    list_bookings_use_case,
    preview_refund_use_case,
    send_message_use_case,
    mark_message_read_use_case,
    list_trip_messages_use_case,
    current_user,
]
