"""Passenger and driver notification content for booking events."""

from datetime import datetime
from typing import List
import zoneinfo

from src.platform.config.core_setting import settings
from src.service.booking.domain.domain_event.booking_domain_event import (
    BookingCancelledEvent,
    BookingCreatedEvent,
    BookingDomainEvent,
)
from src.service.booking.domain.entity.notification_entity import Notification, NotificationType


def format_notification_date(value: datetime) -> str:
    local = value.astimezone(zoneinfo.ZoneInfo(settings.DISPLAY_TIMEZONE))
    return local.strftime('%a, %d %b, %I:%M %p')


def passenger_booking_confirmation(event: BookingCreatedEvent) -> Notification:
    return Notification(
        user_id=event.passenger_id,
        type=NotificationType.BOOKING_CONFIRMATION,
        title='🎉 Booking Confirmed!',
        body=(
            f'Your trip from {event.departure_location} to {event.arrival_location} on '
            f'{format_notification_date(event.departure_time)} is confirmed. '
            f'{event.seats_booked} seat(s) booked.'
        ),
        data={
            'booking_id': str(event.booking_id),
            'trip_id': str(event.trip_id),
            'type': NotificationType.BOOKING_CONFIRMATION.value,
        },
        action_url=f'/trip-booking/booking/{event.booking_id}',
    )


def driver_new_booking(event: BookingCreatedEvent) -> Notification:
    return Notification(
        user_id=event.driver_id,
        type=NotificationType.NEW_BOOKING,
        title='🚗 New Booking!',
        body=(
            f'{event.passenger_name} has booked {event.seats_booked} seat(s) for your trip on '
            f'{format_notification_date(event.departure_time)}. Amount: ₹{event.total_amount}'
        ),
        data={
            'booking_id': str(event.booking_id),
            'trip_id': str(event.trip_id),
            'passenger_id': str(event.passenger_id),
            'type': NotificationType.NEW_BOOKING.value,
        },
        action_url=f'/trip-booking/my-trip/{event.trip_id}',
    )


def passenger_booking_cancelled(event: BookingCancelledEvent) -> Notification:
    if event.refund_amount > 0:
        body = (
            'Your booking has been cancelled. '
            f'Refund of ₹{event.refund_amount} will be processed within 5-7 business days.'
        )
    else:
        body = f'Your booking has been cancelled. {event.refund_reason}'

    return Notification(
        user_id=event.passenger_id,
        type=NotificationType.BOOKING_CANCELLED,
        title='❌ Booking Cancelled',
        body=body,
        data={
            'booking_id': str(event.booking_id),
            'trip_id': str(event.trip_id),
            'type': NotificationType.BOOKING_CANCELLED.value,
            'refund_amount': str(event.refund_amount),
        },
        action_url='/trip-booking/profile',
    )


def driver_booking_cancelled(event: BookingCancelledEvent) -> Notification:
    return Notification(
        user_id=event.driver_id,
        type=NotificationType.BOOKING_CANCELLED,
        title='⚠️ Booking Cancelled',
        body=f'{event.passenger_name} has cancelled their booking for {event.seats_booked} seat(s).',
        data={
            'booking_id': str(event.booking_id),
            'trip_id': str(event.trip_id),
            'type': NotificationType.BOOKING_CANCELLED.value,
        },
        action_url=f'/trip-booking/my-trip/{event.trip_id}',
    )


def build_notifications(event: BookingDomainEvent) -> List[Notification]:
    """Passenger notification first, then driver."""
    if isinstance(event, BookingCreatedEvent):
        return [passenger_booking_confirmation(event), driver_new_booking(event)]
    return [passenger_booking_cancelled(event), driver_booking_cancelled(event)]
