from datetime import datetime, timezone
from typing import List, Optional

import attrs
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import InsufficientSeatsError, ValidationError
from src.service.booking.domain.entity.trip_entity import Trip


@attrs.define(frozen=True)
class BookingValidationResult:
    errors: List[str] = attrs.field(factory=list)
    warnings: List[str] = attrs.field(factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_booking(
    *,
    trip: Trip,
    requested_seats: int,
    passenger_id: Optional[UUID] = None,
    now: Optional[datetime] = None,
) -> BookingValidationResult:
    """
    Check every booking rule and report all violations at once.

    Warnings never block a booking; they are returned to the passenger as-is.
    """
    now = now or datetime.now(timezone.utc)
    errors: list[str] = []
    warnings: list[str] = []

    if requested_seats < 1:
        errors.append('Must book at least 1 seat.')
    elif requested_seats > trip.available_seats:
        errors.append(
            f'Only {trip.available_seats} seat(s) available. You requested {requested_seats}.'
        )

    if not trip.can_accept_booking():
        errors.append(f'This trip is {trip.status} and no longer accepts bookings.')

    if passenger_id is not None and trip.is_driver(passenger_id):
        errors.append('Drivers cannot book seats on their own trip.')

    hours_left = trip.hours_until_departure(now=now)
    if trip.has_departed(now=now):
        errors.append('Cannot book a trip that has already departed.')
    elif hours_left < trip.booking_deadline_hours:
        errors.append(
            'Booking deadline has passed. '
            f'Must book at least {trip.booking_deadline_hours:g} hour(s) before departure.'
        )
    elif hours_left < settings.DEPARTURE_WARNING_HOURS:
        warnings.append(
            f'Trip departs in less than {settings.DEPARTURE_WARNING_HOURS:g} hours. '
            'Please ensure you can reach the pickup point on time.'
        )

    return BookingValidationResult(errors=errors, warnings=warnings)


def ensure_bookable(
    *,
    trip: Trip,
    requested_seats: int,
    passenger_id: Optional[UUID] = None,
    now: Optional[datetime] = None,
) -> List[str]:
    """
    Raise on any violation, otherwise return the warnings.

    A request whose only problem is the seat count is a capacity failure
    (InsufficientSeatsError), anything else is a ValidationError carrying every
    violation.
    """
    result = validate_booking(
        trip=trip, requested_seats=requested_seats, passenger_id=passenger_id, now=now
    )
    if result.is_valid:
        return result.warnings

    seats_short = 1 <= requested_seats and trip.available_seats < requested_seats
    if seats_short and len(result.errors) == 1:
        raise InsufficientSeatsError(result.errors[0], available_seats=trip.available_seats)
    raise ValidationError(result.errors[0], errors=result.errors)
