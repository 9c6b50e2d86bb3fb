from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Optional

import attrs
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.service.booking.domain.refund_policy_domain import hours_until


class TripStatus(StrEnum):
    SCHEDULED = 'scheduled'
    ACTIVE = 'active'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


@attrs.define
class Trip:
    """
    Trip published by a driver.

    `available_seats` is the contended field: it is only ever changed by the trip
    command repo's conditional decrement and capped restore, and always stays within
    0..total_seats.
    """

    id: UUID
    driver_id: UUID
    departure_time: datetime
    price_per_seat: Decimal
    available_seats: int
    total_seats: int
    status: TripStatus = TripStatus.SCHEDULED
    departure_location: str = ''
    arrival_location: str = ''
    toll_charges: Decimal = Decimal('0')
    booking_deadline_hours: float = attrs.field(factory=lambda: settings.BOOKING_DEADLINE_HOURS)
    created_at: Optional[datetime] = None

    def can_accept_booking(self) -> bool:
        return self.status == TripStatus.SCHEDULED

    def has_departed(self, *, now: datetime) -> bool:
        return self.departure_time <= now

    def hours_until_departure(self, *, now: datetime) -> float:
        return hours_until(self.departure_time, now)

    def is_driver(self, user_id: UUID) -> bool:
        return user_id == self.driver_id
