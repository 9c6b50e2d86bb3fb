"""
Test Configuration and Fixtures

Unit tests only: every store is an AsyncMock or an in-memory fake, so no database is
needed. Environment is set before any application module reads settings.
"""

import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)
    os.environ.setdefault('POSTGRES_DB', 'trip_booking_test_db')


_early_setup_test_environment()

from datetime import datetime, timedelta, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Any, Callable  # noqa: E402

import pytest  # noqa: E402
import uuid_utils  # noqa: E402
from uuid_utils import UUID  # noqa: E402

from src.service.booking.domain.entity.trip_entity import Trip, TripStatus  # noqa: E402


@pytest.fixture
def driver_id() -> UUID:
    return uuid_utils.uuid7()


@pytest.fixture
def passenger_id() -> UUID:
    return uuid_utils.uuid7()


@pytest.fixture
def make_trip(driver_id: UUID) -> Callable[..., Trip]:
    """Scheduled trip departing in two days, 500 per seat"""

    def _make(**overrides: Any) -> Trip:
        fields: dict[str, Any] = {
            'id': uuid_utils.uuid7(),
            'driver_id': driver_id,
            'departure_time': datetime.now(timezone.utc) + timedelta(days=2),
            'price_per_seat': Decimal('500.00'),
            'available_seats': 4,
            'total_seats': 4,
            'status': TripStatus.SCHEDULED,
            'departure_location': 'Bengaluru',
            'arrival_location': 'Mysuru',
        }
        fields.update(overrides)
        return Trip(**fields)

    return _make
