from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest

from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.exception.exceptions import (
    AlreadyCancelledError,
    ConcurrentModificationError,
    InsufficientSeatsError,
    PersistenceError,
    ValidationError,
)


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get('/validation')
    async def validation():
        raise ValidationError('Must book at least 1 seat.', errors=['Must book at least 1 seat.', 'x'])

    @app.get('/insufficient')
    async def insufficient():
        raise InsufficientSeatsError('Only 1 seat(s) available.', available_seats=1)

    @app.get('/conflict')
    async def conflict():
        raise ConcurrentModificationError('Seats were booked by someone else.', available_seats=0)

    @app.get('/cancelled')
    async def cancelled():
        raise AlreadyCancelledError('Booking is already cancelled')

    @app.get('/persistence')
    async def persistence():
        raise PersistenceError()

    @app.get('/boom')
    async def boom():
        raise RuntimeError('boom')

    return TestClient(app, raise_server_exceptions=False)


@pytest.mark.unit
class TestExceptionHandlers:
    def test_validation_error_lists_every_violation(self, client):
        response = client.get('/validation')

        assert response.status_code == 400
        assert response.json()['errors'] == ['Must book at least 1 seat.', 'x']

    def test_insufficient_seats(self, client):
        response = client.get('/insufficient')

        assert response.status_code == 409
        assert response.json() == {'detail': 'Only 1 seat(s) available.', 'available_seats': 1}

    def test_conflict_is_marked_retryable(self, client):
        response = client.get('/conflict')

        assert response.status_code == 409
        assert response.json()['retryable'] is True
        assert response.json()['available_seats'] == 0

    def test_already_cancelled_is_not_retryable(self, client):
        response = client.get('/cancelled')

        assert response.status_code == 409
        assert 'retryable' not in response.json()

    def test_persistence_error(self, client):
        assert client.get('/persistence').status_code == 503

    def test_unknown_error(self, client):
        response = client.get('/boom')

        assert response.status_code == 500
        assert response.json() == {'detail': 'Internal server error'}
