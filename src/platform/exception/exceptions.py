class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        return False

    def extra_content(self) -> dict:
        return {}


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class ValidationError(DomainError):
    """Every violated booking rule is collected into `errors`, not just the first one."""

    def __init__(self, message: str, *, errors: list[str] | None = None) -> None:
        super().__init__(message, 400)
        self.errors = errors or [message]

    def extra_content(self) -> dict:
        return {'errors': self.errors}


class ForbiddenError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class InsufficientSeatsError(ConflictError):
    def __init__(self, message: str, *, available_seats: int) -> None:
        super().__init__(message)
        self.available_seats = available_seats

    def extra_content(self) -> dict:
        return {'available_seats': self.available_seats}


class ConcurrentModificationError(ConflictError):
    """Another booking changed the seat count between read and write. Safe to retry."""

    def __init__(self, message: str, *, available_seats: int | None = None) -> None:
        super().__init__(message)
        self.available_seats = available_seats

    @property
    def retryable(self) -> bool:
        return True

    def extra_content(self) -> dict:
        return {'available_seats': self.available_seats}


class AlreadyCancelledError(ConflictError):
    pass


class PersistenceError(CustomBaseError):
    def __init__(self, message: str = 'Storage is temporarily unavailable') -> None:
        super().__init__(message, 503)


class DeliveryFailureError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 502)
