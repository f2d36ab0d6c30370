from fastapi import status


class BookingServiceError(Exception):
    """
    Base class for errors raised by the booking engine.

    Each subclass carries the `kind` exposed to clients and the HTTP status it maps to.
    They are rendered as `{"detail": message, "kind": kind}` by the handler in `app.main`.
    """

    kind = "InternalError"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    headers = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthenticated(BookingServiceError):
    kind = "Unauthenticated"
    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class Forbidden(BookingServiceError):
    kind = "Forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(BookingServiceError):
    kind = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND


class InvalidState(BookingServiceError):
    kind = "InvalidState"
    status_code = status.HTTP_400_BAD_REQUEST


class Conflict(BookingServiceError):
    kind = "Conflict"
    status_code = status.HTTP_409_CONFLICT


class InternalError(BookingServiceError):
    pass
