# backend/app/services/errors.py
"""
Typed rejection reasons raised by the booking services.

Every rejection is an expected outcome for the caller, not a crash.
The HTTP layer maps them to responses in one place (see main.py).
"""

import enum


class ErrorKind(str, enum.Enum):
    INVALID_INPUT = "InvalidInput"
    RESOURCE_NOT_FOUND = "ResourceNotFound"
    RESOURCE_UNAVAILABLE = "ResourceUnavailable"
    BOOKING_NOT_FOUND = "BookingNotFound"
    INVALID_SLOT = "InvalidSlot"
    PAST_SLOT = "PastSlot"
    PAST_BOOKING = "PastBooking"
    ADVANCE_LIMIT_EXCEEDED = "AdvanceLimitExceeded"
    DAILY_LIMIT_EXCEEDED = "DailyLimitExceeded"
    WEEKLY_LIMIT_EXCEEDED = "WeeklyLimitExceeded"
    SLOT_CONFLICT = "SlotConflict"
    FORBIDDEN = "Forbidden"
    ALREADY_CANCELLED = "AlreadyCancelled"
    CATALOG_INVALID = "CatalogInvalid"
    RESOURCE_TYPE_NOT_FOUND = "ResourceTypeNotFound"


class BookingError(Exception):
    kind: ErrorKind = ErrorKind.INVALID_INPUT
    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class InvalidInput(BookingError):
    kind = ErrorKind.INVALID_INPUT


class ResourceNotFound(BookingError):
    kind = ErrorKind.RESOURCE_NOT_FOUND
    status_code = 404

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


class ResourceUnavailable(BookingError):
    kind = ErrorKind.RESOURCE_UNAVAILABLE


class BookingNotFound(BookingError):
    kind = ErrorKind.BOOKING_NOT_FOUND
    status_code = 404

    def __init__(self, message: str = "Booking not found"):
        super().__init__(message)


class InvalidSlot(BookingError):
    kind = ErrorKind.INVALID_SLOT


class PastSlot(BookingError):
    kind = ErrorKind.PAST_SLOT


class PastBooking(BookingError):
    kind = ErrorKind.PAST_BOOKING


class AdvanceLimitExceeded(BookingError):
    kind = ErrorKind.ADVANCE_LIMIT_EXCEEDED


class DailyLimitExceeded(BookingError):
    kind = ErrorKind.DAILY_LIMIT_EXCEEDED


class WeeklyLimitExceeded(BookingError):
    kind = ErrorKind.WEEKLY_LIMIT_EXCEEDED


class SlotConflict(BookingError):
    kind = ErrorKind.SLOT_CONFLICT
    status_code = 409


class Forbidden(BookingError):
    kind = ErrorKind.FORBIDDEN
    status_code = 403

    def __init__(self, message: str = "Not allowed"):
        super().__init__(message)


class AlreadyCancelled(BookingError):
    kind = ErrorKind.ALREADY_CANCELLED

    def __init__(self, message: str = "Booking is already cancelled"):
        super().__init__(message)


class CatalogError(BookingError):
    """Rejected slot catalog / resource type mutation."""
    kind = ErrorKind.CATALOG_INVALID


class ResourceTypeNotFound(BookingError):
    kind = ErrorKind.RESOURCE_TYPE_NOT_FOUND
    status_code = 404
