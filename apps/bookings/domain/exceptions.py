"""
Booking Domain Errors

Every failure the booking workflow reports to its caller derives from
BookingError, so views and management commands can tell workflow
outcomes apart from programming errors.
"""


class BookingError(Exception):
    """Base class for booking workflow failures."""

    default_message = "Booking operation failed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BookingValidationError(BookingError):
    """Malformed input: empty required field, start >= end, unknown enum value."""

    default_message = "Invalid booking data."

    def __init__(self, message: str | None = None, *, field: str | None = None):
        super().__init__(message)
        self.field = field

    def as_dict(self) -> dict[str, list[str]]:
        return {self.field or "non_field_errors": [self.message]}


class BookingConflictError(BookingError):
    """Raised when a room is busy for the requested interval."""

    default_message = "The room is already booked for the selected time."


class BookingTransitionError(BookingError):
    """The requested status change is not legal from the current status."""

    default_message = "This status change is not allowed."


class BookingAuthorizationError(BookingError):
    """The actor's role or ownership does not permit the operation."""

    default_message = "You are not allowed to perform this action."


class BookingPersistenceError(BookingError):
    """The repository call itself failed. The caller decides whether to retry."""

    default_message = "Could not persist the booking. Please try again."


class BookingNotFoundError(BookingError):
    """The referenced booking no longer exists."""

    default_message = "Booking not found."
