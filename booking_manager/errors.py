from __future__ import annotations


class BookingError(Exception):
    """Business-rule rejection of a booking update or cancellation."""

    kind = "BookingError"
    status_code = 400
    default_message = "Bad Request"

    def __init__(self, message: str | None = None, errors: dict[str, str] | None = None) -> None:
        self.message = message or self.default_message
        self.errors = dict(errors or {})
        super().__init__(self.message)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {"kind": self.kind, "message": self.message}
        if self.errors:
            payload["errors"] = dict(self.errors)
        return payload


class BookingNotFound(BookingError):
    kind = "NotFound"
    status_code = 404
    default_message = "Booking couldn't be found"


class Forbidden(BookingError):
    kind = "Forbidden"
    status_code = 403
    default_message = "Forbidden"


class PastEndImmutable(BookingError):
    kind = "PastEndImmutable"
    status_code = 403
    default_message = "Past bookings can't be modified"


class InvalidDateShape(BookingError):
    kind = "InvalidDateShape"
    status_code = 400
    default_message = "Bad Request"


class ScheduleConflict(BookingError):
    kind = "ScheduleConflict"
    status_code = 403
    default_message = "Sorry, this spot is already booked for the specified dates"


class InProgressImmutable(BookingError):
    kind = "InProgressImmutable"
    status_code = 403
    default_message = "Bookings that have been started can't be deleted"


class BookingStorageError(RuntimeError):
    pass
