from __future__ import annotations

from datetime import datetime, timedelta

from .booking import BookingRecord, SpotRecord
from .errors import BookingNotFound, Forbidden, InProgressImmutable, InvalidDateShape, PastEndImmutable

# Same value as the proximity buffer, kept as its own setting.
MINIMUM_DURATION = timedelta(milliseconds=86_300_000)


def authorize_modify(actor_id: str, booking: BookingRecord | None) -> BookingRecord:
    if booking is None:
        raise BookingNotFound()
    if actor_id != booking.user_id:
        raise Forbidden()
    return booking


def authorize_cancel(actor_id: str, booking: BookingRecord | None, spot: SpotRecord | None) -> BookingRecord:
    """Allow the booking holder or the owner of the booked spot.

    An unknown spot leaves only the holder allowed.
    """
    if booking is None:
        raise BookingNotFound()
    if actor_id == booking.user_id:
        return booking
    if spot is not None and actor_id == spot.owner_id:
        return booking
    raise Forbidden()


def parse_date_fields(values: dict[str, object]) -> dict[str, datetime]:
    """Parse named ISO 8601 inputs into naive datetimes.

    Offset-aware values are rejected: the clock and stored bookings are naive.
    All bad fields are reported together in one ``InvalidDateShape``.
    """
    parsed: dict[str, datetime] = {}
    errors: dict[str, str] = {}
    for field, value in values.items():
        try:
            instant = datetime.fromisoformat(str(value if value is not None else "").strip())
        except ValueError:
            errors[field] = f"{field} must be an ISO 8601 date"
            continue
        if instant.tzinfo is not None:
            errors[field] = f"{field} must be an ISO 8601 date without offset"
            continue
        parsed[field] = instant
    if errors:
        raise InvalidDateShape(errors=errors)
    return parsed


def validate_date_shape(
    start: datetime,
    end: datetime,
    now: datetime,
    minimum_duration: timedelta = MINIMUM_DURATION,
) -> None:
    errors: dict[str, str] = {}
    if start < now:
        errors["start"] = "startDate cannot be in the past"
    if end < now or end <= start + minimum_duration:
        errors["end"] = "endDate cannot be on or before startDate"
    if errors:
        raise InvalidDateShape(errors=errors)


def check_not_past_end(booking: BookingRecord, now: datetime) -> None:
    if booking.end < now:
        raise PastEndImmutable()


def check_not_in_progress(booking: BookingRecord, now: datetime) -> None:
    if booking.start <= now <= booking.end:
        raise InProgressImmutable()
