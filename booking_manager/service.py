from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from threading import Lock
from typing import Any, Callable, Protocol

from .booking import BookingRecord, SpotRecord
from .conflicts import buffered_conflicts, enclosure_conflicts, point_conflicts
from .errors import BookingError, ScheduleConflict
from .gates import (
    MINIMUM_DURATION,
    authorize_cancel,
    authorize_modify,
    check_not_in_progress,
    check_not_past_end,
    validate_date_shape,
)
from .interval import PROXIMITY_BUFFER, Interval

EventHook = Callable[[str, dict[str, Any], datetime], None]


class BookingStore(Protocol):
    def get(self, booking_id: str) -> BookingRecord | None: ...

    def list_for_spot(self, spot_id: str, exclude_id: str | None = None) -> list[BookingRecord]: ...

    def save(self, booking: BookingRecord) -> None: ...

    def delete(self, booking: BookingRecord) -> None: ...


class SpotStore(Protocol):
    def get(self, spot_id: str) -> SpotRecord | None: ...


@dataclass(frozen=True)
class BookingPolicy:
    proximity_buffer: timedelta = PROXIMITY_BUFFER
    minimum_duration: timedelta = MINIMUM_DURATION


@dataclass(frozen=True)
class UpdateRequest:
    actor_id: str
    booking_id: str
    start: datetime
    end: datetime
    now: datetime | None = None


@dataclass(frozen=True)
class CancelRequest:
    actor_id: str
    booking_id: str
    now: datetime | None = None


class BookingService:
    """Gate and apply date changes and cancellations of existing bookings.

    Every check runs in a fixed order and the first failing check raises;
    the store is only written when all checks pass. Store errors are not
    caught here.
    """

    def __init__(
        self,
        bookings: BookingStore,
        spots: SpotStore,
        *,
        policy: BookingPolicy | None = None,
        clock: Callable[[], datetime] | None = None,
        on_event: EventHook | None = None,
    ) -> None:
        self.bookings = bookings
        self.spots = spots
        self.policy = policy or BookingPolicy()
        self._clock: Callable[[], datetime] = clock or datetime.now
        self._on_event = on_event
        self._lock = Lock()

    def update_booking_dates(self, request: UpdateRequest) -> BookingRecord:
        now = request.now or self._clock()
        try:
            with self._lock:
                current = authorize_modify(request.actor_id, self.bookings.get(request.booking_id))
                check_not_past_end(current, now)
                validate_date_shape(request.start, request.end, now, self.policy.minimum_duration)

                candidate = Interval(request.start, request.end)
                others = self.bookings.list_for_spot(current.spot_id, exclude_id=current.booking_id)
                for report in (
                    buffered_conflicts(candidate, current.booking_id, others, self.policy.proximity_buffer),
                    enclosure_conflicts(candidate, current.booking_id, others),
                    point_conflicts(candidate, current.booking_id, others),
                ):
                    if report:
                        raise ScheduleConflict(errors=report)

                updated = replace(current, start=request.start, end=request.end, updated_at=now)
                self.bookings.save(updated)
        except BookingError as error:
            self._emit(
                "BOOKING_UPDATE_REJECTED",
                {
                    "booking_id": request.booking_id,
                    "actor_id": request.actor_id,
                    "start": request.start.isoformat(timespec="seconds"),
                    "end": request.end.isoformat(timespec="seconds"),
                    **error.to_dict(),
                },
                now,
            )
            raise
        return updated

    def cancel_booking(self, request: CancelRequest) -> BookingRecord:
        now = request.now or self._clock()
        try:
            with self._lock:
                booking = self.bookings.get(request.booking_id)
                spot = self.spots.get(booking.spot_id) if booking is not None else None
                booking = authorize_cancel(request.actor_id, booking, spot)
                check_not_in_progress(booking, now)
                self.bookings.delete(booking)
        except BookingError as error:
            self._emit(
                "BOOKING_CANCEL_REJECTED",
                {"booking_id": request.booking_id, "actor_id": request.actor_id, **error.to_dict()},
                now,
            )
            raise
        return booking

    def _emit(self, event_type: str, payload: dict[str, Any], event_time: datetime) -> None:
        if self._on_event is not None:
            self._on_event(event_type, payload, event_time)
