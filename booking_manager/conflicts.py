from __future__ import annotations

from datetime import timedelta
from typing import Iterable

from .booking import BookingRecord
from .interval import PROXIMITY_BUFFER, Interval

START_CONFLICT_MESSAGE = "Start date conflicts with an existing booking"
END_CONFLICT_MESSAGE = "End date conflicts with an existing booking"

ConflictReport = dict[str, str]


def _others(bookings: Iterable[BookingRecord], exclude_id: str | None) -> list[BookingRecord]:
    return [booking for booking in bookings if booking.booking_id != exclude_id]


def buffered_conflicts(
    candidate: Interval,
    exclude_id: str | None,
    bookings: Iterable[BookingRecord],
    buffer: timedelta = PROXIMITY_BUFFER,
) -> ConflictReport:
    """Flag candidate boundaries that land within ``buffer`` of the same boundary of another booking."""
    report: ConflictReport = {}
    for booking in _others(bookings, exclude_id):
        existing = booking.interval
        if candidate.start_near(existing, buffer):
            report["start"] = START_CONFLICT_MESSAGE
        if candidate.end_near(existing, buffer):
            report["end"] = END_CONFLICT_MESSAGE
    return report


def enclosure_conflicts(
    candidate: Interval,
    exclude_id: str | None,
    bookings: Iterable[BookingRecord],
) -> ConflictReport:
    """Flag both fields when another booking sits entirely inside the candidate range."""
    report: ConflictReport = {}
    for booking in _others(bookings, exclude_id):
        if candidate.fully_contains(booking.interval):
            report["start"] = START_CONFLICT_MESSAGE
            report["end"] = END_CONFLICT_MESSAGE
    return report


def point_conflicts(
    candidate: Interval,
    exclude_id: str | None,
    bookings: Iterable[BookingRecord],
) -> ConflictReport:
    report: ConflictReport = {}
    for booking in _others(bookings, exclude_id):
        existing = booking.interval
        if existing.contains(candidate.start):
            report["start"] = START_CONFLICT_MESSAGE
        if existing.contains(candidate.end):
            report["end"] = END_CONFLICT_MESSAGE
    return report


def detect_conflicts(
    candidate: Interval,
    exclude_id: str | None,
    bookings: Iterable[BookingRecord],
    buffer: timedelta = PROXIMITY_BUFFER,
) -> ConflictReport:
    """Run every conflict pass and merge the field reports into one."""
    bookings = list(bookings)
    report: ConflictReport = {}
    report.update(buffered_conflicts(candidate, exclude_id, bookings, buffer))
    report.update(enclosure_conflicts(candidate, exclude_id, bookings))
    report.update(point_conflicts(candidate, exclude_id, bookings))
    return report
