import unittest
from datetime import datetime, timedelta

from booking_manager import (
    MINIMUM_DURATION,
    PROXIMITY_BUFFER_MS,
    BookingNotFound,
    BookingRecord,
    Forbidden,
    InProgressImmutable,
    InvalidDateShape,
    PastEndImmutable,
    SpotRecord,
    authorize_cancel,
    authorize_modify,
    check_not_in_progress,
    check_not_past_end,
    parse_date_fields,
    validate_date_shape,
)

NOW = datetime(2026, 3, 1, 12, 0)


def _booking(start: datetime, end: datetime) -> BookingRecord:
    return BookingRecord(
        booking_id="b1",
        spot_id="spot-x",
        user_id="holder",
        start=start,
        end=end,
        created_at=NOW,
        updated_at=NOW,
    )


class TestAuthorization(unittest.TestCase):
    def setUp(self) -> None:
        self.booking = _booking(datetime(2026, 3, 10), datetime(2026, 3, 15))
        self.spot = SpotRecord(spot_id="spot-x", owner_id="owner")

    def test_modify_allows_holder(self) -> None:
        self.assertIs(authorize_modify("holder", self.booking), self.booking)

    def test_modify_rejects_spot_owner(self) -> None:
        with self.assertRaises(Forbidden):
            authorize_modify("owner", self.booking)

    def test_modify_missing_booking_is_not_found(self) -> None:
        with self.assertRaises(BookingNotFound):
            authorize_modify("holder", None)

    def test_cancel_allows_holder_and_spot_owner(self) -> None:
        self.assertIs(authorize_cancel("holder", self.booking, self.spot), self.booking)
        self.assertIs(authorize_cancel("owner", self.booking, self.spot), self.booking)

    def test_cancel_rejects_stranger(self) -> None:
        with self.assertRaises(Forbidden):
            authorize_cancel("stranger", self.booking, self.spot)

    def test_cancel_without_spot_only_allows_holder(self) -> None:
        self.assertIs(authorize_cancel("holder", self.booking, None), self.booking)
        with self.assertRaises(Forbidden):
            authorize_cancel("owner", self.booking, None)

    def test_cancel_missing_booking_is_not_found(self) -> None:
        with self.assertRaises(BookingNotFound):
            authorize_cancel("owner", None, self.spot)


class TestParseDateFields(unittest.TestCase):
    def test_parses_naive_iso_dates(self) -> None:
        parsed = parse_date_fields({"start_iso": "2026-03-20", "end_iso": "2026-03-25T10:30:00"})

        self.assertEqual(parsed, {"start_iso": datetime(2026, 3, 20), "end_iso": datetime(2026, 3, 25, 10, 30)})

    def test_collects_malformed_and_missing_fields(self) -> None:
        with self.assertRaises(InvalidDateShape) as context:
            parse_date_fields({"start_iso": "next tuesday", "end_iso": None})

        self.assertEqual(
            context.exception.errors,
            {
                "start_iso": "start_iso must be an ISO 8601 date",
                "end_iso": "end_iso must be an ISO 8601 date",
            },
        )

    def test_rejects_offset_aware_dates(self) -> None:
        with self.assertRaises(InvalidDateShape) as context:
            parse_date_fields({"startDate": "2026-03-20T00:00:00+00:00", "endDate": "2026-03-25"})

        self.assertEqual(
            context.exception.errors,
            {"startDate": "startDate must be an ISO 8601 date without offset"},
        )


class TestDateShape(unittest.TestCase):
    def test_accepts_future_range_longer_than_minimum(self) -> None:
        validate_date_shape(datetime(2026, 3, 10), datetime(2026, 3, 12), NOW)

    def test_rejects_start_in_the_past(self) -> None:
        with self.assertRaises(InvalidDateShape) as context:
            validate_date_shape(NOW - timedelta(minutes=1), datetime(2026, 3, 12), NOW)

        self.assertEqual(context.exception.errors, {"start": "startDate cannot be in the past"})

    def test_rejects_end_before_start(self) -> None:
        with self.assertRaises(InvalidDateShape) as context:
            validate_date_shape(datetime(2026, 3, 12), datetime(2026, 3, 10), NOW)

        self.assertEqual(context.exception.errors, {"end": "endDate cannot be on or before startDate"})

    def test_collects_both_field_errors(self) -> None:
        with self.assertRaises(InvalidDateShape) as context:
            validate_date_shape(datetime(2026, 2, 1), datetime(2026, 2, 2), NOW)

        self.assertEqual(set(context.exception.errors), {"start", "end"})

    def test_end_exactly_at_minimum_duration_is_rejected(self) -> None:
        start = datetime(2026, 3, 10)
        with self.assertRaises(InvalidDateShape):
            validate_date_shape(start, start + timedelta(milliseconds=PROXIMITY_BUFFER_MS), NOW)

    def test_end_one_millisecond_past_minimum_duration_is_accepted(self) -> None:
        start = datetime(2026, 3, 10)
        validate_date_shape(start, start + timedelta(milliseconds=PROXIMITY_BUFFER_MS + 1), NOW)

    def test_minimum_duration_is_configurable(self) -> None:
        start = datetime(2026, 3, 10)
        validate_date_shape(start, start + timedelta(hours=2), NOW, minimum_duration=timedelta(hours=1))
        self.assertEqual(MINIMUM_DURATION, timedelta(milliseconds=86_300_000))


class TestTimingChecks(unittest.TestCase):
    def test_past_end_is_immutable(self) -> None:
        with self.assertRaises(PastEndImmutable):
            check_not_past_end(_booking(datetime(2026, 2, 20), datetime(2026, 2, 25)), NOW)

    def test_end_equal_to_now_is_still_editable(self) -> None:
        check_not_past_end(_booking(datetime(2026, 2, 20), NOW), NOW)

    def test_in_progress_cannot_be_cancelled(self) -> None:
        with self.assertRaises(InProgressImmutable):
            check_not_in_progress(_booking(datetime(2026, 2, 28), datetime(2026, 3, 3)), NOW)

    def test_in_progress_bounds_are_inclusive(self) -> None:
        with self.assertRaises(InProgressImmutable):
            check_not_in_progress(_booking(NOW, datetime(2026, 3, 3)), NOW)
        with self.assertRaises(InProgressImmutable):
            check_not_in_progress(_booking(datetime(2026, 2, 20), NOW), NOW)

    def test_future_and_finished_bookings_can_be_cancelled(self) -> None:
        check_not_in_progress(_booking(datetime(2026, 3, 10), datetime(2026, 3, 15)), NOW)
        check_not_in_progress(_booking(datetime(2026, 2, 10), datetime(2026, 2, 15)), NOW)


if __name__ == "__main__":
    unittest.main()
