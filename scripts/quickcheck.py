from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path
import traceback

from booking_manager import (
    BookingService,
    BookingYamlRepository,
    CancelRequest,
    ScheduleConflict,
    SpotYamlRepository,
    UpdateRequest,
)


def main() -> int:
    print("[INFO] Booking Manager Quick Check")

    data_dir = Path("data")
    bookings = BookingYamlRepository(data_dir)
    spots = SpotYamlRepository(data_dir)
    service = BookingService(bookings, spots, on_event=bookings.log_event)

    now = datetime.now().replace(microsecond=0)
    spot = spots.add_spot("quickcheck-owner", now=now)
    first = bookings.add_booking(spot.spot_id, "quickcheck-guest", now + timedelta(days=10), now + timedelta(days=15), now=now)
    second = bookings.add_booking(spot.spot_id, "quickcheck-guest", now + timedelta(days=20), now + timedelta(days=23), now=now)
    print(f"[OK] Seeded spot {spot.spot_id} with 2 bookings")

    try:
        service.update_booking_dates(
            UpdateRequest("quickcheck-guest", second.booking_id, now + timedelta(days=9, hours=12), now + timedelta(days=14)),
        )
        print("[ERROR] Expected a schedule conflict.")
        return 1
    except ScheduleConflict as error:
        print(f"[OK] Conflict detected: {error.message} {error.errors}")

    moved = service.update_booking_dates(
        UpdateRequest("quickcheck-guest", second.booking_id, now + timedelta(days=25), now + timedelta(days=28)),
    )
    print(f"[OK] Moved booking to {moved.start.isoformat()}~{moved.end.isoformat()}")

    service.cancel_booking(CancelRequest("quickcheck-owner", first.booking_id))
    service.cancel_booking(CancelRequest("quickcheck-guest", second.booking_id))
    print(f"[OK] Remaining bookings for spot: {len(bookings.list_for_spot(spot.spot_id))}")
    print(f"[OK] Event Log YAML: {bookings.log_file.resolve()}")

    print("[DONE] Quick check completed successfully.")
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except Exception:
        print("[ERROR] Quick check failed.")
        traceback.print_exc()
        raise SystemExit(1)
