from __future__ import annotations

from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from booking_manager import (
    BookingError,
    BookingService,
    BookingYamlRepository,
    CancelRequest,
    SpotYamlRepository,
    UpdateRequest,
    parse_date_fields,
)

mcp = FastMCP(
    "Booking MCP Server",
    instructions="Change dates of or cancel spot bookings stored by the booking_manager project.",
    json_response=True,
)

DATA_DIR = Path(__file__).parent / "data"
BOOKINGS = BookingYamlRepository(DATA_DIR)
SPOTS = SpotYamlRepository(DATA_DIR)
SERVICE = BookingService(BOOKINGS, SPOTS, on_event=BOOKINGS.log_event)


@mcp.tool()
def list_user_bookings(user_id: str) -> list[dict[str, str]]:
    """Return the bookings held by a user, earliest first."""
    return [record.to_dict() for record in BOOKINGS.list_for_user(user_id)]


@mcp.tool()
def update_booking_dates(actor_id: str, booking_id: str, start_iso: str, end_iso: str) -> dict[str, Any]:
    """Move a booking to new ISO timestamps on behalf of actor_id."""
    try:
        parsed = parse_date_fields({"start_iso": start_iso, "end_iso": end_iso})
        updated = SERVICE.update_booking_dates(
            UpdateRequest(actor_id, booking_id, parsed["start_iso"], parsed["end_iso"])
        )
    except BookingError as error:
        return {"ok": False, **error.to_dict()}
    return {"ok": True, "booking": updated.to_dict()}


@mcp.tool()
def cancel_booking(actor_id: str, booking_id: str) -> dict[str, Any]:
    """Cancel a booking on behalf of its holder or the spot owner."""
    try:
        deleted = SERVICE.cancel_booking(CancelRequest(actor_id, booking_id))
    except BookingError as error:
        return {"ok": False, **error.to_dict()}
    return {"ok": True, "booking": deleted.to_dict()}


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
