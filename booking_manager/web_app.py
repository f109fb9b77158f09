from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from flask import Flask, jsonify, request

from .booking import BookingRecord
from .errors import BookingError
from .gates import parse_date_fields
from .service import BookingPolicy, BookingService, CancelRequest, UpdateRequest
from .yaml_store import BookingYamlRepository, SpotYamlRepository

USER_HEADER = "X-User-Id"
# Core field name -> API field name.
FIELD_NAMES = {"start": "startDate", "end": "endDate"}


def create_app(
    data_dir: str | Path = "data",
    now_provider: Callable[[], datetime] | None = None,
    policy: BookingPolicy | None = None,
) -> Flask:
    app = Flask(__name__)
    bookings = BookingYamlRepository(data_dir)
    spots = SpotYamlRepository(data_dir)
    service = BookingService(
        bookings,
        spots,
        policy=policy,
        clock=now_provider or datetime.now,
        on_event=bookings.log_event,
    )
    app.extensions["booking_service"] = service

    def _current_user() -> str | None:
        user_id = str(request.headers.get(USER_HEADER, "")).strip()
        return user_id or None

    @app.errorhandler(BookingError)
    def handle_booking_error(error: BookingError) -> Any:
        payload: dict[str, Any] = {"message": error.message}
        if error.errors:
            payload["errors"] = {FIELD_NAMES.get(field, field): message for field, message in error.errors.items()}
        return jsonify(payload), error.status_code

    @app.get("/api/bookings/current")
    def get_current_bookings() -> Any:
        user_id = _current_user()
        if user_id is None:
            return jsonify({"message": "Authentication required"}), 401

        return jsonify({"Bookings": [_serialize_booking(record) for record in bookings.list_for_user(user_id)]})

    @app.put("/api/bookings/<booking_id>")
    def update_booking(booking_id: str) -> Any:
        user_id = _current_user()
        if user_id is None:
            return jsonify({"message": "Authentication required"}), 401

        payload = request.get_json(silent=True) or {}
        parsed = parse_date_fields({field: payload.get(field) for field in ("startDate", "endDate")})

        updated = service.update_booking_dates(
            UpdateRequest(
                actor_id=user_id,
                booking_id=booking_id,
                start=parsed["startDate"],
                end=parsed["endDate"],
            )
        )
        return jsonify(_serialize_booking(updated))

    @app.delete("/api/bookings/<booking_id>")
    def delete_booking(booking_id: str) -> Any:
        user_id = _current_user()
        if user_id is None:
            return jsonify({"message": "Authentication required"}), 401

        service.cancel_booking(CancelRequest(actor_id=user_id, booking_id=booking_id))
        return jsonify({"message": "Successfully deleted"})

    return app


def _serialize_booking(record: BookingRecord) -> dict[str, Any]:
    return {
        "id": record.booking_id,
        "spotId": record.spot_id,
        "userId": record.user_id,
        "startDate": record.start.isoformat(timespec="seconds"),
        "endDate": record.end.isoformat(timespec="seconds"),
        "createdAt": record.created_at.isoformat(timespec="seconds"),
        "updatedAt": record.updated_at.isoformat(timespec="seconds"),
    }


if __name__ == "__main__":
    app = create_app()
    app.run(host="127.0.0.1", port=5000, debug=False)
