from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any
import shutil
from uuid import uuid4

import yaml

from .booking import BookingRecord, SpotRecord
from .errors import BookingStorageError

EVENT_LOG_FILENAME = "booking_events.yaml"


class YamlListStore:
    """A YAML file holding a list of mappings, plus the shared event log beside it.

    Spot and booking repositories subclass this with their own ``filename``
    and share the list read/write, corrupt-file recovery and the single
    ``booking_events.yaml`` log under the same ``base_dir``.
    """

    filename = "records.yaml"

    def __init__(self, base_dir: str | Path = "data") -> None:
        self.base_dir = Path(base_dir)
        self.data_file = self.base_dir / self.filename
        self.log_file = self.base_dir / EVENT_LOG_FILENAME
        self._ensure_files()

    def _ensure_files(self) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        for path in (self.data_file, self.log_file):
            if not path.exists():
                path.write_text("[]\n", encoding="utf-8")

    def _read_yaml_list(self, path: Path) -> list[dict[str, Any]]:
        try:
            payload = yaml.safe_load(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            path.write_text("[]\n", encoding="utf-8")
            return []
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as error:
            self._recover_corrupted_yaml(path, error)
            return []

        if payload is None:
            return []
        if not isinstance(payload, list):
            self._recover_corrupted_yaml(path, ValueError("top-level YAML is not a list"))
            return []

        sanitized: list[dict[str, Any]] = []
        for index, row in enumerate(payload):
            if isinstance(row, dict):
                sanitized.append(row)
            else:
                self.log_event(
                    "YAML_ROW_SKIPPED",
                    {
                        "file": str(path.name),
                        "index": index,
                        "reason": "row is not a mapping",
                    },
                )
        return sanitized

    def _write_yaml_list(self, path: Path, rows: list[dict[str, Any]]) -> None:
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            temp_path.write_text(yaml.safe_dump(rows, allow_unicode=True, sort_keys=False), encoding="utf-8")
            temp_path.replace(path)
        except OSError as error:
            raise BookingStorageError(f"Failed to write YAML file: {path}") from error
        finally:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)

    def _recover_corrupted_yaml(self, path: Path, error: Exception) -> None:
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
        backup_path = path.with_name(f"{path.stem}.corrupt.{timestamp}{path.suffix}")
        try:
            if path.exists():
                shutil.copy2(path, backup_path)
        except OSError:
            pass

        path.write_text("[]\n", encoding="utf-8")
        if path != self.log_file:
            self.log_event(
                "YAML_RECOVERED",
                {
                    "file": str(path.name),
                    "backup": str(backup_path.name),
                    "reason": str(error),
                },
            )

    def log_event(self, event_type: str, payload: dict[str, Any], event_time: datetime | None = None) -> None:
        timestamp = (event_time or datetime.now()).isoformat(timespec="seconds")
        events = self._read_yaml_list(self.log_file)
        events.append({"event_time": timestamp, "event_type": event_type, "payload": payload})
        self._write_yaml_list(self.log_file, events)

    def get_events(self) -> list[dict[str, Any]]:
        return self._read_yaml_list(self.log_file)


class SpotYamlRepository(YamlListStore):
    filename = "spots.yaml"

    def get(self, spot_id: str) -> SpotRecord | None:
        for row in self._read_yaml_list(self.data_file):
            if str(row.get("spot_id")) == spot_id:
                return SpotRecord.from_dict(row)
        return None

    def add_spot(self, owner_id: str, spot_id: str | None = None, now: datetime | None = None) -> SpotRecord:
        owner_id = _normalize_id(owner_id, "owner_id")
        record = SpotRecord(spot_id=spot_id or uuid4().hex, owner_id=owner_id)

        rows = self._read_yaml_list(self.data_file)
        if any(str(row.get("spot_id")) == record.spot_id for row in rows):
            raise ValueError("spot_id already exists")
        rows.append(record.to_dict())
        self._write_yaml_list(self.data_file, rows)

        self.log_event("SPOT_CREATED", record.to_dict(), now)
        return record


class BookingYamlRepository(YamlListStore):
    filename = "bookings.yaml"

    def get_bookings(self) -> list[BookingRecord]:
        rows = self._read_yaml_list(self.data_file)
        return [BookingRecord.from_dict(row) for row in rows]

    def get(self, booking_id: str) -> BookingRecord | None:
        for record in self.get_bookings():
            if record.booking_id == booking_id:
                return record
        return None

    def list_for_spot(self, spot_id: str, exclude_id: str | None = None) -> list[BookingRecord]:
        records = [
            record
            for record in self.get_bookings()
            if record.spot_id == spot_id and record.booking_id != exclude_id
        ]
        return sorted(records, key=lambda record: record.start)

    def list_for_user(self, user_id: str) -> list[BookingRecord]:
        records = [record for record in self.get_bookings() if record.user_id == user_id]
        return sorted(records, key=lambda record: (record.start, record.spot_id))

    def add_booking(
        self,
        spot_id: str,
        user_id: str,
        start: datetime,
        end: datetime,
        now: datetime | None = None,
    ) -> BookingRecord:
        """Store a new booking as given; gating of new bookings happens elsewhere."""
        effective_now = now or datetime.now()
        if start >= end:
            raise ValueError("Booking start time must be earlier than end time.")

        record = BookingRecord(
            booking_id=uuid4().hex,
            spot_id=_normalize_id(spot_id, "spot_id"),
            user_id=_normalize_id(user_id, "user_id"),
            start=start,
            end=end,
            created_at=effective_now,
            updated_at=effective_now,
        )
        rows = self._read_yaml_list(self.data_file)
        rows.append(record.to_dict())
        self._write_yaml_list(self.data_file, rows)

        self.log_event(
            "BOOKING_CREATED",
            {
                "booking_id": record.booking_id,
                "spot_id": record.spot_id,
                "user_id": record.user_id,
                "start": record.start.isoformat(timespec="seconds"),
                "end": record.end.isoformat(timespec="seconds"),
            },
            effective_now,
        )
        return record

    def save(self, booking: BookingRecord) -> None:
        rows = self._read_yaml_list(self.data_file)
        found_index = self._find_index(rows, booking.booking_id)
        if found_index < 0:
            rows.append(booking.to_dict())
        else:
            rows[found_index] = booking.to_dict()
        self._write_yaml_list(self.data_file, rows)

        self.log_event(
            "BOOKING_UPDATED",
            {
                "booking_id": booking.booking_id,
                "spot_id": booking.spot_id,
                "start": booking.start.isoformat(timespec="seconds"),
                "end": booking.end.isoformat(timespec="seconds"),
            },
            booking.updated_at,
        )

    def delete(self, booking: BookingRecord) -> None:
        rows = self._read_yaml_list(self.data_file)
        found_index = self._find_index(rows, booking.booking_id)
        if found_index < 0:
            raise ValueError("booking_id not found in bookings")

        rows.pop(found_index)
        self._write_yaml_list(self.data_file, rows)

        self.log_event(
            "BOOKING_DELETED",
            {
                "booking_id": booking.booking_id,
                "spot_id": booking.spot_id,
                "user_id": booking.user_id,
            },
        )

    @staticmethod
    def _find_index(rows: list[dict[str, Any]], booking_id: str) -> int:
        for index, row in enumerate(rows):
            if str(row.get("booking_id")) == booking_id:
                return index
        return -1


def _normalize_id(value: str | None, field_name: str) -> str:
    if value is None:
        raise ValueError(f"{field_name} must not be None")

    normalized = str(value).strip()
    if not normalized:
        raise ValueError(f"{field_name} must not be empty")
    return normalized
