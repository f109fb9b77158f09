from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .interval import Interval


@dataclass(frozen=True)
class BookingRecord:
    booking_id: str
    spot_id: str
    user_id: str
    start: datetime
    end: datetime
    created_at: datetime
    updated_at: datetime

    @property
    def interval(self) -> Interval:
        return Interval(self.start, self.end)

    def to_dict(self) -> dict[str, str]:
        return {
            "booking_id": self.booking_id,
            "spot_id": self.spot_id,
            "user_id": self.user_id,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "BookingRecord":
        return BookingRecord(
            booking_id=str(data["booking_id"]),
            spot_id=str(data["spot_id"]),
            user_id=str(data["user_id"]),
            start=datetime.fromisoformat(str(data["start"])),
            end=datetime.fromisoformat(str(data["end"])),
            created_at=datetime.fromisoformat(str(data["created_at"])),
            updated_at=datetime.fromisoformat(str(data["updated_at"])),
        )


@dataclass(frozen=True)
class SpotRecord:
    spot_id: str
    owner_id: str

    def to_dict(self) -> dict[str, str]:
        return {"spot_id": self.spot_id, "owner_id": self.owner_id}

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "SpotRecord":
        return SpotRecord(spot_id=str(data["spot_id"]), owner_id=str(data["owner_id"]))
