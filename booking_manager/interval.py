from dataclasses import dataclass
from datetime import datetime, timedelta

PROXIMITY_BUFFER_MS = 86_300_000
PROXIMITY_BUFFER = timedelta(milliseconds=PROXIMITY_BUFFER_MS)


@dataclass(frozen=True)
class Interval:
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError("Interval start time must be earlier than end time.")

    def start_near(self, other: "Interval", buffer: timedelta = PROXIMITY_BUFFER) -> bool:
        return other.start - buffer <= self.start <= other.start + buffer

    def end_near(self, other: "Interval", buffer: timedelta = PROXIMITY_BUFFER) -> bool:
        return other.end - buffer <= self.end <= other.end + buffer

    def overlaps_buffered(self, other: "Interval", buffer: timedelta = PROXIMITY_BUFFER) -> bool:
        """Return True when either boundary lies within ``buffer`` of the matching boundary of ``other``.

        This is a proximity check, not geometric overlap: two back-to-back
        week-long intervals do not match, while two intervals starting
        on the same afternoon do, whatever their ends.
        """
        return self.start_near(other, buffer) or self.end_near(other, buffer)

    def fully_contains(self, other: "Interval") -> bool:
        return other.start >= self.start and other.end <= self.end

    def strictly_within(self, other: "Interval") -> bool:
        """Converse of ``fully_contains``; not used by the conflict passes, kept for callers."""
        return self.start >= other.start and self.end <= other.end

    def contains(self, instant: datetime) -> bool:
        """Return True if ``instant`` lies in ``[start, end]``, bounds included."""
        return self.start <= instant <= self.end
