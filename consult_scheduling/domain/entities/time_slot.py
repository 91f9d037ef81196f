from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

_HHMM_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_hhmm(value: str) -> time:
    """Parse a 24h "HH:MM" string. Raises ValueError on anything else."""
    match = _HHMM_RE.match((value or "").strip())
    if not match:
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    return time(int(match.group(1)), int(match.group(2)))


def format_hhmm(value: time | datetime) -> str:
    return value.strftime("%H:%M")


@dataclass(frozen=True)
class TimeWindow:
    """Configured working range within one day (wall-clock)."""

    start: time
    end: time

    @classmethod
    def from_strings(cls, start: str, end: str) -> "TimeWindow":
        return cls(start=parse_hhmm(start), end=parse_hhmm(end))

    def on(self, day: date) -> "TimeSlot":
        return TimeSlot(datetime.combine(day, self.start), datetime.combine(day, self.end))

    def to_dict(self) -> dict[str, str]:
        return {"start": format_hhmm(self.start), "end": format_hhmm(self.end)}


@dataclass(frozen=True)
class TimeSlot:
    """Half-open interval [start, end) of naive local datetimes."""

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def label(self) -> str:
        return f"{format_hhmm(self.start)} - {format_hhmm(self.end)}"

    @classmethod
    def from_label(cls, day: date, label: str) -> "TimeSlot":
        """Build a slot from a "HH:MM - HH:MM" label on the given day."""
        parts = [p.strip() for p in (label or "").split("-")]
        if len(parts) != 2:
            raise ValueError(f"Invalid slot '{label}', expected 'HH:MM - HH:MM'")
        start = datetime.combine(day, parse_hhmm(parts[0]))
        end = datetime.combine(day, parse_hhmm(parts[1]))
        if start >= end:
            raise ValueError(f"Invalid slot '{label}': start must be before end")
        return cls(start=start, end=end)

    def __str__(self) -> str:
        return self.label
