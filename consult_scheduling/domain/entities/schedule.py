from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from consult_scheduling.domain.entities.time_slot import TimeWindow

WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


@dataclass(frozen=True)
class DaySchedule:
    enabled: bool = False
    windows: tuple[TimeWindow, ...] = ()


@dataclass(frozen=True)
class SessionSettings:
    duration_minutes: int = 60
    buffer_minutes: int = 0
    max_sessions_per_day: int = 8


@dataclass(frozen=True)
class TimeOff:
    start_date: date
    end_date: date  # inclusive
    reason: str = ""

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class ConsultantSchedule:
    consultant_id: str
    working_hours: dict[str, DaySchedule] = field(default_factory=dict)
    session_settings: SessionSettings = SessionSettings()
    time_off: tuple[TimeOff, ...] = ()

    def day(self, day: date) -> DaySchedule:
        return self.working_hours.get(weekday_name(day), DaySchedule())

    def is_off(self, day: date) -> bool:
        return any(period.covers(day) for period in self.time_off)
