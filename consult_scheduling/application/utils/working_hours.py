from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Iterable, Mapping

from consult_scheduling.application.exceptions import InvalidWindowError, ValidationError
from consult_scheduling.domain.entities.schedule import (
    WEEKDAYS,
    ConsultantSchedule,
    DaySchedule,
    SessionSettings,
)
from consult_scheduling.domain.entities.time_slot import TimeSlot, TimeWindow, format_hhmm


def generate_slots(
    window: TimeWindow,
    duration_minutes: int,
    buffer_minutes: int,
    day: date,
) -> list[TimeSlot]:
    """
    Cut a window into consecutive slots of `duration_minutes`.
    Each next slot starts `duration + buffer` after the previous one; a slot that
    would run past window.end is not produced.
    """
    if duration_minutes <= 0:
        raise ValidationError("Session duration must be positive")
    if buffer_minutes < 0:
        raise ValidationError("Buffer must not be negative")

    duration = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=duration_minutes + buffer_minutes)
    window_start = datetime.combine(day, window.start)
    window_end = datetime.combine(day, window.end)

    slots: list[TimeSlot] = []
    current = window_start
    while current + duration <= window_end:
        slots.append(TimeSlot(current, current + duration))
        current += step
    return slots


def compile_day(
    day_schedule: DaySchedule,
    settings: SessionSettings,
    day: date,
    duration_minutes: int | None = None,
) -> list[TimeSlot]:
    """Candidate slots for one calendar day. Disabled days yield nothing."""
    if not day_schedule.enabled:
        return []
    duration = duration_minutes or settings.duration_minutes
    slots: list[TimeSlot] = []
    for window in day_schedule.windows:
        slots.extend(generate_slots(window, duration, settings.buffer_minutes, day))
    slots.sort(key=lambda s: s.start)
    return slots


def preview_week(schedule: ConsultantSchedule) -> dict[str, list[str]]:
    """Slot labels generated for every weekday, independent of any date."""
    # any Monday works as a reference week
    reference_monday = date(2024, 1, 1)
    preview: dict[str, list[str]] = {}
    for offset, name in enumerate(WEEKDAYS):
        day = reference_monday + timedelta(days=offset)
        slots = compile_day(schedule.day(day), schedule.session_settings, day)
        preview[name] = [slot.label for slot in slots]
    return preview


def validate_day(name: str, day_schedule: DaySchedule) -> None:
    ordered = sorted(day_schedule.windows, key=lambda w: w.start)
    for window in ordered:
        if window.start >= window.end:
            raise InvalidWindowError(
                f"{name}: window {format_hhmm(window.start)}-{format_hhmm(window.end)} must start before it ends"
            )
    for previous, current in zip(ordered, ordered[1:]):
        if current.start < previous.end:
            raise InvalidWindowError(
                f"{name}: windows {format_hhmm(previous.start)}-{format_hhmm(previous.end)} "
                f"and {format_hhmm(current.start)}-{format_hhmm(current.end)} overlap"
            )


def validate_session_settings(settings: SessionSettings) -> None:
    if settings.duration_minutes <= 0:
        raise ValidationError("duration_minutes must be greater than 0")
    if settings.buffer_minutes < 0:
        raise ValidationError("buffer_minutes must be 0 or more")
    if settings.max_sessions_per_day < 1:
        raise ValidationError("max_sessions_per_day must be at least 1")


def validate_working_hours(working_hours: Mapping[str, DaySchedule]) -> None:
    for name, day_schedule in working_hours.items():
        if name not in WEEKDAYS:
            raise InvalidWindowError(f"Unknown weekday '{name}'")
        validate_day(name, day_schedule)


def parse_working_hours(raw: Mapping[str, Any]) -> dict[str, DaySchedule]:
    """
    Build DaySchedules from the configuration payload:
    {"monday": {"enabled": true, "slots": [{"start": "09:00", "end": "17:00"}]}, ...}
    Malformed times are reported as InvalidWindowError.
    """
    working_hours: dict[str, DaySchedule] = {}
    for name, day_raw in raw.items():
        key = str(name).lower()
        day_raw = day_raw or {}
        windows: list[TimeWindow] = []
        for slot in day_raw.get("slots") or []:
            try:
                windows.append(TimeWindow.from_strings(slot.get("start", ""), slot.get("end", "")))
            except ValueError as e:
                raise InvalidWindowError(f"{key}: {e}") from e
        working_hours[key] = DaySchedule(enabled=bool(day_raw.get("enabled", False)), windows=tuple(windows))
    return working_hours


def default_working_hours(start: str, end: str, weekdays: Iterable[str] = WEEKDAYS[:5]) -> dict[str, DaySchedule]:
    window = TimeWindow.from_strings(start, end)
    enabled = set(weekdays)
    return {
        name: DaySchedule(enabled=name in enabled, windows=(window,) if name in enabled else ())
        for name in WEEKDAYS
    }
