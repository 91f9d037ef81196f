from __future__ import annotations

from typing import Iterable

from consult_scheduling.domain.entities.appointment import Appointment
from consult_scheduling.domain.entities.time_slot import TimeSlot


def overlaps(a: TimeSlot, b: TimeSlot) -> bool:
    """Half-open overlap: a slot ending exactly when another begins is not a conflict."""
    return a.start < b.end and b.start < a.end


def find_conflicts(
    candidate: TimeSlot,
    appointments: Iterable[Appointment],
    exclude_id: str | None = None,
) -> list[Appointment]:
    return [
        appointment
        for appointment in appointments
        if appointment.id != exclude_id and overlaps(candidate, appointment.slot)
    ]


def has_conflict(
    candidate: TimeSlot,
    appointments: Iterable[Appointment],
    exclude_id: str | None = None,
) -> bool:
    return bool(find_conflicts(candidate, appointments, exclude_id))


def without_overlaps(candidates: Iterable[TimeSlot], busy: Iterable[TimeSlot]) -> list[TimeSlot]:
    """Candidates that overlap none of the busy intervals, order preserved."""
    busy = list(busy)
    return [slot for slot in candidates if not any(overlaps(slot, b) for b in busy)]
