from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date

from consult_scheduling.application.exceptions import NotFoundError, SlotUnavailableError, ValidationError
from consult_scheduling.application.ports.appointment_store import AppointmentStorePort
from consult_scheduling.application.ports.clock import ClockPort
from consult_scheduling.application.utils.conflicts import find_conflicts
from consult_scheduling.domain.entities.appointment import Appointment, AppointmentStatus
from consult_scheduling.domain.entities.time_slot import TimeSlot


class RescheduleUseCase:
    """Moves an existing appointment to a new interval. No hold, no payment step."""

    def __init__(self, appointments: AppointmentStorePort, clock: ClockPort) -> None:
        self._appointments = appointments
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def reschedule(self, appointment_id: str, day: date, slot_label: str) -> Appointment:
        try:
            slot = TimeSlot.from_label(day, slot_label)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        return self.move(appointment_id, slot)

    def move(self, appointment_id: str, slot: TimeSlot) -> Appointment:
        if slot.start >= slot.end:
            raise ValidationError("Invalid time range: start must be before end")
        if slot.start <= self._clock.now():
            raise ValidationError("Cannot reschedule into the past")

        with self._appointments.write_lock():
            current = self._appointments.get(appointment_id)
            if current is None:
                raise NotFoundError(f"Appointment {appointment_id} not found")

            day = slot.start.date()
            consultant_upcoming = [
                a for a in self._appointments.list_for_consultant(current.consultant_id) if a.is_upcoming
            ]
            client_upcoming = [a for a in self._appointments.list_for_client(current.client_id) if a.is_upcoming]
            conflicts = find_conflicts(slot, consultant_upcoming, exclude_id=current.id) + find_conflicts(
                slot, client_upcoming, exclude_id=current.id
            )
            if conflicts:
                self._logger.info(
                    "Reschedule rejected",
                    extra={
                        "appointment_id": appointment_id,
                        "consultant_id": current.consultant_id,
                        "reason": f"conflicts with {', '.join(sorted({a.id for a in conflicts}))}",
                    },
                )
                raise SlotUnavailableError(f"Slot {slot.label} on {day.isoformat()} conflicts with another appointment")

            moved = replace(
                current,
                start_at=slot.start,
                end_at=slot.end,
                status=AppointmentStatus.UPCOMING,
                updated_at=self._clock.now(),
            )
            self._appointments.update(moved)

        self._logger.info(
            "Appointment rescheduled",
            extra={"appointment_id": appointment_id, "consultant_id": moved.consultant_id, "reason": slot.label},
        )
        return moved
