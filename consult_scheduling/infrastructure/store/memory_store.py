from __future__ import annotations

import threading
from contextlib import AbstractContextManager
from datetime import date

from consult_scheduling.application.exceptions import NotFoundError
from consult_scheduling.application.ports.appointment_store import AppointmentStorePort
from consult_scheduling.application.ports.hold_store import HoldStorePort
from consult_scheduling.application.ports.schedule_store import ScheduleStorePort
from consult_scheduling.domain.entities.appointment import Appointment
from consult_scheduling.domain.entities.booking_hold import StoredHold
from consult_scheduling.domain.entities.schedule import ConsultantSchedule


class MemoryAppointmentStore(AppointmentStorePort):
    def __init__(self) -> None:
        self._appointments: dict[str, Appointment] = {}
        self._lock = threading.RLock()

    def get(self, appointment_id: str) -> Appointment | None:
        return self._appointments.get(appointment_id)

    def add(self, appointment: Appointment) -> Appointment:
        with self._lock:
            self._appointments[appointment.id] = appointment
        return appointment

    def update(self, appointment: Appointment) -> Appointment:
        with self._lock:
            if appointment.id not in self._appointments:
                raise NotFoundError(f"Appointment {appointment.id} not found")
            self._appointments[appointment.id] = appointment
        return appointment

    def list_for_consultant(self, consultant_id: str, day: date | None = None) -> list[Appointment]:
        return [
            a for a in self.list_all()
            if a.consultant_id == consultant_id and (day is None or a.touches_day(day))
        ]

    def list_for_client(self, client_id: str, day: date | None = None) -> list[Appointment]:
        return [
            a for a in self.list_all()
            if a.client_id == client_id and (day is None or a.touches_day(day))
        ]

    def list_all(self) -> list[Appointment]:
        with self._lock:
            return list(self._appointments.values())

    def write_lock(self) -> AbstractContextManager[None]:
        return self._lock


class MemoryHoldStore(HoldStorePort):
    def __init__(self) -> None:
        self._holds: dict[str, StoredHold] = {}
        self._lock = threading.Lock()

    def get(self, hold_id: str) -> StoredHold | None:
        return self._holds.get(hold_id)

    def save(self, hold: StoredHold) -> None:
        with self._lock:
            self._holds[hold.hold_id] = hold

    def list_for_consultant(self, consultant_id: str, day: date) -> list[StoredHold]:
        return [
            h for h in self.list_all()
            if h.request.consultant_id == consultant_id and h.slot.start.date() == day
        ]

    def list_all(self) -> list[StoredHold]:
        with self._lock:
            return list(self._holds.values())


class MemoryScheduleStore(ScheduleStorePort):
    def __init__(self) -> None:
        self._schedules: dict[str, ConsultantSchedule] = {}

    def get(self, consultant_id: str) -> ConsultantSchedule | None:
        return self._schedules.get(consultant_id)

    def save(self, schedule: ConsultantSchedule) -> None:
        self._schedules[schedule.consultant_id] = schedule
