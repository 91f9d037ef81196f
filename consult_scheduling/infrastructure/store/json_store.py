from __future__ import annotations

import json
import logging
import threading
import time
from contextlib import AbstractContextManager
from datetime import date
from pathlib import Path
from typing import Any

from consult_scheduling.application.exceptions import NotFoundError
from consult_scheduling.application.ports.appointment_store import AppointmentStorePort
from consult_scheduling.application.ports.hold_store import HoldStorePort
from consult_scheduling.application.ports.schedule_store import ScheduleStorePort
from consult_scheduling.domain.entities.appointment import Appointment
from consult_scheduling.domain.entities.booking_hold import StoredHold
from consult_scheduling.domain.entities.schedule import ConsultantSchedule
from consult_scheduling.infrastructure.store.serialization import (
    deserialize_appointment,
    deserialize_hold,
    deserialize_schedule,
    serialize_appointment,
    serialize_hold,
    serialize_schedule,
)

logger = logging.getLogger(__name__)


class _JsonCollection:
    """One JSON file holding a {id: record} mapping, rewritten atomically on every change."""

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self.lock = threading.RLock()

    def load(self) -> dict[str, dict[str, Any]]:
        if not self._file_path.exists():
            return {}
        with self.lock:
            try:
                with open(self._file_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except json.JSONDecodeError as e:
                # keep the damaged file so the next save does not erase its records
                backup_path = self._file_path.with_suffix(f".json.corrupt-{int(time.time())}")
                self._file_path.replace(backup_path)
                logger.error(
                    "Corrupt store file moved aside, starting empty",
                    extra={"error": str(e), "reason": str(backup_path)},
                )
                return {}
        return data.get("records", {}) if isinstance(data, dict) else {}

    def save(self, records: dict[str, dict[str, Any]]) -> None:
        temp_path = self._file_path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump({"version": 1, "records": records}, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._file_path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise

    def put(self, record_id: str, record: dict[str, Any]) -> None:
        with self.lock:
            records = self.load()
            records[record_id] = record
            self.save(records)


class JsonAppointmentStore(AppointmentStorePort):
    def __init__(self, data_dir: str = "./data/scheduling") -> None:
        self._collection = _JsonCollection(Path(data_dir) / "appointments.json")

    def get(self, appointment_id: str) -> Appointment | None:
        record = self._collection.load().get(appointment_id)
        return deserialize_appointment(record) if record else None

    def add(self, appointment: Appointment) -> Appointment:
        self._collection.put(appointment.id, serialize_appointment(appointment))
        return appointment

    def update(self, appointment: Appointment) -> Appointment:
        with self._collection.lock:
            if appointment.id not in self._collection.load():
                raise NotFoundError(f"Appointment {appointment.id} not found")
            self._collection.put(appointment.id, serialize_appointment(appointment))
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
        return [deserialize_appointment(record) for record in self._collection.load().values()]

    def write_lock(self) -> AbstractContextManager[None]:
        return self._collection.lock


class JsonHoldStore(HoldStorePort):
    def __init__(self, data_dir: str = "./data/scheduling") -> None:
        self._collection = _JsonCollection(Path(data_dir) / "holds.json")

    def get(self, hold_id: str) -> StoredHold | None:
        record = self._collection.load().get(hold_id)
        return deserialize_hold(record) if record else None

    def save(self, hold: StoredHold) -> None:
        self._collection.put(hold.hold_id, serialize_hold(hold))

    def list_for_consultant(self, consultant_id: str, day: date) -> list[StoredHold]:
        return [
            h for h in self.list_all()
            if h.request.consultant_id == consultant_id and h.slot.start.date() == day
        ]

    def list_all(self) -> list[StoredHold]:
        return [deserialize_hold(record) for record in self._collection.load().values()]


class JsonScheduleStore(ScheduleStorePort):
    def __init__(self, data_dir: str = "./data/scheduling") -> None:
        self._collection = _JsonCollection(Path(data_dir) / "schedules.json")

    def get(self, consultant_id: str) -> ConsultantSchedule | None:
        record = self._collection.load().get(consultant_id)
        return deserialize_schedule(record) if record else None

    def save(self, schedule: ConsultantSchedule) -> None:
        self._collection.put(schedule.consultant_id, serialize_schedule(schedule))
