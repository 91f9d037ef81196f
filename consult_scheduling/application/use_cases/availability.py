from __future__ import annotations

import logging
from datetime import date
from enum import Enum

from consult_scheduling.application.exceptions import ValidationError
from consult_scheduling.application.ports.appointment_store import AppointmentStorePort
from consult_scheduling.application.ports.clock import ClockPort
from consult_scheduling.application.ports.hold_store import HoldStorePort
from consult_scheduling.application.ports.schedule_store import ScheduleStorePort
from consult_scheduling.application.utils.conflicts import without_overlaps
from consult_scheduling.application.utils.working_hours import compile_day
from consult_scheduling.domain.entities.appointment import Appointment
from consult_scheduling.domain.entities.booking_hold import Held
from consult_scheduling.domain.entities.schedule import ConsultantSchedule, DaySchedule, SessionSettings
from consult_scheduling.domain.entities.time_slot import TimeSlot


class ActorRole(str, Enum):
    CLIENT = "client"
    CONSULTANT = "consultant"


class SlotAvailabilityUseCase:
    def __init__(
        self,
        schedules: ScheduleStorePort,
        appointments: AppointmentStorePort,
        holds: HoldStorePort,
        clock: ClockPort,
        default_working_hours: dict[str, DaySchedule],
        default_session_settings: SessionSettings,
    ) -> None:
        self._schedules = schedules
        self._appointments = appointments
        self._holds = holds
        self._clock = clock
        self._default_working_hours = default_working_hours
        self._default_session_settings = default_session_settings
        self._logger = logging.getLogger(__name__)

    def schedule_for(self, consultant_id: str) -> ConsultantSchedule:
        schedule = self._schedules.get(consultant_id)
        if schedule is not None:
            return schedule
        return ConsultantSchedule(
            consultant_id=consultant_id,
            working_hours=dict(self._default_working_hours),
            session_settings=self._default_session_settings,
        )

    def resolve(
        self,
        consultant_id: str,
        day: date,
        duration_minutes: int | None = None,
        client_id: str | None = None,
    ) -> list[TimeSlot]:
        """
        Bookable slots for a consultant on `day`.
        The result is always a subset of the compiled candidates; an empty list means
        nothing is left, not an error. Active holds of `client_id` itself stay visible
        to that client so a pending booking can be retried.
        """
        schedule = self.schedule_for(consultant_id)
        if schedule.is_off(day):
            return []
        candidates = compile_day(schedule.day(day), schedule.session_settings, day, duration_minutes)
        if not candidates:
            return []

        booked = [a for a in self._appointments.list_for_consultant(consultant_id, day) if not a.is_cancelled]
        if self._sessions_starting_on(booked, day) >= schedule.session_settings.max_sessions_per_day:
            self._logger.info(
                "Consultant day is full",
                extra={"consultant_id": consultant_id, "reason": f"{len(booked)} sessions on {day.isoformat()}"},
            )
            return []

        now = self._clock.now()
        busy = [a.slot for a in booked]
        busy.extend(
            hold.slot
            for hold in self._holds.list_for_consultant(consultant_id, day)
            if isinstance(hold, Held) and hold.is_active(now) and hold.request.client_id != client_id
        )

        free = without_overlaps(candidates, busy)
        free = [slot for slot in free if slot.start > now]
        free.sort(key=lambda s: s.start)
        return free

    def client_conflict_filter(self, client_id: str, slots: list[TimeSlot], day: date) -> list[TimeSlot]:
        """Drop slots that would double-book the client with any consultant."""
        busy = [a.slot for a in self._appointments.list_for_client(client_id, day) if a.is_upcoming]
        return without_overlaps(slots, busy)

    def resolve_for_actor(
        self,
        actor_role: ActorRole | str,
        actor_id: str,
        counterparty_id: str | None,
        day: date,
        duration_minutes: int | None = None,
    ) -> list[TimeSlot]:
        try:
            role = ActorRole(actor_role)
        except ValueError as e:
            raise ValidationError(f"Unsupported actor role '{actor_role}'") from e

        if role == ActorRole.CLIENT:
            if not counterparty_id:
                raise ValidationError("consultant is required")
            slots = self.resolve(counterparty_id, day, duration_minutes, client_id=actor_id)
            return self.client_conflict_filter(actor_id, slots, day)

        slots = self.resolve(actor_id, day, duration_minutes, client_id=counterparty_id)
        if counterparty_id:
            slots = self.client_conflict_filter(counterparty_id, slots, day)
        return slots

    def get_available_slots(
        self,
        consultant_id: str,
        date_iso: str,
        duration_minutes: int | None = None,
        client_id: str | None = None,
    ) -> list[str]:
        try:
            day = date.fromisoformat(date_iso)
        except ValueError as e:
            raise ValidationError(f"Invalid date '{date_iso}', expected YYYY-MM-DD") from e
        return [slot.label for slot in self.resolve(consultant_id, day, duration_minutes, client_id)]

    def day_is_full(self, consultant_id: str, day: date) -> bool:
        limit = self.schedule_for(consultant_id).session_settings.max_sessions_per_day
        booked = [a for a in self._appointments.list_for_consultant(consultant_id, day) if not a.is_cancelled]
        return self._sessions_starting_on(booked, day) >= limit

    @staticmethod
    def _sessions_starting_on(appointments: list[Appointment], day: date) -> int:
        # an appointment running past midnight counts toward the day it starts on
        return sum(1 for a in appointments if a.start_at.date() == day)
