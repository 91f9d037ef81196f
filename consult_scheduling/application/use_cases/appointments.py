from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date, datetime

from consult_scheduling.application.exceptions import NotFoundError, SlotUnavailableError, ValidationError
from consult_scheduling.application.ports.appointment_store import AppointmentStorePort
from consult_scheduling.application.ports.clock import ClockPort
from consult_scheduling.application.use_cases.reschedule import RescheduleUseCase
from consult_scheduling.application.utils.conflicts import find_conflicts
from consult_scheduling.domain.entities.appointment import Appointment, AppointmentStatus
from consult_scheduling.domain.entities.payment import PaymentConfirmation
from consult_scheduling.domain.entities.time_slot import TimeSlot


class AppointmentsUseCase:
    """Direct creation by admins/consultants and later edits. Client bookings go through holds."""

    def __init__(
        self,
        appointments: AppointmentStorePort,
        reschedule: RescheduleUseCase,
        clock: ClockPort,
    ) -> None:
        self._appointments = appointments
        self._reschedule = reschedule
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def create(
        self,
        consultant_id: str,
        client_id: str,
        start_at: datetime,
        end_at: datetime,
        status: AppointmentStatus = AppointmentStatus.UPCOMING,
        category: str = "General",
        session: str = "Video Call",
        reason: str = "",
        notes: str = "",
        fee: float = 0.0,
        payment: PaymentConfirmation | None = None,
    ) -> Appointment:
        if not consultant_id or not client_id:
            raise ValidationError("client and consultant are required")
        if start_at >= end_at:
            raise ValidationError("Invalid time range: startAt must be before endAt")
        now = self._clock.now()
        if start_at <= now:
            raise ValidationError("Cannot book appointments in the past")

        slot = TimeSlot(start_at, end_at)
        with self._appointments.write_lock():
            if status != AppointmentStatus.CANCELLED:
                self._ensure_free(slot, consultant_id, client_id)
            appointment = self._appointments.add(
                Appointment(
                    id=uuid.uuid4().hex,
                    consultant_id=consultant_id,
                    client_id=client_id,
                    start_at=start_at,
                    end_at=end_at,
                    status=status,
                    reason=reason or "",
                    notes=notes or "",
                    fee=fee or 0.0,
                    category=category or "General",
                    session=session or "Video Call",
                    payment=payment,
                    created_at=now,
                    updated_at=now,
                )
            )

        self._logger.info(
            "Appointment created",
            extra={"appointment_id": appointment.id, "consultant_id": consultant_id, "client_id": client_id},
        )
        return appointment

    def get(self, appointment_id: str) -> Appointment:
        appointment = self._appointments.get(appointment_id)
        if appointment is None:
            raise NotFoundError(f"Appointment {appointment_id} not found")
        return appointment

    def list_for_consultant(self, consultant_id: str, day: date | None = None) -> list[Appointment]:
        return sorted(self._appointments.list_for_consultant(consultant_id, day), key=lambda a: a.start_at)

    def update(
        self,
        appointment_id: str,
        start_at: datetime | None = None,
        end_at: datetime | None = None,
        status: AppointmentStatus | None = None,
        reason: str | None = None,
        notes: str | None = None,
        fee: float | None = None,
    ) -> Appointment:
        """
        Partial update. A change of start/end is a reschedule and is validated the same way;
        bringing a cancelled appointment back to Upcoming is conflict-checked as well.
        """
        if fee is not None and fee < 0:
            raise ValidationError("fee must be 0 or more")

        with self._appointments.write_lock():
            current = self.get(appointment_id)
            if start_at is not None or end_at is not None:
                # the move is the last step that can fail
                current = self._reschedule.move(
                    appointment_id,
                    TimeSlot(start_at or current.start_at, end_at or current.end_at),
                )
            elif status == AppointmentStatus.UPCOMING and not current.is_upcoming:
                self._ensure_free(current.slot, current.consultant_id, current.client_id, exclude_id=current.id)

            changes: dict[str, object] = {}
            if status is not None:
                changes["status"] = status
            if reason is not None:
                changes["reason"] = reason
            if notes is not None:
                changes["notes"] = notes
            if fee is not None:
                changes["fee"] = fee
            if not changes:
                return current

            updated = replace(current, updated_at=self._clock.now(), **changes)
            self._appointments.update(updated)

        self._logger.info(
            "Appointment updated",
            extra={"appointment_id": appointment_id, "status": updated.status.value},
        )
        return updated

    def cancel(self, appointment_id: str) -> Appointment:
        return self.update(appointment_id, status=AppointmentStatus.CANCELLED)

    def complete_past_appointments(self) -> int:
        """Mark Upcoming appointments whose end time has passed as Completed."""
        now = self._clock.now()
        completed = 0
        with self._appointments.write_lock():
            for appointment in self._appointments.list_all():
                if appointment.is_upcoming and appointment.end_at <= now:
                    self._appointments.update(
                        replace(appointment, status=AppointmentStatus.COMPLETED, updated_at=now)
                    )
                    completed += 1
        if completed:
            self._logger.info("Auto-completed past appointments", extra={"reason": f"{completed} completed"})
        return completed

    def _ensure_free(
        self,
        slot: TimeSlot,
        consultant_id: str,
        client_id: str,
        exclude_id: str | None = None,
    ) -> None:
        # not filtered by day: intervals may cross midnight
        consultant_busy = [a for a in self._appointments.list_for_consultant(consultant_id) if not a.is_cancelled]
        client_busy = [a for a in self._appointments.list_for_client(client_id) if a.is_upcoming]
        if find_conflicts(slot, consultant_busy, exclude_id) or find_conflicts(slot, client_busy, exclude_id):
            raise SlotUnavailableError("Time slot not available for this consultant")
