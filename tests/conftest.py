"""
Shared wiring for tests: an in-memory engine with a fixed clock.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime

import pytest

from consult_scheduling.application.use_cases.appointments import AppointmentsUseCase
from consult_scheduling.application.use_cases.availability import SlotAvailabilityUseCase
from consult_scheduling.application.use_cases.booking_hold import BookingHoldUseCase
from consult_scheduling.application.use_cases.reschedule import RescheduleUseCase
from consult_scheduling.application.use_cases.working_hours_config import WorkingHoursConfigUseCase
from consult_scheduling.application.utils.working_hours import default_working_hours
from consult_scheduling.domain.entities.appointment import Appointment, AppointmentStatus
from consult_scheduling.domain.entities.booking_hold import BookingRequest
from consult_scheduling.domain.entities.schedule import SessionSettings
from consult_scheduling.domain.entities.time_slot import TimeSlot
from consult_scheduling.infrastructure.clock.system_clock import FixedClock
from consult_scheduling.infrastructure.payments.mock_gateway import MockPaymentGateway
from consult_scheduling.infrastructure.store.memory_store import (
    MemoryAppointmentStore,
    MemoryHoldStore,
    MemoryScheduleStore,
)

# 2030-01-07 is a Monday; the clock starts the day before.
MONDAY = date(2030, 1, 7)
SUNDAY_NOON = datetime(2030, 1, 6, 12, 0)


@dataclass
class Engine:
    clock: FixedClock
    appointment_store: MemoryAppointmentStore
    hold_store: MemoryHoldStore
    schedule_store: MemoryScheduleStore
    payments: MockPaymentGateway
    availability: SlotAvailabilityUseCase
    booking: BookingHoldUseCase
    reschedule: RescheduleUseCase
    appointments: AppointmentsUseCase
    working_hours: WorkingHoursConfigUseCase

    def book(
        self,
        slot_label: str,
        day: date = MONDAY,
        consultant_id: str = "consultant-1",
        client_id: str = "client-1",
        status: AppointmentStatus = AppointmentStatus.UPCOMING,
    ) -> Appointment:
        """Write an appointment straight into the store, bypassing validation."""
        slot = TimeSlot.from_label(day, slot_label)
        return self.appointment_store.add(
            Appointment(
                id=uuid.uuid4().hex,
                consultant_id=consultant_id,
                client_id=client_id,
                start_at=slot.start,
                end_at=slot.end,
                status=status,
            )
        )

    def request(
        self,
        slot_label: str | None = "10:00 - 11:00",
        day: date | None = MONDAY,
        consultant_id: str | None = "consultant-1",
        client_id: str | None = "client-1",
        fee: float = 500.0,
    ) -> BookingRequest:
        return BookingRequest(
            consultant_id=consultant_id,
            client_id=client_id,
            day=day,
            slot_label=slot_label,
            fee=fee,
        )


def build_engine(now: datetime = SUNDAY_NOON, hold_ttl_minutes: int = 10) -> Engine:
    clock = FixedClock(now)
    appointment_store = MemoryAppointmentStore()
    hold_store = MemoryHoldStore()
    schedule_store = MemoryScheduleStore()
    payments = MockPaymentGateway()
    availability = SlotAvailabilityUseCase(
        schedules=schedule_store,
        appointments=appointment_store,
        holds=hold_store,
        clock=clock,
        default_working_hours=default_working_hours("09:00", "17:00"),
        default_session_settings=SessionSettings(duration_minutes=60, buffer_minutes=0, max_sessions_per_day=8),
    )
    reschedule = RescheduleUseCase(appointments=appointment_store, clock=clock)
    return Engine(
        clock=clock,
        appointment_store=appointment_store,
        hold_store=hold_store,
        schedule_store=schedule_store,
        payments=payments,
        availability=availability,
        booking=BookingHoldUseCase(
            availability=availability,
            appointments=appointment_store,
            holds=hold_store,
            payments=payments,
            clock=clock,
            hold_ttl_minutes=hold_ttl_minutes,
        ),
        reschedule=reschedule,
        appointments=AppointmentsUseCase(appointments=appointment_store, reschedule=reschedule, clock=clock),
        working_hours=WorkingHoursConfigUseCase(schedules=schedule_store, availability=availability),
    )


@pytest.fixture
def engine() -> Engine:
    return build_engine()
