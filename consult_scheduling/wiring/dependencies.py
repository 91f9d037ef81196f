from functools import lru_cache

from consult_scheduling.core.config import settings
from consult_scheduling.application.ports.appointment_store import AppointmentStorePort
from consult_scheduling.application.ports.clock import ClockPort
from consult_scheduling.application.ports.hold_store import HoldStorePort
from consult_scheduling.application.ports.payment_gateway import PaymentGatewayPort
from consult_scheduling.application.ports.schedule_store import ScheduleStorePort
from consult_scheduling.application.use_cases.appointments import AppointmentsUseCase
from consult_scheduling.application.use_cases.availability import SlotAvailabilityUseCase
from consult_scheduling.application.use_cases.booking_hold import BookingHoldUseCase
from consult_scheduling.application.use_cases.reschedule import RescheduleUseCase
from consult_scheduling.application.use_cases.working_hours_config import WorkingHoursConfigUseCase
from consult_scheduling.application.utils.working_hours import default_working_hours
from consult_scheduling.domain.entities.schedule import SessionSettings
from consult_scheduling.infrastructure.clock.system_clock import SystemClock
from consult_scheduling.infrastructure.payments.mock_gateway import MockPaymentGateway
from consult_scheduling.infrastructure.store.json_store import JsonAppointmentStore, JsonHoldStore, JsonScheduleStore
from consult_scheduling.infrastructure.store.memory_store import (
    MemoryAppointmentStore,
    MemoryHoldStore,
    MemoryScheduleStore,
)


def _use_file_store() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


@lru_cache
def get_clock() -> ClockPort:
    return SystemClock(settings.SCHEDULING_TIMEZONE)


@lru_cache
def get_appointment_store() -> AppointmentStorePort:
    if _use_file_store():
        return JsonAppointmentStore(settings.DATA_DIR)
    return MemoryAppointmentStore()


@lru_cache
def get_hold_store() -> HoldStorePort:
    if _use_file_store():
        return JsonHoldStore(settings.DATA_DIR)
    return MemoryHoldStore()


@lru_cache
def get_schedule_store() -> ScheduleStorePort:
    if _use_file_store():
        return JsonScheduleStore(settings.DATA_DIR)
    return MemoryScheduleStore()


@lru_cache
def get_payment_gateway() -> PaymentGatewayPort:
    return MockPaymentGateway()


def get_availability_use_case() -> SlotAvailabilityUseCase:
    return SlotAvailabilityUseCase(
        schedules=get_schedule_store(),
        appointments=get_appointment_store(),
        holds=get_hold_store(),
        clock=get_clock(),
        default_working_hours=default_working_hours(settings.DEFAULT_WORKDAY_START, settings.DEFAULT_WORKDAY_END),
        default_session_settings=SessionSettings(
            duration_minutes=settings.DEFAULT_SESSION_DURATION_MINUTES,
            buffer_minutes=settings.DEFAULT_BUFFER_MINUTES,
            max_sessions_per_day=settings.DEFAULT_MAX_SESSIONS_PER_DAY,
        ),
    )


def get_booking_hold_use_case() -> BookingHoldUseCase:
    return BookingHoldUseCase(
        availability=get_availability_use_case(),
        appointments=get_appointment_store(),
        holds=get_hold_store(),
        payments=get_payment_gateway(),
        clock=get_clock(),
        hold_ttl_minutes=settings.HOLD_TTL_MINUTES,
    )


def get_reschedule_use_case() -> RescheduleUseCase:
    return RescheduleUseCase(appointments=get_appointment_store(), clock=get_clock())


def get_appointments_use_case() -> AppointmentsUseCase:
    return AppointmentsUseCase(
        appointments=get_appointment_store(),
        reschedule=get_reschedule_use_case(),
        clock=get_clock(),
    )


def get_working_hours_use_case() -> WorkingHoursConfigUseCase:
    return WorkingHoursConfigUseCase(schedules=get_schedule_store(), availability=get_availability_use_case())
