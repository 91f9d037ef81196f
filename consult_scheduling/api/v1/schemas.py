import datetime as dt

from pydantic import BaseModel, Field

from consult_scheduling.domain.entities.appointment import Appointment, AppointmentStatus
from consult_scheduling.domain.entities.booking_hold import Confirmed, Held, HoldState
from consult_scheduling.domain.entities.schedule import ConsultantSchedule


class SlotListSchema(BaseModel):
    consultant_id: str
    date: dt.date
    slots: list[str]


class TimeWindowSchema(BaseModel):
    start: str
    end: str


class DayScheduleSchema(BaseModel):
    enabled: bool = False
    slots: list[TimeWindowSchema] = Field(default_factory=list)


class SessionSettingsSchema(BaseModel):
    duration_minutes: int = 60
    buffer_minutes: int = 0
    max_sessions_per_day: int = 8


class TimeOffSchema(BaseModel):
    start_date: dt.date
    end_date: dt.date
    reason: str = ""


class WorkingHoursSchema(BaseModel):
    working_hours: dict[str, DayScheduleSchema] = Field(default_factory=dict)
    session_settings: SessionSettingsSchema = Field(default_factory=SessionSettingsSchema)
    time_off: list[TimeOffSchema] | None = None

    @classmethod
    def from_schedule(cls, schedule: ConsultantSchedule) -> "WorkingHoursSchema":
        settings = schedule.session_settings
        return cls(
            working_hours={
                name: DayScheduleSchema(
                    enabled=day.enabled,
                    slots=[TimeWindowSchema(**window.to_dict()) for window in day.windows],
                )
                for name, day in schedule.working_hours.items()
            },
            session_settings=SessionSettingsSchema(
                duration_minutes=settings.duration_minutes,
                buffer_minutes=settings.buffer_minutes,
                max_sessions_per_day=settings.max_sessions_per_day,
            ),
            time_off=[
                TimeOffSchema(start_date=t.start_date, end_date=t.end_date, reason=t.reason)
                for t in schedule.time_off
            ],
        )


class WorkingHoursPreviewSchema(BaseModel):
    consultant_id: str
    slots: dict[str, list[str]]


class HoldRequestSchema(BaseModel):
    consultant_id: str | None = None
    client_id: str | None = None
    date: dt.date | None = None
    slot: str | None = None  # "HH:MM - HH:MM"
    duration_minutes: int | None = None
    category: str = "General"
    session: str = "Video Call"
    reason: str = ""
    notes: str = ""
    fee: float = Field(default=0.0, ge=0)


class HoldSchema(BaseModel):
    hold_id: str
    status: str
    consultant_id: str | None = None
    client_id: str | None = None
    date: dt.date | None = None
    slot: str | None = None
    expires_at: dt.datetime | None = None
    appointment_id: str | None = None

    @classmethod
    def from_state(cls, state: HoldState) -> "HoldSchema":
        slot = getattr(state, "slot", None)
        return cls(
            hold_id=state.hold_id,
            status=state.status.value,
            consultant_id=state.request.consultant_id,
            client_id=state.request.client_id,
            date=state.request.day,
            slot=slot.label if slot else state.request.slot_label,
            expires_at=state.expires_at if isinstance(state, Held) else None,
            appointment_id=state.appointment_id if isinstance(state, Confirmed) else None,
        )


class ConfirmHoldSchema(BaseModel):
    payment_reference: str


class PaymentSchema(BaseModel):
    reference: str
    amount: float = 0.0
    succeeded: bool = False
    method: str = "System"


class AppointmentCreateSchema(BaseModel):
    client_id: str
    consultant_id: str
    start_at: dt.datetime
    end_at: dt.datetime
    status: AppointmentStatus = AppointmentStatus.UPCOMING
    category: str = "General"
    session: str = "Video Call"
    reason: str = ""
    notes: str = ""
    fee: float = Field(default=0.0, ge=0)
    payment: PaymentSchema | None = None


class AppointmentUpdateSchema(BaseModel):
    start_at: dt.datetime | None = None
    end_at: dt.datetime | None = None
    status: AppointmentStatus | None = None
    reason: str | None = None
    notes: str | None = None
    fee: float | None = Field(default=None, ge=0)


class RescheduleSchema(BaseModel):
    date: dt.date
    slot: str


class AppointmentSchema(BaseModel):
    id: str
    consultant_id: str
    client_id: str
    start_at: dt.datetime
    end_at: dt.datetime
    status: AppointmentStatus
    reason: str = ""
    notes: str = ""
    fee: float = 0.0
    category: str = "General"
    session: str = "Video Call"
    payment: PaymentSchema | None = None

    @classmethod
    def from_entity(cls, appointment: Appointment) -> "AppointmentSchema":
        payment = appointment.payment
        return cls(
            id=appointment.id,
            consultant_id=appointment.consultant_id,
            client_id=appointment.client_id,
            start_at=appointment.start_at,
            end_at=appointment.end_at,
            status=appointment.status,
            reason=appointment.reason,
            notes=appointment.notes,
            fee=appointment.fee,
            category=appointment.category,
            session=appointment.session,
            payment=(
                PaymentSchema(
                    reference=payment.reference,
                    amount=payment.amount,
                    succeeded=payment.succeeded,
                    method=payment.method,
                )
                if payment
                else None
            ),
        )
