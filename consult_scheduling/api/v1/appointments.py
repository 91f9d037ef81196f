from datetime import date, datetime

from fastapi import APIRouter, Depends, Query

from consult_scheduling.api.v1.errors import to_http_exception
from consult_scheduling.api.v1.schemas import (
    AppointmentCreateSchema,
    AppointmentSchema,
    AppointmentUpdateSchema,
    RescheduleSchema,
)
from consult_scheduling.application.exceptions import SchedulingError
from consult_scheduling.application.use_cases.appointments import AppointmentsUseCase
from consult_scheduling.application.use_cases.reschedule import RescheduleUseCase
from consult_scheduling.domain.entities.payment import PaymentConfirmation
from consult_scheduling.wiring.dependencies import get_appointments_use_case, get_reschedule_use_case

router = APIRouter()


def _wall_clock(value: datetime | None) -> datetime | None:
    # offsets are dropped: every time is handled as local wall-clock
    return value.replace(tzinfo=None) if value is not None else None


@router.post("/appointments", response_model=AppointmentSchema, status_code=201)
def create_appointment(
    req: AppointmentCreateSchema,
    uc: AppointmentsUseCase = Depends(get_appointments_use_case),
):
    try:
        appointment = uc.create(
            consultant_id=req.consultant_id,
            client_id=req.client_id,
            start_at=_wall_clock(req.start_at),
            end_at=_wall_clock(req.end_at),
            status=req.status,
            category=req.category,
            session=req.session,
            reason=req.reason,
            notes=req.notes,
            fee=req.fee,
            payment=PaymentConfirmation(**req.payment.model_dump()) if req.payment else None,
        )
    except SchedulingError as e:
        raise to_http_exception(e)
    return AppointmentSchema.from_entity(appointment)


@router.get("/appointments/{appointment_id}", response_model=AppointmentSchema)
def get_appointment(
    appointment_id: str,
    uc: AppointmentsUseCase = Depends(get_appointments_use_case),
):
    try:
        return AppointmentSchema.from_entity(uc.get(appointment_id))
    except SchedulingError as e:
        raise to_http_exception(e)


@router.patch("/appointments/{appointment_id}", response_model=AppointmentSchema)
def update_appointment(
    appointment_id: str,
    req: AppointmentUpdateSchema,
    uc: AppointmentsUseCase = Depends(get_appointments_use_case),
):
    try:
        appointment = uc.update(
            appointment_id,
            start_at=_wall_clock(req.start_at),
            end_at=_wall_clock(req.end_at),
            status=req.status,
            reason=req.reason,
            notes=req.notes,
            fee=req.fee,
        )
    except SchedulingError as e:
        raise to_http_exception(e)
    return AppointmentSchema.from_entity(appointment)


@router.post("/appointments/{appointment_id}/reschedule", response_model=AppointmentSchema)
def reschedule_appointment(
    appointment_id: str,
    req: RescheduleSchema,
    uc: RescheduleUseCase = Depends(get_reschedule_use_case),
):
    try:
        appointment = uc.reschedule(appointment_id, req.date, req.slot)
    except SchedulingError as e:
        raise to_http_exception(e)
    return AppointmentSchema.from_entity(appointment)


@router.post("/appointments/{appointment_id}/cancel", response_model=AppointmentSchema)
def cancel_appointment(
    appointment_id: str,
    uc: AppointmentsUseCase = Depends(get_appointments_use_case),
):
    try:
        appointment = uc.cancel(appointment_id)
    except SchedulingError as e:
        raise to_http_exception(e)
    return AppointmentSchema.from_entity(appointment)


@router.get("/consultants/{consultant_id}/appointments", response_model=list[AppointmentSchema])
def list_consultant_appointments(
    consultant_id: str,
    day: date | None = Query(None, alias="date"),
    uc: AppointmentsUseCase = Depends(get_appointments_use_case),
):
    return [AppointmentSchema.from_entity(a) for a in uc.list_for_consultant(consultant_id, day)]
