from fastapi import APIRouter, Depends

from consult_scheduling.api.v1.errors import to_http_exception
from consult_scheduling.api.v1.schemas import ConfirmHoldSchema, HoldRequestSchema, HoldSchema
from consult_scheduling.application.exceptions import SchedulingError
from consult_scheduling.application.use_cases.booking_hold import BookingHoldUseCase, Transition
from consult_scheduling.domain.entities.booking_hold import BookingRequest
from consult_scheduling.wiring.dependencies import get_booking_hold_use_case

router = APIRouter()


def _respond(transition: Transition) -> HoldSchema:
    hold = HoldSchema.from_state(transition.state)
    if transition.error is not None:
        raise to_http_exception(
            transition.error,
            hold=hold.model_dump(mode="json"),
            available_slots=transition.available_slots,
        )
    return hold


@router.post("/holds", response_model=HoldSchema, status_code=201)
def place_hold(
    req: HoldRequestSchema,
    uc: BookingHoldUseCase = Depends(get_booking_hold_use_case),
):
    request = BookingRequest(
        consultant_id=req.consultant_id,
        client_id=req.client_id,
        day=req.date,
        slot_label=req.slot,
        duration_minutes=req.duration_minutes,
        category=req.category,
        session=req.session,
        reason=req.reason,
        notes=req.notes,
        fee=req.fee,
    )
    return _respond(uc.place_hold(request))


@router.get("/holds/{hold_id}", response_model=HoldSchema)
def get_hold(
    hold_id: str,
    uc: BookingHoldUseCase = Depends(get_booking_hold_use_case),
):
    try:
        return HoldSchema.from_state(uc.get(hold_id))
    except SchedulingError as e:
        raise to_http_exception(e)


@router.post("/holds/{hold_id}/confirm", response_model=HoldSchema)
def confirm_hold(
    hold_id: str,
    req: ConfirmHoldSchema,
    uc: BookingHoldUseCase = Depends(get_booking_hold_use_case),
):
    try:
        transition = uc.confirm(hold_id, req.payment_reference)
    except SchedulingError as e:
        raise to_http_exception(e)
    return _respond(transition)


@router.post("/holds/{hold_id}/cancel", response_model=HoldSchema)
def cancel_hold(
    hold_id: str,
    uc: BookingHoldUseCase = Depends(get_booking_hold_use_case),
):
    try:
        transition = uc.cancel(hold_id)
    except SchedulingError as e:
        raise to_http_exception(e)
    return _respond(transition)
