from datetime import date

from fastapi import APIRouter, Depends, Query

from consult_scheduling.api.v1.errors import to_http_exception
from consult_scheduling.api.v1.schemas import SlotListSchema
from consult_scheduling.application.exceptions import SchedulingError
from consult_scheduling.application.use_cases.availability import ActorRole, SlotAvailabilityUseCase
from consult_scheduling.wiring.dependencies import get_availability_use_case

router = APIRouter()


@router.get("/consultants/{consultant_id}/slots", response_model=SlotListSchema)
def get_available_slots(
    consultant_id: str,
    day: date = Query(..., alias="date"),
    duration: int | None = Query(None, ge=15, le=480),
    client_id: str | None = Query(None),
    uc: SlotAvailabilityUseCase = Depends(get_availability_use_case),
):
    try:
        slots = uc.get_available_slots(consultant_id, day.isoformat(), duration, client_id)
    except SchedulingError as e:
        raise to_http_exception(e)
    return SlotListSchema(consultant_id=consultant_id, date=day, slots=slots)


@router.get("/availability", response_model=SlotListSchema)
def resolve_availability(
    actor_role: ActorRole,
    actor_id: str,
    day: date = Query(..., alias="date"),
    counterparty_id: str | None = Query(None),
    duration: int | None = Query(None, ge=15, le=480),
    uc: SlotAvailabilityUseCase = Depends(get_availability_use_case),
):
    try:
        slots = uc.resolve_for_actor(actor_role, actor_id, counterparty_id, day, duration)
    except SchedulingError as e:
        raise to_http_exception(e)
    consultant_id = actor_id if actor_role == ActorRole.CONSULTANT else counterparty_id
    return SlotListSchema(consultant_id=consultant_id, date=day, slots=[slot.label for slot in slots])
