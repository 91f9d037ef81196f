from fastapi import APIRouter, Depends

from consult_scheduling.api.v1.errors import to_http_exception
from consult_scheduling.api.v1.schemas import WorkingHoursPreviewSchema, WorkingHoursSchema
from consult_scheduling.application.exceptions import SchedulingError
from consult_scheduling.application.use_cases.working_hours_config import WorkingHoursConfigUseCase
from consult_scheduling.domain.entities.schedule import SessionSettings, TimeOff
from consult_scheduling.wiring.dependencies import get_working_hours_use_case

router = APIRouter()


@router.get("/consultants/{consultant_id}/working-hours", response_model=WorkingHoursSchema)
def get_working_hours(
    consultant_id: str,
    uc: WorkingHoursConfigUseCase = Depends(get_working_hours_use_case),
):
    return WorkingHoursSchema.from_schedule(uc.get(consultant_id))


@router.put("/consultants/{consultant_id}/working-hours", response_model=WorkingHoursSchema)
def save_working_hours(
    consultant_id: str,
    req: WorkingHoursSchema,
    uc: WorkingHoursConfigUseCase = Depends(get_working_hours_use_case),
):
    try:
        schedule = uc.save(
            consultant_id,
            working_hours={name: day.model_dump() for name, day in req.working_hours.items()},
            session_settings=SessionSettings(**req.session_settings.model_dump()),
            time_off=(
                [TimeOff(start_date=t.start_date, end_date=t.end_date, reason=t.reason) for t in req.time_off]
                if req.time_off is not None
                else None
            ),
        )
    except SchedulingError as e:
        raise to_http_exception(e)
    return WorkingHoursSchema.from_schedule(schedule)


@router.get("/consultants/{consultant_id}/working-hours/preview", response_model=WorkingHoursPreviewSchema)
def preview_working_hours(
    consultant_id: str,
    uc: WorkingHoursConfigUseCase = Depends(get_working_hours_use_case),
):
    return WorkingHoursPreviewSchema(consultant_id=consultant_id, slots=uc.preview(consultant_id))
