from __future__ import annotations

import logging
from typing import Any, Mapping

from consult_scheduling.application.exceptions import ValidationError
from consult_scheduling.application.ports.schedule_store import ScheduleStorePort
from consult_scheduling.application.use_cases.availability import SlotAvailabilityUseCase
from consult_scheduling.application.utils.working_hours import (
    parse_working_hours,
    preview_week,
    validate_session_settings,
    validate_working_hours,
)
from consult_scheduling.domain.entities.schedule import ConsultantSchedule, SessionSettings, TimeOff


class WorkingHoursConfigUseCase:
    def __init__(self, schedules: ScheduleStorePort, availability: SlotAvailabilityUseCase) -> None:
        self._schedules = schedules
        self._availability = availability
        self._logger = logging.getLogger(__name__)

    def get(self, consultant_id: str) -> ConsultantSchedule:
        return self._availability.schedule_for(consultant_id)

    def save(
        self,
        consultant_id: str,
        working_hours: Mapping[str, Any],
        session_settings: SessionSettings,
        time_off: list[TimeOff] | None = None,
    ) -> ConsultantSchedule:
        """
        Validate and store a consultant's weekly hours.
        Bad windows raise InvalidWindowError here, at configuration time, so they
        never surface during booking. Days left out of `working_hours` keep their current setting.
        """
        parsed = parse_working_hours(working_hours)
        validate_working_hours(parsed)
        validate_session_settings(session_settings)
        for period in time_off or []:
            if period.start_date > period.end_date:
                raise ValidationError("time off must start on or before its end date")

        current = self.get(consultant_id)
        schedule = ConsultantSchedule(
            consultant_id=consultant_id,
            working_hours={**current.working_hours, **parsed},
            session_settings=session_settings,
            time_off=tuple(time_off) if time_off is not None else current.time_off,
        )
        self._schedules.save(schedule)
        self._logger.info(
            "Working hours saved",
            extra={
                "consultant_id": consultant_id,
                "reason": ",".join(name for name, day in schedule.working_hours.items() if day.enabled),
            },
        )
        return schedule

    def preview(self, consultant_id: str) -> dict[str, list[str]]:
        return preview_week(self.get(consultant_id))
