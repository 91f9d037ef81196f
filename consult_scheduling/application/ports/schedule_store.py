from __future__ import annotations

from abc import ABC, abstractmethod

from consult_scheduling.domain.entities.schedule import ConsultantSchedule


class ScheduleStorePort(ABC):
    @abstractmethod
    def get(self, consultant_id: str) -> ConsultantSchedule | None:
        raise NotImplementedError

    @abstractmethod
    def save(self, schedule: ConsultantSchedule) -> None:
        raise NotImplementedError
