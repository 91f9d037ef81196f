from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from consult_scheduling.domain.entities.booking_hold import StoredHold


class HoldStorePort(ABC):
    @abstractmethod
    def get(self, hold_id: str) -> StoredHold | None:
        raise NotImplementedError

    @abstractmethod
    def save(self, hold: StoredHold) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_for_consultant(self, consultant_id: str, day: date) -> list[StoredHold]:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[StoredHold]:
        raise NotImplementedError
