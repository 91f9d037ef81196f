from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date

from consult_scheduling.domain.entities.appointment import Appointment


class AppointmentStorePort(ABC):
    @abstractmethod
    def get(self, appointment_id: str) -> Appointment | None:
        raise NotImplementedError

    @abstractmethod
    def add(self, appointment: Appointment) -> Appointment:
        raise NotImplementedError

    @abstractmethod
    def update(self, appointment: Appointment) -> Appointment:
        """Replace the stored appointment with the same id."""
        raise NotImplementedError

    @abstractmethod
    def list_for_consultant(self, consultant_id: str, day: date | None = None) -> list[Appointment]:
        """All appointments of a consultant, optionally only those covering part of `day`."""
        raise NotImplementedError

    @abstractmethod
    def list_for_client(self, client_id: str, day: date | None = None) -> list[Appointment]:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[Appointment]:
        raise NotImplementedError

    @abstractmethod
    def write_lock(self) -> AbstractContextManager[None]:
        """
        Serializes check-then-write sequences.
        Conflict re-validation and the write that depends on it must both run inside it.
        """
        raise NotImplementedError
