from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime


class ClockPort(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Current naive wall-clock time."""
        raise NotImplementedError

    def today(self) -> date:
        return self.now().date()
