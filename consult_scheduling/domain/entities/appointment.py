from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum

from consult_scheduling.domain.entities.payment import PaymentConfirmation
from consult_scheduling.domain.entities.time_slot import TimeSlot


class AppointmentStatus(str, Enum):
    UPCOMING = "Upcoming"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


@dataclass(frozen=True)
class Appointment:
    id: str
    consultant_id: str
    client_id: str
    start_at: datetime
    end_at: datetime
    status: AppointmentStatus = AppointmentStatus.UPCOMING
    reason: str = ""
    notes: str = ""
    fee: float = 0.0
    category: str = "General"
    session: str = "Video Call"
    payment: PaymentConfirmation | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def slot(self) -> TimeSlot:
        return TimeSlot(self.start_at, self.end_at)

    @property
    def is_upcoming(self) -> bool:
        return self.status == AppointmentStatus.UPCOMING

    @property
    def is_cancelled(self) -> bool:
        return self.status == AppointmentStatus.CANCELLED

    def touches_day(self, day: date) -> bool:
        """True when the appointment covers any part of `day`, including across midnight."""
        day_start = datetime.combine(day, time.min)
        return self.start_at < day_start + timedelta(days=1) and self.end_at > day_start
