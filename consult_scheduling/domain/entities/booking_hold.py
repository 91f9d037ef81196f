from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import ClassVar

from consult_scheduling.domain.entities.time_slot import TimeSlot


class HoldStatus(str, Enum):
    DRAFT = "Draft"
    PRE_CHECKED = "PreChecked"
    HELD = "Held"
    CONFIRMED = "Confirmed"
    EXPIRED = "Expired"
    CANCELLED = "Cancelled"


@dataclass(frozen=True)
class BookingRequest:
    """What the user picked before submitting. Any field may still be missing."""

    consultant_id: str | None = None
    client_id: str | None = None
    day: date | None = None
    slot_label: str | None = None  # "HH:MM - HH:MM"
    duration_minutes: int | None = None
    category: str = "General"
    session: str = "Video Call"
    reason: str = ""
    notes: str = ""
    fee: float = 0.0


@dataclass(frozen=True)
class Draft:
    hold_id: str
    request: BookingRequest

    status: ClassVar[HoldStatus] = HoldStatus.DRAFT
    terminal: ClassVar[bool] = False


@dataclass(frozen=True)
class PreChecked:
    hold_id: str
    request: BookingRequest
    slot: TimeSlot

    status: ClassVar[HoldStatus] = HoldStatus.PRE_CHECKED
    terminal: ClassVar[bool] = False


@dataclass(frozen=True)
class Held:
    hold_id: str
    request: BookingRequest
    slot: TimeSlot
    expires_at: datetime

    status: ClassVar[HoldStatus] = HoldStatus.HELD
    terminal: ClassVar[bool] = False

    def is_active(self, now: datetime) -> bool:
        return now < self.expires_at


@dataclass(frozen=True)
class Confirmed:
    hold_id: str
    request: BookingRequest
    slot: TimeSlot
    appointment_id: str
    confirmed_at: datetime

    status: ClassVar[HoldStatus] = HoldStatus.CONFIRMED
    terminal: ClassVar[bool] = True


@dataclass(frozen=True)
class Expired:
    hold_id: str
    request: BookingRequest
    slot: TimeSlot
    expired_at: datetime
    cause: str = "ttl"  # "ttl" | "conflict"

    status: ClassVar[HoldStatus] = HoldStatus.EXPIRED
    terminal: ClassVar[bool] = True


@dataclass(frozen=True)
class Cancelled:
    hold_id: str
    request: BookingRequest
    slot: TimeSlot
    cancelled_at: datetime

    status: ClassVar[HoldStatus] = HoldStatus.CANCELLED
    terminal: ClassVar[bool] = True


HoldState = Draft | PreChecked | Held | Confirmed | Expired | Cancelled

# States a hold store keeps: everything from the soft reservation onwards.
StoredHold = Held | Confirmed | Expired | Cancelled
