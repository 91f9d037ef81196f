from __future__ import annotations

from datetime import date, datetime
from typing import Any

from consult_scheduling.domain.entities.appointment import Appointment, AppointmentStatus
from consult_scheduling.domain.entities.booking_hold import (
    BookingRequest,
    Cancelled,
    Confirmed,
    Expired,
    Held,
    HoldStatus,
    StoredHold,
)
from consult_scheduling.domain.entities.payment import PaymentConfirmation
from consult_scheduling.domain.entities.schedule import ConsultantSchedule, DaySchedule, SessionSettings, TimeOff
from consult_scheduling.domain.entities.time_slot import TimeSlot, TimeWindow


def _dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value else None


def serialize_appointment(appointment: Appointment) -> dict[str, Any]:
    payment = appointment.payment
    return {
        "id": appointment.id,
        "consultant_id": appointment.consultant_id,
        "client_id": appointment.client_id,
        "start_at": _iso(appointment.start_at),
        "end_at": _iso(appointment.end_at),
        "status": appointment.status.value,
        "reason": appointment.reason,
        "notes": appointment.notes,
        "fee": appointment.fee,
        "category": appointment.category,
        "session": appointment.session,
        "payment": (
            {
                "reference": payment.reference,
                "amount": payment.amount,
                "succeeded": payment.succeeded,
                "method": payment.method,
            }
            if payment
            else None
        ),
        "created_at": _iso(appointment.created_at),
        "updated_at": _iso(appointment.updated_at),
    }


def deserialize_appointment(data: dict[str, Any]) -> Appointment:
    payment = data.get("payment")
    return Appointment(
        id=data["id"],
        consultant_id=data["consultant_id"],
        client_id=data["client_id"],
        start_at=datetime.fromisoformat(data["start_at"]),
        end_at=datetime.fromisoformat(data["end_at"]),
        status=AppointmentStatus(data.get("status", AppointmentStatus.UPCOMING.value)),
        reason=data.get("reason", ""),
        notes=data.get("notes", ""),
        fee=data.get("fee", 0.0),
        category=data.get("category", "General"),
        session=data.get("session", "Video Call"),
        payment=PaymentConfirmation(**payment) if payment else None,
        created_at=_dt(data.get("created_at")),
        updated_at=_dt(data.get("updated_at")),
    )


def _serialize_request(request: BookingRequest) -> dict[str, Any]:
    return {
        "consultant_id": request.consultant_id,
        "client_id": request.client_id,
        "day": _iso(request.day),
        "slot_label": request.slot_label,
        "duration_minutes": request.duration_minutes,
        "category": request.category,
        "session": request.session,
        "reason": request.reason,
        "notes": request.notes,
        "fee": request.fee,
    }


def _deserialize_request(data: dict[str, Any]) -> BookingRequest:
    return BookingRequest(
        consultant_id=data.get("consultant_id"),
        client_id=data.get("client_id"),
        day=date.fromisoformat(data["day"]) if data.get("day") else None,
        slot_label=data.get("slot_label"),
        duration_minutes=data.get("duration_minutes"),
        category=data.get("category", "General"),
        session=data.get("session", "Video Call"),
        reason=data.get("reason", ""),
        notes=data.get("notes", ""),
        fee=data.get("fee", 0.0),
    )


def serialize_hold(hold: StoredHold) -> dict[str, Any]:
    data: dict[str, Any] = {
        "hold_id": hold.hold_id,
        "status": hold.status.value,
        "request": _serialize_request(hold.request),
        "slot": {"start": _iso(hold.slot.start), "end": _iso(hold.slot.end)},
    }
    if isinstance(hold, Held):
        data["expires_at"] = _iso(hold.expires_at)
    elif isinstance(hold, Confirmed):
        data["appointment_id"] = hold.appointment_id
        data["confirmed_at"] = _iso(hold.confirmed_at)
    elif isinstance(hold, Expired):
        data["expired_at"] = _iso(hold.expired_at)
        data["cause"] = hold.cause
    elif isinstance(hold, Cancelled):
        data["cancelled_at"] = _iso(hold.cancelled_at)
    return data


def deserialize_hold(data: dict[str, Any]) -> StoredHold:
    status = HoldStatus(data["status"])
    request = _deserialize_request(data.get("request", {}))
    slot = TimeSlot(datetime.fromisoformat(data["slot"]["start"]), datetime.fromisoformat(data["slot"]["end"]))
    common = {"hold_id": data["hold_id"], "request": request, "slot": slot}

    if status == HoldStatus.HELD:
        return Held(expires_at=datetime.fromisoformat(data["expires_at"]), **common)
    if status == HoldStatus.CONFIRMED:
        return Confirmed(
            appointment_id=data["appointment_id"],
            confirmed_at=datetime.fromisoformat(data["confirmed_at"]),
            **common,
        )
    if status == HoldStatus.EXPIRED:
        return Expired(expired_at=datetime.fromisoformat(data["expired_at"]), cause=data.get("cause", "ttl"), **common)
    if status == HoldStatus.CANCELLED:
        return Cancelled(cancelled_at=datetime.fromisoformat(data["cancelled_at"]), **common)
    raise ValueError(f"Hold status {status.value} is never stored")


def serialize_schedule(schedule: ConsultantSchedule) -> dict[str, Any]:
    settings = schedule.session_settings
    return {
        "consultant_id": schedule.consultant_id,
        "working_hours": {
            name: {"enabled": day.enabled, "slots": [window.to_dict() for window in day.windows]}
            for name, day in schedule.working_hours.items()
        },
        "session_settings": {
            "duration_minutes": settings.duration_minutes,
            "buffer_minutes": settings.buffer_minutes,
            "max_sessions_per_day": settings.max_sessions_per_day,
        },
        "time_off": [
            {"start_date": _iso(t.start_date), "end_date": _iso(t.end_date), "reason": t.reason}
            for t in schedule.time_off
        ],
    }


def deserialize_schedule(data: dict[str, Any]) -> ConsultantSchedule:
    working_hours = {
        name: DaySchedule(
            enabled=bool(day.get("enabled", False)),
            windows=tuple(TimeWindow.from_strings(w["start"], w["end"]) for w in day.get("slots", [])),
        )
        for name, day in (data.get("working_hours") or {}).items()
    }
    return ConsultantSchedule(
        consultant_id=data["consultant_id"],
        working_hours=working_hours,
        session_settings=SessionSettings(**(data.get("session_settings") or {})),
        time_off=tuple(
            TimeOff(
                start_date=date.fromisoformat(t["start_date"]),
                end_date=date.fromisoformat(t["end_date"]),
                reason=t.get("reason", ""),
            )
            for t in data.get("time_off", [])
        ),
    )
