"""
HTTP-level tests for the scheduling API, run against in-memory stores.
"""

import pytest
from fastapi.testclient import TestClient

from consult_scheduling.main import app
from consult_scheduling.wiring.dependencies import (
    get_appointments_use_case,
    get_availability_use_case,
    get_booking_hold_use_case,
    get_reschedule_use_case,
    get_working_hours_use_case,
)


@pytest.fixture
def client(engine):
    app.dependency_overrides[get_availability_use_case] = lambda: engine.availability
    app.dependency_overrides[get_booking_hold_use_case] = lambda: engine.booking
    app.dependency_overrides[get_reschedule_use_case] = lambda: engine.reschedule
    app.dependency_overrides[get_appointments_use_case] = lambda: engine.appointments
    app.dependency_overrides[get_working_hours_use_case] = lambda: engine.working_hours
    yield TestClient(app)
    app.dependency_overrides.clear()


def _hold(client, client_id="client-1", slot="10:00 - 11:00"):
    return client.post(
        "/api/v1/holds",
        json={
            "consultant_id": "consultant-1",
            "client_id": client_id,
            "date": "2030-01-07",
            "slot": slot,
            "fee": 500,
        },
    )


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_list_slots(client):
    response = client.get("/api/v1/consultants/consultant-1/slots", params={"date": "2030-01-07"})

    assert response.status_code == 200
    data = response.json()
    assert data["consultant_id"] == "consultant-1"
    assert len(data["slots"]) == 8
    assert data["slots"][0] == "09:00 - 10:00"


def test_availability_requires_known_role(client):
    response = client.get(
        "/api/v1/availability",
        params={"actor_role": "admin", "actor_id": "x", "date": "2030-01-07"},
    )

    assert response.status_code == 422


def test_availability_for_client(client):
    response = client.get(
        "/api/v1/availability",
        params={"actor_role": "client", "actor_id": "client-1", "counterparty_id": "consultant-1", "date": "2030-01-07"},
    )

    assert response.status_code == 200
    assert response.json()["consultant_id"] == "consultant-1"


def test_hold_confirm_flow(client):
    created = _hold(client)
    assert created.status_code == 201
    hold = created.json()
    assert hold["status"] == "Held"
    assert hold["expires_at"] == "2030-01-06T12:10:00"

    confirmed = client.post(f"/api/v1/holds/{hold['hold_id']}/confirm", json={"payment_reference": "pay_1"})
    assert confirmed.status_code == 200
    appointment_id = confirmed.json()["appointment_id"]

    appointment = client.get(f"/api/v1/appointments/{appointment_id}")
    assert appointment.status_code == 200
    assert appointment.json()["status"] == "Upcoming"
    assert appointment.json()["payment"]["reference"] == "pay_1"


def test_second_hold_on_same_slot_conflicts(client):
    assert _hold(client, client_id="client-1").status_code == 201

    response = _hold(client, client_id="client-2")

    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["code"] == "slot_unavailable"
    assert detail["hold"]["status"] == "Draft"
    assert "10:00 - 11:00" not in detail["available_slots"]


def test_hold_with_missing_fields(client):
    response = client.post("/api/v1/holds", json={"consultant_id": "consultant-1"})

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "validation_error"


def test_confirm_expired_hold_returns_gone(client, engine):
    hold = _hold(client).json()
    engine.clock.set(engine.clock.now().replace(hour=13))

    response = client.post(f"/api/v1/holds/{hold['hold_id']}/confirm", json={"payment_reference": "pay_1"})

    assert response.status_code == 410
    assert client.get(f"/api/v1/holds/{hold['hold_id']}").json()["status"] == "Expired"


def test_declined_payment(client, engine):
    engine.payments.decline("pay_bad")
    hold = _hold(client).json()

    response = client.post(f"/api/v1/holds/{hold['hold_id']}/confirm", json={"payment_reference": "pay_bad"})

    assert response.status_code == 402


def test_cancel_hold_twice(client):
    hold = _hold(client).json()

    assert client.post(f"/api/v1/holds/{hold['hold_id']}/cancel").json()["status"] == "Cancelled"
    assert client.post(f"/api/v1/holds/{hold['hold_id']}/cancel").status_code == 409


def test_unknown_hold(client):
    assert client.get("/api/v1/holds/missing").status_code == 404


def test_working_hours_round_trip(client):
    payload = {
        "working_hours": {"monday": {"enabled": True, "slots": [{"start": "10:00", "end": "12:00"}]}},
        "session_settings": {"duration_minutes": 30, "buffer_minutes": 0, "max_sessions_per_day": 4},
    }

    saved = client.put("/api/v1/consultants/consultant-1/working-hours", json=payload)
    assert saved.status_code == 200
    assert saved.json()["working_hours"]["monday"]["slots"] == [{"start": "10:00", "end": "12:00"}]

    preview = client.get("/api/v1/consultants/consultant-1/working-hours/preview")
    assert preview.json()["slots"]["monday"] == ["10:00 - 10:30", "10:30 - 11:00", "11:00 - 11:30", "11:30 - 12:00"]


def test_overlapping_working_hours_rejected(client):
    payload = {
        "working_hours": {
            "monday": {
                "enabled": True,
                "slots": [{"start": "09:00", "end": "12:00"}, {"start": "11:00", "end": "13:00"}],
            }
        },
    }

    response = client.put("/api/v1/consultants/consultant-1/working-hours", json=payload)

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "invalid_window"


def test_create_reschedule_and_cancel_appointment(client):
    created = client.post(
        "/api/v1/appointments",
        json={
            "consultant_id": "consultant-1",
            "client_id": "client-1",
            "start_at": "2030-01-07T10:00:00",
            "end_at": "2030-01-07T11:00:00",
        },
    )
    assert created.status_code == 201
    appointment_id = created.json()["id"]

    moved = client.post(
        f"/api/v1/appointments/{appointment_id}/reschedule",
        json={"date": "2030-01-08", "slot": "14:00 - 15:00"},
    )
    assert moved.status_code == 200
    assert moved.json()["start_at"] == "2030-01-08T14:00:00"

    cancelled = client.post(f"/api/v1/appointments/{appointment_id}/cancel")
    assert cancelled.json()["status"] == "Cancelled"


def test_reschedule_conflict_returns_409(client, engine):
    first = engine.book("10:00 - 11:00", client_id="client-1")
    engine.book("14:00 - 15:00", client_id="client-2")

    response = client.post(
        f"/api/v1/appointments/{first.id}/reschedule",
        json={"date": "2030-01-07", "slot": "14:00 - 15:00"},
    )

    assert response.status_code == 409
    assert client.get(f"/api/v1/appointments/{first.id}").json()["start_at"] == "2030-01-07T10:00:00"


def test_list_consultant_appointments(client, engine):
    engine.book("15:00 - 16:00")
    engine.book("09:00 - 10:00", client_id="client-2")

    response = client.get("/api/v1/consultants/consultant-1/appointments", params={"date": "2030-01-07"})

    assert [a["start_at"] for a in response.json()] == ["2030-01-07T09:00:00", "2030-01-07T15:00:00"]


def test_patch_with_negative_fee_changes_nothing(client, engine):
    appointment = engine.book("10:00 - 11:00")

    response = client.patch(
        f"/api/v1/appointments/{appointment.id}",
        json={"start_at": "2030-01-07T13:00:00", "end_at": "2030-01-07T14:00:00", "fee": -1},
    )

    assert response.status_code == 422
    assert engine.appointment_store.get(appointment.id) == appointment
