"""
Tests for direct appointment administration.
"""

from datetime import datetime

import pytest

from consult_scheduling.application.exceptions import NotFoundError, SlotUnavailableError, ValidationError
from consult_scheduling.domain.entities.appointment import AppointmentStatus


def test_create_stores_upcoming_appointment(engine):
    appointment = engine.appointments.create(
        consultant_id="consultant-1",
        client_id="client-1",
        start_at=datetime(2030, 1, 7, 10, 0),
        end_at=datetime(2030, 1, 7, 11, 0),
        fee=750.0,
        notes="first session",
    )

    stored = engine.appointments.get(appointment.id)
    assert stored.status == AppointmentStatus.UPCOMING
    assert stored.fee == 750.0
    assert stored.created_at == datetime(2030, 1, 6, 12, 0)


def test_create_rejects_overlap_with_consultant(engine):
    engine.book("10:00 - 11:00", client_id="client-1")

    with pytest.raises(SlotUnavailableError):
        engine.appointments.create(
            consultant_id="consultant-1",
            client_id="client-2",
            start_at=datetime(2030, 1, 7, 10, 30),
            end_at=datetime(2030, 1, 7, 11, 30),
        )


def test_create_rejects_bad_input(engine):
    with pytest.raises(ValidationError):
        engine.appointments.create("consultant-1", "", datetime(2030, 1, 7, 10), datetime(2030, 1, 7, 11))
    with pytest.raises(ValidationError):
        engine.appointments.create("consultant-1", "client-1", datetime(2030, 1, 7, 11), datetime(2030, 1, 7, 10))
    with pytest.raises(ValidationError):
        engine.appointments.create("consultant-1", "client-1", datetime(2030, 1, 5, 10), datetime(2030, 1, 5, 11))


def test_cancel_frees_slot(engine):
    appointment = engine.book("10:00 - 11:00")

    cancelled = engine.appointments.cancel(appointment.id)

    assert cancelled.status == AppointmentStatus.CANCELLED
    labels = [s.label for s in engine.availability.resolve("consultant-1", appointment.start_at.date())]
    assert "10:00 - 11:00" in labels


def test_update_changes_fields_and_times(engine):
    appointment = engine.book("10:00 - 11:00")

    updated = engine.appointments.update(
        appointment.id,
        start_at=datetime(2030, 1, 7, 13, 0),
        end_at=datetime(2030, 1, 7, 14, 0),
        notes="moved after lunch",
    )

    assert updated.start_at == datetime(2030, 1, 7, 13, 0)
    assert updated.notes == "moved after lunch"


def test_update_rejects_negative_fee(engine):
    appointment = engine.book("10:00 - 11:00")

    with pytest.raises(ValidationError):
        engine.appointments.update(appointment.id, fee=-1)


def test_reactivating_cancelled_appointment_is_conflict_checked(engine):
    cancelled = engine.book("10:00 - 11:00", client_id="client-1", status=AppointmentStatus.CANCELLED)
    engine.book("10:00 - 11:00", client_id="client-2")

    with pytest.raises(SlotUnavailableError):
        engine.appointments.update(cancelled.id, status=AppointmentStatus.UPCOMING)


def test_list_for_consultant_is_sorted(engine):
    later = engine.book("15:00 - 16:00")
    earlier = engine.book("09:00 - 10:00", client_id="client-2")

    assert [a.id for a in engine.appointments.list_for_consultant("consultant-1")] == [earlier.id, later.id]


def test_complete_past_appointments(engine):
    finished = engine.book("09:00 - 10:00")
    running = engine.book("10:00 - 11:00", client_id="client-2")
    engine.clock.set(datetime(2030, 1, 7, 10, 30))

    assert engine.appointments.complete_past_appointments() == 1
    assert engine.appointments.get(finished.id).status == AppointmentStatus.COMPLETED
    assert engine.appointments.get(running.id).status == AppointmentStatus.UPCOMING


def test_get_unknown_appointment(engine):
    with pytest.raises(NotFoundError):
        engine.appointments.get("missing")


def test_create_rejects_overlap_across_midnight(engine):
    engine.appointments.create(
        consultant_id="consultant-1",
        client_id="client-1",
        start_at=datetime(2030, 1, 7, 23, 30),
        end_at=datetime(2030, 1, 8, 0, 30),
    )

    with pytest.raises(SlotUnavailableError):
        engine.appointments.create(
            consultant_id="consultant-1",
            client_id="client-2",
            start_at=datetime(2030, 1, 8, 0, 0),
            end_at=datetime(2030, 1, 8, 1, 0),
        )


def test_create_spanning_midnight_sees_next_day_booking(engine):
    engine.appointments.create(
        consultant_id="consultant-1",
        client_id="client-1",
        start_at=datetime(2030, 1, 8, 0, 0),
        end_at=datetime(2030, 1, 8, 1, 0),
    )

    with pytest.raises(SlotUnavailableError):
        engine.appointments.create(
            consultant_id="consultant-1",
            client_id="client-2",
            start_at=datetime(2030, 1, 7, 23, 30),
            end_at=datetime(2030, 1, 8, 0, 30),
        )


def test_rejected_update_leaves_appointment_unchanged(engine):
    appointment = engine.book("10:00 - 11:00")

    with pytest.raises(ValidationError):
        engine.appointments.update(
            appointment.id,
            start_at=datetime(2030, 1, 7, 13, 0),
            end_at=datetime(2030, 1, 7, 14, 0),
            fee=-1,
        )

    assert engine.appointments.get(appointment.id) == appointment


def test_create_starting_now_is_rejected(engine):
    with pytest.raises(ValidationError):
        engine.appointments.create(
            consultant_id="consultant-1",
            client_id="client-1",
            start_at=datetime(2030, 1, 6, 12, 0),
            end_at=datetime(2030, 1, 6, 13, 0),
        )
