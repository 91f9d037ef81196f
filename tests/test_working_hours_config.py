"""
Tests for saving and previewing consultant working hours.
"""

from datetime import date

import pytest

from consult_scheduling.application.exceptions import InvalidWindowError, ValidationError
from consult_scheduling.domain.entities.schedule import SessionSettings, TimeOff

MONDAY = date(2030, 1, 7)


def test_save_replaces_given_days_and_keeps_others(engine):
    schedule = engine.working_hours.save(
        "consultant-1",
        {
            "monday": {
                "enabled": True,
                "slots": [{"start": "09:00", "end": "12:00"}, {"start": "13:00", "end": "15:00"}],
            },
            "saturday": {"enabled": True, "slots": [{"start": "10:00", "end": "12:00"}]},
        },
        SessionSettings(duration_minutes=30, buffer_minutes=0, max_sessions_per_day=10),
    )

    assert len(schedule.working_hours["monday"].windows) == 2
    assert schedule.working_hours["saturday"].enabled
    assert schedule.working_hours["tuesday"].enabled
    assert engine.schedule_store.get("consultant-1") == schedule
    assert len(engine.availability.resolve("consultant-1", MONDAY)) == 10


def test_overlapping_windows_are_not_saved(engine):
    with pytest.raises(InvalidWindowError):
        engine.working_hours.save(
            "consultant-1",
            {
                "monday": {
                    "enabled": True,
                    "slots": [{"start": "09:00", "end": "12:00"}, {"start": "11:30", "end": "13:00"}],
                }
            },
            SessionSettings(),
        )

    assert engine.schedule_store.get("consultant-1") is None


def test_invalid_session_settings_are_rejected(engine):
    with pytest.raises(ValidationError):
        engine.working_hours.save("consultant-1", {}, SessionSettings(duration_minutes=0))


def test_time_off_must_be_ordered(engine):
    with pytest.raises(ValidationError):
        engine.working_hours.save(
            "consultant-1",
            {},
            SessionSettings(),
            time_off=[TimeOff(start_date=date(2030, 1, 9), end_date=date(2030, 1, 7))],
        )


def test_time_off_is_kept_when_not_given(engine):
    holiday = TimeOff(start_date=MONDAY, end_date=MONDAY, reason="holiday")
    engine.working_hours.save("consultant-1", {}, SessionSettings(), time_off=[holiday])

    schedule = engine.working_hours.save("consultant-1", {}, SessionSettings(duration_minutes=30))

    assert schedule.time_off == (holiday,)


def test_get_falls_back_to_default_schedule(engine):
    schedule = engine.working_hours.get("consultant-new")

    assert schedule.working_hours["monday"].enabled
    assert schedule.session_settings.duration_minutes == 60


def test_preview_uses_saved_settings(engine):
    engine.working_hours.save(
        "consultant-1",
        {"monday": {"enabled": True, "slots": [{"start": "09:00", "end": "10:00"}]}},
        SessionSettings(duration_minutes=20, buffer_minutes=10),
    )

    preview = engine.working_hours.preview("consultant-1")

    assert preview["monday"] == ["09:00 - 09:20", "09:30 - 09:50"]
    assert preview["saturday"] == []
