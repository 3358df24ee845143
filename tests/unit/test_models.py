"""Unit tests for activity and progression models"""
from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from zenni.exceptions import InvalidInputError, invalid_input_from_errors
from zenni.models.activity import ActivityRecord, ActivityType
from zenni.models.progression import ProgressionState


def test_activity_record_valid():
    activity = ActivityRecord(**{
        "type": "Focus",
        "duration_minutes": 15,
        "breath_score": 70,
        "used_breath_tracking": True,
    })

    assert activity.type == ActivityType.FOCUS
    assert activity.duration_minutes == 15


def test_activity_type_accepts_lowercase():
    assert ActivityType("calm") == ActivityType.CALM
    assert ActivityRecord(type="sleep", duration_minutes=5).type == ActivityType.SLEEP


@pytest.mark.parametrize("data, field", [
    ({"type": "Focus", "duration_minutes": 7}, "duration_minutes"),
    ({"type": "Focus", "duration_minutes": -5}, "duration_minutes"),
    ({"type": "Focus", "duration_minutes": 10, "breath_score": 101}, "breath_score"),
    ({"type": "Focus", "duration_minutes": 10, "breath_score": -1}, "breath_score"),
    ({"type": "Walking", "duration_minutes": 10}, "type"),
])
def test_activity_errors_become_invalid_input(data, field):
    with pytest.raises(ValidationError) as exc_info:
        ActivityRecord(**data)

    error = invalid_input_from_errors(exc_info.value.errors(), operation="submit_session")

    assert isinstance(error, InvalidInputError)
    assert error.field == field
    assert error.operation == "submit_session"


def test_activity_record_is_immutable():
    activity = ActivityRecord(type=ActivityType.CALM, duration_minutes=5)
    with pytest.raises(ValidationError):
        activity.duration_minutes = 20


def test_progression_state_defaults():
    state = ProgressionState()

    assert state.xp == 0
    assert state.level == 1
    assert state.tokens == 0
    assert state.streak_days == 0
    assert state.last_activity_date is None
    assert state.streak_savers == 0
    assert state.is_plus is False


def test_progression_state_rejects_invalid_values():
    with pytest.raises(ValidationError):
        ProgressionState(level=0)
    with pytest.raises(ValidationError):
        ProgressionState(xp=-1)


def test_progression_state_keeps_stored_timestamp():
    """Timestamps are reduced to a day later, in the clock's timezone"""
    stamp = datetime(2024, 3, 9, 23, 30, tzinfo=timezone.utc)

    assert ProgressionState(last_activity_date=stamp).last_activity_date == stamp
    assert ProgressionState(last_activity_date=date(2024, 3, 9)).last_activity_date == date(2024, 3, 9)


def test_request_location_stripped_from_field():
    errors = [{"loc": ("body", "activity", "breath_score"), "msg": "too high", "input": 120}]

    error = invalid_input_from_errors(errors)

    assert error.field == "activity.breath_score"
    assert error.value == 120
    assert error.message == "too high"
