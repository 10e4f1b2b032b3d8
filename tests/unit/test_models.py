"""Unit tests for recurcal.calendar.models."""

from datetime import date, time

import pytest
from pydantic import ValidationError

from recurcal.calendar.models import (
    Event,
    EventPatch,
    NoRecurrence,
    Recurrence,
    RepeatType,
    parse_time,
)

pytestmark = pytest.mark.unit


class TestRecurrenceRule:
    def test_no_recurrence_has_no_group_id(self):
        rule = NoRecurrence()
        assert rule.type is RepeatType.NONE
        assert rule.group_id is None
        assert rule.is_recurring is False

    def test_no_recurrence_rejects_repeating_type(self):
        with pytest.raises(ValidationError):
            NoRecurrence(type="daily")

    def test_recurrence_rejects_none_type(self):
        with pytest.raises(ValidationError):
            Recurrence(type="none", end_date="2025-12-31")

    def test_recurrence_requires_end_date(self):
        with pytest.raises(ValidationError):
            Recurrence(type="daily")

    def test_interval_is_fixed_at_one(self):
        with pytest.raises(ValidationError):
            Recurrence(type="weekly", interval=2, end_date="2025-12-31")

    def test_end_date_must_be_strict_text(self):
        with pytest.raises(ValidationError):
            Recurrence(type="monthly", end_date="2025-02-30")
        with pytest.raises(ValidationError):
            Recurrence(type="monthly", end_date="31/12/2025")


class TestEvent:
    def test_parses_wire_form(self, event_factory):
        wire = {
            "id": "7",
            "title": "Standup",
            "date": "2025-10-01",
            "startTime": "09:00",
            "endTime": "09:15",
            "description": "",
            "location": "",
            "category": "Work",
            "repeat": {"type": "weekly", "interval": 1, "endDate": "2025-12-31", "groupId": "g-1"},
            "notificationTime": 10,
        }
        event = Event.model_validate(wire)
        assert event.date == date(2025, 10, 1)
        assert event.start_time == time(9, 0)
        assert isinstance(event.repeat, Recurrence)
        assert event.repeat.type is RepeatType.WEEKLY
        assert event.group_id == "g-1"
        assert event.is_recurring is True

    def test_none_rule_from_wire_ignores_leftover_fields(self):
        event = Event.model_validate(
            {
                "title": "Lunch",
                "date": "2025-10-01",
                "startTime": "12:00",
                "endTime": "13:00",
                "repeat": {"type": "none", "interval": 0},
            }
        )
        assert isinstance(event.repeat, NoRecurrence)
        assert event.group_id is None

    def test_to_wire_round_trips_formats(self, event_factory):
        event = event_factory(start_time="08:05", date="2025-03-07")
        wire = event.to_wire()
        assert wire["date"] == "2025-03-07"
        assert wire["startTime"] == "08:05"
        assert wire["repeat"] == {"type": "none"}
        assert Event.model_validate(wire) == event

    def test_rejects_nonexistent_date(self, event_factory):
        with pytest.raises(ValidationError):
            event_factory(date="2025-02-29")

    @pytest.mark.parametrize("value", ["9:00", "09:00:00", "24:00", "ab:cd", ""])
    def test_rejects_malformed_times(self, event_factory, value):
        with pytest.raises(ValidationError):
            event_factory(start_time=value)

    def test_is_frozen(self, event_factory):
        event = event_factory()
        with pytest.raises(ValidationError):
            event.title = "changed"

    def test_defaults(self):
        event = Event(title="x", date="2025-01-01", start_time="10:00", end_time="11:00")
        assert event.id is None
        assert event.category == "Work"
        assert event.notification_time == 10
        assert isinstance(event.repeat, NoRecurrence)


class TestEventPatch:
    def test_accepts_aliases_and_field_names(self):
        patch = EventPatch.model_validate({"startTime": "10:00", "title": "New"})
        assert patch.start_time == time(10, 0)
        assert patch.model_dump(exclude_unset=True) == {"start_time": time(10, 0), "title": "New"}

    def test_ignores_id_and_date(self):
        patch = EventPatch.model_validate({"id": "9", "date": "2025-01-01", "title": "T"})
        assert patch.model_dump(exclude_unset=True) == {"title": "T"}

    def test_partial_repeat(self):
        patch = EventPatch.model_validate({"repeat": {"endDate": "2025-11-30"}})
        assert patch.repeat is not None
        assert patch.repeat.model_dump(exclude_unset=True) == {"end_date": date(2025, 11, 30)}


@pytest.mark.parametrize(
    "text,expected",
    [("00:00", time(0, 0)), ("23:59", time(23, 59)), ("7:30", None), ("12:60", None), (None, None)],
)
def test_parse_time(text, expected):
    assert parse_time(text) == expected
