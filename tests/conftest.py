"""Shared fixtures for recurcal tests."""

from collections.abc import Callable, Generator
from datetime import date
from typing import Any

import pytest

from recurcal.calendar.models import Event, NoRecurrence, Recurrence, RepeatType
from recurcal.domain.event_store import InMemoryEventStore


def make_event(**overrides: Any) -> Event:
    """Build a standalone event with sensible defaults."""
    data: dict[str, Any] = {
        "id": "1",
        "title": "Team sync",
        "date": "2025-10-01",
        "start_time": "09:00",
        "end_time": "10:00",
        "description": "Weekly status",
        "location": "Room 4",
        "category": "Work",
        "repeat": NoRecurrence(),
        "notification_time": 10,
    }
    data.update(overrides)
    return Event(**data)


def make_series_member(
    event_id: str,
    on: str,
    group_id: str = "repeat-1",
    repeat_type: RepeatType = RepeatType.WEEKLY,
    end_date: str = "2025-12-31",
    **overrides: Any,
) -> Event:
    """Build one member of a materialized series."""
    rule = Recurrence(type=repeat_type, end_date=end_date, group_id=group_id)
    return make_event(id=event_id, date=on, repeat=rule, **overrides)


@pytest.fixture
def event_factory() -> Callable[..., Event]:
    return make_event


@pytest.fixture
def series() -> list[Event]:
    """Three members of group repeat-1 plus one standalone and one other-series event."""
    return [
        make_series_member("1", "2025-10-01"),
        make_series_member("2", "2025-10-08"),
        make_event(id="3", date="2025-10-09", title="Dentist"),
        make_series_member("4", "2025-10-15"),
        make_series_member("5", "2025-10-02", group_id="repeat-2", title="Gym"),
    ]


@pytest.fixture
def memory_store(series: list[Event]) -> InMemoryEventStore:
    return InMemoryEventStore(series)


@pytest.fixture
def notifications() -> list[tuple[str, str]]:
    """Collected (message, variant) pairs; pair with the `notifier` fixture."""
    return []


@pytest.fixture
def notifier(notifications: list[tuple[str, str]]) -> Callable[[str, str], None]:
    def _notify(message: str, variant: str) -> None:
        notifications.append((message, variant))

    return _notify


@pytest.fixture
def ceiling() -> date:
    return date(2025, 12, 31)


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, Any, None]:
    """Keep RECURCAL_* variables from the host out of tests."""
    for key in (
        "RECURCAL_DEBUG",
        "RECURCAL_LOG_LEVEL",
        "RECURCAL_MAX_REPEAT_END_DATE",
        "RECURCAL_DEFAULT_CATEGORY",
        "RECURCAL_NOTIFICATION_MINUTES",
        "RECURCAL_STORE_PATH",
    ):
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def member_factory() -> Callable[..., Event]:
    return make_series_member


def pytest_configure(config: Any) -> None:
    """Register test markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "integration: Operations exercised through a store")
