"""Event stores: the injectable source of truth for the event collection.

Core operations never touch a store directly. They receive a snapshot from
``read()`` and hand a new list back through ``replace()``.
"""

from __future__ import annotations

import contextlib
import json
import logging
import tempfile
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from recurcal.calendar.models import Event
from recurcal.exceptions import EventStoreError

logger = logging.getLogger(__name__)


class EventStore(Protocol):
    """Protocol for event collection storage."""

    def read(self) -> list[Event]:
        """Return a snapshot of all stored events.

        Raises:
            EventStoreError: If the collection cannot be read
        """
        ...

    def replace(self, events: Iterable[Event]) -> None:
        """Replace the whole collection with ``events``.

        Raises:
            EventStoreError: If the collection cannot be written; the
                previous contents stay in place
        """
        ...


class InMemoryEventStore:
    """Process-local store, mainly for tests and embedding."""

    def __init__(self, events: Iterable[Event] | None = None) -> None:
        self._lock = threading.Lock()
        self._events: list[Event] = list(events or [])

    def read(self) -> list[Event]:
        with self._lock:
            return list(self._events)

    def replace(self, events: Iterable[Event]) -> None:
        with self._lock:
            self._events = list(events)


class JsonEventStore:
    """JSON-file store with atomic writes.

    The on-disk format is ``{"events": [<event in camelCase wire form>, ...]}``.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> list[Event]:
        with self._lock:
            if not self._path.exists():
                logger.debug("Event store file not found; starting empty: %s", self._path)
                return []

            try:
                with self._path.open("r", encoding="utf-8") as fh:
                    data = json.load(fh)
            except (OSError, ValueError) as exc:
                raise EventStoreError(f"Failed to read event store {self._path}: {exc}") from exc

            if not isinstance(data, dict) or not isinstance(data.get("events"), list):
                raise EventStoreError(f"Event store {self._path} must hold an 'events' list")

            try:
                events = [Event.model_validate(item) for item in data["events"]]
            except ValidationError as exc:
                raise EventStoreError(f"Malformed event in {self._path}: {exc}") from exc

            logger.debug("Loaded %d events from %s", len(events), self._path)
            return events

    def replace(self, events: Iterable[Event]) -> None:
        payload = {"events": [event.to_wire() for event in events]}
        with self._lock:
            self._persist(payload)
        logger.debug("Persisted %d events to %s", len(payload["events"]), self._path)

    def _persist(self, payload: dict) -> None:
        """Write to a temp file in the same directory, then replace into place."""
        tmp_path: Path | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", dir=self._path.parent, delete=False, encoding="utf-8", suffix=".tmp"
            ) as tf:
                tmp_path = Path(tf.name)
                json.dump(payload, tf, ensure_ascii=False, indent=2)
                tf.flush()
            tmp_path.replace(self._path)
        except OSError as exc:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    tmp_path.unlink()
            raise EventStoreError(f"Failed to write event store {self._path}: {exc}") from exc
