"""Lifecycle operations for recurring event groups (series).

A series is the set of events whose recurrence rule carries the same group
id. All functions here are pure: they take snapshots and return new values,
leaving persistence to the caller.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Union

from pydantic import ValidationError

from recurcal.calendar.calendar_math import coerce_date
from recurcal.calendar.models import Event, EventPatch, NoRecurrence, Recurrence
from recurcal.exceptions import EventValidationError, GroupIdRequiredError, NoMatchingDatesError

logger = logging.getLogger(__name__)

PatchInput = Union[EventPatch, Mapping[str, Any]]


def new_group_id() -> str:
    """Return a fresh opaque series identifier."""
    return f"repeat-{uuid.uuid4().hex}"


def _require_group_id(group_id: str | None, operation: str) -> str:
    if not group_id or not isinstance(group_id, str):
        logger.error("%s called without a group id", operation)
        raise GroupIdRequiredError(f"{operation} requires a non-empty group id")
    return group_id


def group_members(group_id: str, events: Iterable[Event]) -> list[Event]:
    """Return the members of ``group_id`` in input order."""
    return [event for event in events if event.group_id == group_id]


def materialize_group(template: Event, dates: Sequence[Union[date, str]]) -> list[Event]:
    """Create one series member per date, all stamped with a new group id.

    Members get ``id=None``; the store collaborator assigns ids on create.

    Args:
        template: Event whose fields (other than date and id) every member copies.
            Its rule must be a Recurrence.
        dates: Expanded occurrence dates, as dates or YYYY-MM-DD text

    Returns:
        New events, in the order of ``dates``

    Raises:
        NoMatchingDatesError: If ``dates`` is empty
        EventValidationError: If the template is not recurring or a date is invalid
    """
    if not isinstance(template.repeat, Recurrence):
        raise EventValidationError("materialize_group requires a recurring template")
    if not dates:
        raise NoMatchingDatesError("No dates match the recurrence rule")

    occurrence_dates = [coerce_date(d) for d in dates]
    if None in occurrence_dates:
        bad = [d for d, parsed in zip(dates, occurrence_dates) if parsed is None]
        raise EventValidationError(f"Invalid occurrence dates: {bad!r}")

    group_id = new_group_id()
    rule = template.repeat.model_copy(update={"group_id": group_id})
    members = [
        template.model_copy(update={"id": None, "date": d, "repeat": rule})
        for d in occurrence_dates
    ]
    logger.info(
        "Materialized group %s: %d %s occurrences", group_id, len(members), rule.type.value
    )
    return members


def detach_occurrence(event: Event) -> Event:
    """Return a standalone copy of ``event`` with its rule reset to none."""
    if event.group_id:
        logger.debug("Detaching event %s from group %s", event.id, event.group_id)
    return event.model_copy(update={"repeat": NoRecurrence()})


def _as_patch(diff: PatchInput) -> EventPatch:
    if isinstance(diff, EventPatch):
        return diff
    try:
        data = dict(diff)
    except (TypeError, ValueError) as exc:
        raise EventValidationError(f"Group edit must be a mapping, got {type(diff).__name__}") from exc
    try:
        return EventPatch.model_validate(data)
    except ValidationError as exc:
        raise EventValidationError(f"Invalid group edit: {exc}") from exc


def _merge(event: Event, patch: EventPatch) -> Event:
    changes = patch.model_dump(exclude_unset=True, exclude={"repeat"})
    data = event.model_dump()
    data.update(changes)
    if patch.repeat is not None:
        data["repeat"] = {**data["repeat"], **patch.repeat.model_dump(exclude_unset=True)}
    try:
        return Event.model_validate(data)
    except ValidationError as exc:
        raise EventValidationError(f"Group edit produced an invalid event: {exc}") from exc


def apply_group_edit(group_id: str, diff: PatchInput, events: Sequence[Event]) -> list[Event]:
    """Apply a field diff to every member of a series.

    A partial ``repeat`` in the diff is merged into each member's existing
    rule, so editing only the end date keeps the frequency and group id.

    Args:
        group_id: Series to edit
        diff: EventPatch or mapping using field names or camelCase aliases
        events: Current snapshot

    Returns:
        New list in input order; non-members are returned unchanged.

    Raises:
        GroupIdRequiredError: If group_id is empty
        EventValidationError: If the diff is invalid
    """
    _require_group_id(group_id, "apply_group_edit")
    patch = _as_patch(diff)

    updated = [_merge(e, patch) if e.group_id == group_id else e for e in events]
    logger.debug(
        "Applied edit %s to group %s",
        sorted(patch.model_dump(exclude_unset=True)),
        group_id,
    )
    return updated


@dataclass(frozen=True)
class GroupRemoval:
    """Outcome of :func:`remove_group`."""

    remaining: list[Event] = field(default_factory=list)
    removed: list[Event] = field(default_factory=list)

    @property
    def not_found(self) -> bool:
        return not self.removed


def remove_group(group_id: str, events: Sequence[Event]) -> GroupRemoval:
    """Remove every member of a series.

    When no event matches, ``remaining`` holds the input unchanged and
    ``not_found`` is True.

    Raises:
        GroupIdRequiredError: If group_id is empty
    """
    _require_group_id(group_id, "remove_group")

    remaining: list[Event] = []
    removed: list[Event] = []
    for event in events:
        (removed if event.group_id == group_id else remaining).append(event)

    if not removed:
        logger.warning("remove_group: no events found for group %s", group_id)
    else:
        logger.info("Removed %d events of group %s", len(removed), group_id)
    return GroupRemoval(remaining=remaining, removed=removed)
