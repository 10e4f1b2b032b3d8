"""Event operations: apply core results to the store and notify the user.

``EventOperations`` is the collaborator between the pure recurrence/group
functions and an ``EventStore``. Every public action reports exactly one
human-readable notification. Failures are logged and never retried, and the
cached event list only changes by re-reading the store after a successful
mutation.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol

from recurcal.calendar.models import Event, Recurrence
from recurcal.config_loader import Config
from recurcal.domain.event_store import EventStore
from recurcal.domain.overlap import find_overlaps
from recurcal.domain.recurrence import expand
from recurcal.domain.recurring_groups import (
    PatchInput,
    apply_group_edit,
    group_members,
    materialize_group,
    remove_group,
)
from recurcal.domain.validation import EventForm, validate_form
from recurcal.exceptions import (
    EventNotFoundError,
    EventStoreError,
    EventValidationError,
    GroupIdRequiredError,
    NoMatchingDatesError,
)

logger = logging.getLogger(__name__)

ERROR_MESSAGES = {
    "FETCH_FAILED": "Failed to load events.",
    "SAVE_FAILED": "Failed to save event.",
    "DELETE_FAILED": "Failed to delete event.",
    "UPDATE_FAILED": "Failed to update event.",
    "NO_DATES": "No dates match the selected options.",
}

SUCCESS_MESSAGES = {
    "LOADED": "Events loaded.",
    "CREATED": "Event added.",
    "UPDATED": "Event updated.",
    "DELETED": "Event deleted.",
}


class Notifier(Protocol):
    """Protocol for user-facing notification callables."""

    def __call__(self, message: str, variant: str) -> None:
        """Show one notification.

        Args:
            message: Human-readable text
            variant: "success", "info" or "error"
        """
        ...


def log_notifier(message: str, variant: str) -> None:
    """Default notifier: route notifications to the log."""
    level = logging.WARNING if variant == "error" else logging.INFO
    logger.log(level, "[%s] %s", variant, message)


class SubmitStatus(str, Enum):
    SAVED = "saved"
    FAILED = "failed"
    INVALID = "invalid"
    OVERLAP = "overlap"


@dataclass
class SubmitResult:
    """Outcome of :meth:`EventOperations.submit_form`."""

    status: SubmitStatus
    message: Optional[str] = None
    overlapping: list[Event] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is SubmitStatus.SAVED


class EventOperations:
    """Create, update and delete events and series against an EventStore."""

    def __init__(
        self,
        store: EventStore,
        notifier: Optional[Notifier] = None,
        config: Optional[Config] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.store = store
        self.notify: Notifier = notifier or log_notifier
        self.config = config or Config()
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)
        self._events: list[Event] = []

    @property
    def events(self) -> list[Event]:
        """Last successfully fetched snapshot."""
        return list(self._events)

    def _error(self, key: str) -> None:
        self.notify(ERROR_MESSAGES[key], "error")

    def fetch_events(self) -> bool:
        try:
            self._events = self.store.read()
        except EventStoreError:
            logger.exception("Error fetching events")
            self._error("FETCH_FAILED")
            return False
        return True

    def init(self) -> bool:
        """Initial load, reported with a "loaded" notification on success."""
        if not self.fetch_events():
            return False
        self.notify(SUCCESS_MESSAGES["LOADED"], "info")
        return True

    def save_event(self, event: Event, editing: bool = False) -> bool:
        """Create or update one event.

        An event with a recurring rule but no group id materializes a whole
        series through :meth:`save_recurring_events`. When editing, the series
        replaces the edited event in the same store write.
        """
        if event.is_recurring and event.group_id is None:
            return self.save_recurring_events(event, replaces=event.id if editing else None)

        try:
            current = self.store.read()
            if editing:
                if event.id is None or not any(e.id == event.id for e in current):
                    raise EventNotFoundError(str(event.id))
                updated = [event if e.id == event.id else e for e in current]
            else:
                updated = [*current, event.model_copy(update={"id": self._id_factory()})]
            self.store.replace(updated)
        except (EventStoreError, EventNotFoundError) as exc:
            logger.error("Error saving event: %s", exc)
            self._error("SAVE_FAILED")
            return False

        self.fetch_events()
        self.notify(SUCCESS_MESSAGES["UPDATED" if editing else "CREATED"], "success")
        return True

    def save_recurring_events(self, template: Event, replaces: Optional[str] = None) -> bool:
        """Expand the template's rule and create the whole series at once.

        Args:
            template: Event carrying the recurrence rule
            replaces: Id of an existing event the series takes the place of
        """
        rule = template.repeat
        if not isinstance(rule, Recurrence):
            logger.error("Invalid repeat data for recurring save: %r", rule)
            self._error("SAVE_FAILED")
            return False

        dates = expand(template.date, rule.end_date, rule.type)
        try:
            members = materialize_group(template, dates)
        except NoMatchingDatesError:
            logger.info("Recurring save produced no dates for %s", template.title)
            self._error("NO_DATES")
            return False

        members = [m.model_copy(update={"id": self._id_factory()}) for m in members]
        try:
            current = self.store.read()
            if replaces is not None:
                kept = [e for e in current if e.id != replaces]
                if len(kept) == len(current):
                    raise EventNotFoundError(replaces)
                current = kept
            self.store.replace([*current, *members])
        except (EventStoreError, EventNotFoundError) as exc:
            logger.error("Error saving recurring events: %s", exc)
            self._error("SAVE_FAILED")
            return False

        self.fetch_events()
        self.notify(SUCCESS_MESSAGES["UPDATED" if replaces else "CREATED"], "success")
        return True

    def delete_event(self, event_id: str) -> bool:
        """Delete a single event; siblings in its series are untouched."""
        try:
            current = self.store.read()
            remaining = [e for e in current if e.id != event_id]
            if len(remaining) == len(current):
                raise EventNotFoundError(event_id)
            self.store.replace(remaining)
        except (EventStoreError, EventNotFoundError) as exc:
            logger.error("Error deleting event: %s", exc)
            self._error("DELETE_FAILED")
            return False

        self.fetch_events()
        self.notify(SUCCESS_MESSAGES["DELETED"], "info")
        return True

    def update_recurring_events(self, group_id: str, diff: PatchInput) -> bool:
        """Apply ``diff`` to every member of a series."""
        try:
            current = self.store.read()
            if not group_members(group_id, current) and group_id:
                logger.warning("No events found for group %s", group_id)
                raise EventNotFoundError(group_id)
            self.store.replace(apply_group_edit(group_id, diff, current))
        except (
            GroupIdRequiredError,
            EventValidationError,
            EventNotFoundError,
            EventStoreError,
        ) as exc:
            logger.error("Error updating recurring events: %s", exc)
            self._error("UPDATE_FAILED")
            return False

        self.fetch_events()
        self.notify(SUCCESS_MESSAGES["UPDATED"], "success")
        return True

    def delete_recurring_events(self, group_id: str) -> bool:
        """Delete every member of a series."""
        try:
            result = remove_group(group_id, self.store.read())
            if result.not_found:
                raise EventNotFoundError(group_id)
            self.store.replace(result.remaining)
        except (GroupIdRequiredError, EventNotFoundError, EventStoreError) as exc:
            logger.error("Error deleting recurring events: %s", exc)
            self._error("DELETE_FAILED")
            return False

        self.fetch_events()
        self.notify(SUCCESS_MESSAGES["DELETED"], "info")
        return True

    def submit_form(
        self,
        form: EventForm,
        editing_event: Optional[Event] = None,
        confirm_overlap: bool = False,
    ) -> SubmitResult:
        """Validate and save a form.

        A form opened for "all" occurrences that is still repeating updates
        the whole series of ``editing_event``. Any other save is first checked for overlaps (a new series by
        its first occurrence); when any exist and ``confirm_overlap`` is False
        nothing is saved and the overlapping events are returned for
        confirmation.
        """
        message = validate_form(form, self.config.max_repeat_end_date)
        if message:
            self.notify(message, "error")
            return SubmitResult(SubmitStatus.INVALID, message)

        if (
            form.edit_all
            and form.is_repeating
            and editing_event is not None
            and editing_event.group_id
        ):
            try:
                patch = form.to_patch()
            except EventValidationError as exc:
                logger.error("Error building series edit: %s", exc)
                self._error("UPDATE_FAILED")
                return SubmitResult(SubmitStatus.FAILED, ERROR_MESSAGES["UPDATE_FAILED"])
            ok = self.update_recurring_events(editing_event.group_id, patch)
            return SubmitResult(SubmitStatus.SAVED if ok else SubmitStatus.FAILED)

        try:
            event = form.to_event(editing_event.id if editing_event else None)
        except EventValidationError as exc:
            logger.error("Error building event from form: %s", exc)
            self._error("SAVE_FAILED")
            return SubmitResult(SubmitStatus.FAILED, ERROR_MESSAGES["SAVE_FAILED"])

        if not confirm_overlap:
            overlapping = find_overlaps(event, self._events)
            if overlapping:
                logger.info("Event %r overlaps %d existing events", event.title, len(overlapping))
                return SubmitResult(SubmitStatus.OVERLAP, overlapping=overlapping)

        ok = self.save_event(event, editing=editing_event is not None)
        return SubmitResult(SubmitStatus.SAVED if ok else SubmitStatus.FAILED)

    def handle_recurring_choice(
        self, event: Event, action: str, choice: str
    ) -> Optional[EventForm]:
        """Resolve the "this occurrence or all occurrences" prompt.

        Args:
            event: The series member the user acted on
            action: "edit" or "delete"
            choice: "single", "all" or "cancel"

        Returns:
            For edits, the form to open: detached from the series for
            "single", still repeating for "all". None for deletes and cancel.
        """
        if choice == "cancel":
            return None
        if choice not in ("single", "all"):
            raise ValueError(f"Unknown recurring choice {choice!r}")

        if action == "edit":
            if choice == "single":
                return EventForm.detached_from(event)
            return EventForm.from_event(event, edit_all=True)

        if action == "delete":
            if choice == "single" or not event.group_id:
                self.delete_event(str(event.id))
            else:
                self.delete_recurring_events(event.group_id)
            return None

        raise ValueError(f"Unknown recurring action {action!r}")
