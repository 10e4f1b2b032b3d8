"""Event form state and the checks run before an event is saved.

The form is plain, serializable state: raw text fields exactly as a user
entered them. Conversion to an ``Event`` happens only after validation.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from recurcal.calendar.calendar_math import coerce_date, format_date, parse_date
from recurcal.calendar.models import (
    TIME_FORMAT,
    Event,
    EventPatch,
    NoRecurrence,
    Recurrence,
    RecurrencePatch,
    RecurrenceRule,
    RepeatType,
    parse_time,
)
from recurcal.config_loader import DEFAULT_CATEGORY, DEFAULT_NOTIFICATION_MINUTES, Config
from recurcal.domain.recurring_groups import detach_occurrence
from recurcal.exceptions import EventValidationError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields."
TIME_ERROR_MESSAGE = "Please check the start and end times."
INVALID_DATE_MESSAGE = "Please enter a valid date (YYYY-MM-DD)."
MISSING_REPEAT_END_MESSAGE = "Please choose an end date for the repeating event."
INVALID_REPEAT_END_MESSAGE = "The end date must be on or after the start date."
START_TIME_ERROR = "Start time must be before end time."
END_TIME_ERROR = "End time must be after start time."


def exceeds_max_date_message(ceiling: date) -> str:
    return f"The end date must be on or before {format_date(ceiling)}."


class TimeErrors(NamedTuple):
    start_time_error: Optional[str]
    end_time_error: Optional[str]

    @property
    def has_error(self) -> bool:
        return self.start_time_error is not None or self.end_time_error is not None


def get_time_error_message(start_time: str, end_time: str) -> TimeErrors:
    """Flag both fields when the start is not strictly before the end.

    Empty or unparseable input is not flagged here; required-field and
    format checks report those.
    """
    start = parse_time(start_time)
    end = parse_time(end_time)
    if start is None or end is None or start < end:
        return TimeErrors(None, None)
    return TimeErrors(START_TIME_ERROR, END_TIME_ERROR)


def validate_repeat_window(start: str | date, end: str | date, ceiling: date) -> Optional[str]:
    """Check a recurrence window against the configured ceiling.

    Returns:
        A user-facing message, or None when the window is acceptable
    """
    start_date = coerce_date(start)
    end_date = coerce_date(end)
    if start_date is None or end_date is None:
        return INVALID_DATE_MESSAGE
    if end_date < start_date:
        return INVALID_REPEAT_END_MESSAGE
    if end_date > ceiling:
        return exceeds_max_date_message(ceiling)
    return None


class EventForm(BaseModel):
    """Editable form state for one event."""

    model_config = ConfigDict(validate_assignment=True)

    title: str = ""
    date: str = ""
    start_time: str = ""
    end_time: str = ""
    description: str = ""
    location: str = ""
    category: str = DEFAULT_CATEGORY
    is_repeating: bool = False
    repeat_type: RepeatType = RepeatType.NONE
    repeat_interval: int = 1
    repeat_end_date: str = ""
    notification_time: int = DEFAULT_NOTIFICATION_MINUTES
    # set only when the form was opened to edit every occurrence of a series
    edit_all: bool = False

    @classmethod
    def blank(cls, config: Config | None = None) -> EventForm:
        """Empty form with configured defaults."""
        if config is None:
            return cls()
        return cls(
            category=config.default_category,
            notification_time=config.default_notification_minutes,
        )

    @classmethod
    def from_event(cls, event: Event, edit_all: bool = False) -> EventForm:
        """Load an existing event for editing."""
        rule = event.repeat
        return cls(
            title=event.title,
            date=format_date(event.date),
            start_time=event.start_time.strftime(TIME_FORMAT),
            end_time=event.end_time.strftime(TIME_FORMAT),
            description=event.description,
            location=event.location,
            category=event.category,
            is_repeating=rule.is_recurring,
            repeat_type=rule.type,
            repeat_interval=rule.interval if isinstance(rule, Recurrence) else 1,
            repeat_end_date=format_date(rule.end_date) if isinstance(rule, Recurrence) else "",
            notification_time=event.notification_time,
            edit_all=edit_all,
        )

    @classmethod
    def detached_from(cls, event: Event) -> EventForm:
        """Load one series member for a single-occurrence edit."""
        return cls.from_event(detach_occurrence(event))

    @property
    def time_errors(self) -> TimeErrors:
        return get_time_error_message(self.start_time, self.end_time)

    def _rule(self) -> RecurrenceRule:
        if not self.is_repeating or self.repeat_type is RepeatType.NONE:
            return NoRecurrence()
        return Recurrence(
            type=self.repeat_type,
            interval=self.repeat_interval,
            end_date=self.repeat_end_date,
        )

    def to_event(self, event_id: str | None = None) -> Event:
        """Build the event payload this form describes.

        Raises:
            EventValidationError: If a field does not form a valid event
        """
        try:
            return Event(
                id=event_id,
                title=self.title,
                date=self.date,
                start_time=self.start_time,
                end_time=self.end_time,
                description=self.description,
                location=self.location,
                category=self.category,
                repeat=self._rule(),
                notification_time=self.notification_time,
            )
        except ValidationError as exc:
            raise EventValidationError(f"Invalid event form: {exc}") from exc

    def to_patch(self) -> EventPatch:
        """Diff applied to every member when the form edits a whole series."""
        try:
            repeat_fields: dict[str, object] = {"type": self.repeat_type}
            if self.repeat_end_date:
                repeat_fields["end_date"] = self.repeat_end_date
            repeat = RecurrencePatch(**repeat_fields)
            return EventPatch(
                title=self.title,
                start_time=self.start_time,
                end_time=self.end_time,
                description=self.description,
                location=self.location,
                category=self.category,
                notification_time=self.notification_time,
                repeat=repeat if self.is_repeating else None,
            )
        except ValidationError as exc:
            raise EventValidationError(f"Invalid event form: {exc}") from exc


def validate_form(form: EventForm, ceiling: date) -> Optional[str]:
    """Run the pre-save checks on a form.

    Returns:
        The first user-facing error message, or None when the form can be saved
    """
    if not (form.title and form.date and form.start_time and form.end_time):
        return REQUIRED_FIELDS_MESSAGE
    if parse_date(form.date) is None:
        return INVALID_DATE_MESSAGE
    if parse_time(form.start_time) is None or parse_time(form.end_time) is None:
        return TIME_ERROR_MESSAGE
    if form.time_errors.has_error:
        return TIME_ERROR_MESSAGE

    if form.is_repeating and form.repeat_type is not RepeatType.NONE:
        if not form.repeat_end_date:
            return MISSING_REPEAT_END_MESSAGE
        message = validate_repeat_window(form.date, form.repeat_end_date, ceiling)
        if message:
            logger.debug("Repeat window rejected: %s", message)
            return message
    return None
