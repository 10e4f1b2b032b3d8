"""Data models for calendar events and their recurrence rules."""

from datetime import date, time
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from .calendar_math import format_date, parse_date

# Boundary time format, e.g. "09:30"
TIME_FORMAT = "%H:%M"

# Date-only calendar value
CalendarDate = date


def _strict_date(value: Any) -> Any:
    """Reject date text that is not strict YYYY-MM-DD; pass other input through."""
    if isinstance(value, str):
        parsed = parse_date(value)
        if parsed is None:
            raise ValueError(f"invalid date {value!r}; expected an existing YYYY-MM-DD date")
        return parsed
    return value


def parse_time(text: object) -> Optional[time]:
    """Parse strict ``HH:MM`` text; None for anything else."""
    if not isinstance(text, str) or len(text) != 5 or text[2] != ":":
        return None
    hours, minutes = text[:2], text[3:]
    if not (hours.isascii() and hours.isdigit() and minutes.isascii() and minutes.isdigit()):
        return None
    try:
        return time(int(hours), int(minutes))
    except ValueError:
        return None


def _strict_time(value: Any) -> Any:
    if isinstance(value, str):
        parsed = parse_time(value)
        if parsed is None:
            raise ValueError(f"invalid time {value!r}; expected HH:MM")
        return parsed
    return value


class RepeatType(str, Enum):
    """Supported recurrence frequencies."""

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class _WireModel(BaseModel):
    """Frozen model with camelCase wire aliases."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class NoRecurrence(_WireModel):
    """Rule of a standalone event. Never carries a group id."""

    type: RepeatType = Field(default=RepeatType.NONE, description="Always 'none'")

    @field_validator("type")
    @classmethod
    def _must_be_none(cls, value: RepeatType) -> RepeatType:
        if value is not RepeatType.NONE:
            raise ValueError("NoRecurrence requires type 'none'")
        return value

    @property
    def group_id(self) -> None:
        return None

    @property
    def is_recurring(self) -> bool:
        return False


class Recurrence(_WireModel):
    """Rule of a recurring series member.

    ``group_id`` is set once the series has been materialized; every member
    of one series shares it.
    """

    type: RepeatType = Field(..., description="Recurrence frequency")
    interval: int = Field(default=1, ge=1, le=1, description="Fixed at 1")
    end_date: CalendarDate = Field(..., description="Last date the series may occupy (inclusive)")
    group_id: Optional[str] = Field(default=None, description="Shared series identifier")

    @field_validator("type")
    @classmethod
    def _must_repeat(cls, value: RepeatType) -> RepeatType:
        if value is RepeatType.NONE:
            raise ValueError("Recurrence requires a repeating type")
        return value

    @field_validator("end_date", mode="before")
    @classmethod
    def _validate_end_date(cls, value: Any) -> Any:
        return _strict_date(value)

    @field_serializer("end_date", when_used="json")
    def _serialize_end_date(self, value: CalendarDate) -> str:
        return format_date(value)

    @property
    def is_recurring(self) -> bool:
        return True


RecurrenceRule = Union[NoRecurrence, Recurrence]


class Event(_WireModel):
    """One concrete dated occurrence, standalone or part of a series."""

    id: Optional[str] = Field(default=None, description="Store-assigned event id")
    title: str = Field(..., description="Event title")
    date: CalendarDate = Field(..., description="Calendar date of the occurrence")
    start_time: time = Field(..., description="Start time of day")
    end_time: time = Field(..., description="End time of day")
    description: str = Field(default="", description="Free-form description")
    location: str = Field(default="", description="Location text")
    category: str = Field(default="Work", description="Category label")
    repeat: RecurrenceRule = Field(default_factory=NoRecurrence, description="Recurrence rule")
    notification_time: int = Field(
        default=10, ge=0, description="Reminder offset in minutes before start"
    )

    @field_validator("date", mode="before")
    @classmethod
    def _validate_date(cls, value: Any) -> Any:
        return _strict_date(value)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _validate_time(cls, value: Any) -> Any:
        return _strict_time(value)

    @field_serializer("date", when_used="json")
    def _serialize_date(self, value: CalendarDate) -> str:
        return format_date(value)

    @field_serializer("start_time", "end_time", when_used="json")
    def _serialize_time(self, value: time) -> str:
        return value.strftime(TIME_FORMAT)

    @property
    def group_id(self) -> Optional[str]:
        """Series id, or None for standalone events."""
        return self.repeat.group_id

    @property
    def is_recurring(self) -> bool:
        return self.repeat.is_recurring

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON-compatible form used at boundaries."""
        return self.model_dump(mode="json", by_alias=True)


class RecurrencePatch(_WireModel):
    """Partial recurrence rule merged into an existing rule."""

    type: Optional[RepeatType] = None
    interval: Optional[int] = None
    end_date: Optional[CalendarDate] = None

    @field_validator("end_date", mode="before")
    @classmethod
    def _validate_end_date(cls, value: Any) -> Any:
        return _strict_date(value)


class EventPatch(_WireModel):
    """Field diff applied to every member of a series.

    Ids, dates and the group id are not editable through a patch, so an
    edit-all can never regenerate or collapse the series' date set.
    """

    title: Optional[str] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    description: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    notification_time: Optional[int] = Field(default=None, ge=0)
    repeat: Optional[RecurrencePatch] = None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _validate_time(cls, value: Any) -> Any:
        return _strict_time(value)
