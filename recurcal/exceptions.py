"""Custom exception hierarchy for recurcal.

Each failure the event operations layer can report to the user has its own
exception type, so callers can tell a misused group id apart from an empty
expansion or a store failure.
"""


class RecurcalError(Exception):
    """Base exception for all recurcal errors."""


class NoMatchingDatesError(RecurcalError):
    """A valid recurrence rule produced zero dates.

    Raised when:
    - The expansion window contains no date matching the rule
      (e.g. "31st of every month" over a February-to-April window)

    Reported to the user as "no matching dates", not as a save failure.
    """


class GroupIdRequiredError(RecurcalError):
    """A group-scoped edit or delete was issued without a group id."""


class EventValidationError(RecurcalError, ValueError):
    """Event or form input failed validation at a boundary.

    Raised when:
    - Date text is not in strict YYYY-MM-DD form or is not a real date
    - Time text is not in HH:MM form
    - A recurrence rule is structurally invalid
    """


class EventStoreError(RecurcalError):
    """Reading from or writing to the event store failed."""


class EventNotFoundError(RecurcalError):
    """No event with the requested id exists in the store."""

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event {event_id!r} not found")
        self.event_id = event_id
