"""Pairwise overlap detection between events on the same day."""

from collections.abc import Iterable

from recurcal.calendar.models import Event


def is_overlapping(a: Event, b: Event) -> bool:
    """True when both events share a date and their [start, end) intervals intersect.

    Touching intervals (one ends exactly when the other starts) do not overlap.
    """
    if a.date != b.date:
        return False
    return a.start_time < b.end_time and b.start_time < a.end_time


def find_overlaps(candidate: Event, existing: Iterable[Event]) -> list[Event]:
    """Return the events in ``existing`` that overlap ``candidate``, in order.

    An event with the candidate's own id is skipped, so an event being edited
    never conflicts with its stored version.
    """
    return [
        event
        for event in existing
        if not (candidate.id is not None and event.id == candidate.id)
        and is_overlapping(candidate, event)
    ]
