"""recurcal - recurring calendar events core.

Expands recurrence rules into concrete dates and manages the lifecycle of the
resulting event series (detach one, edit all, delete all).
"""

__version__ = "0.1.0"

from recurcal.domain.overlap import find_overlaps
from recurcal.domain.recurrence import expand, expand_to_strings
from recurcal.domain.recurring_groups import (
    apply_group_edit,
    detach_occurrence,
    materialize_group,
    remove_group,
)

__all__ = [
    "__version__",
    "apply_group_edit",
    "detach_occurrence",
    "expand",
    "expand_to_strings",
    "find_overlaps",
    "materialize_group",
    "remove_group",
]
