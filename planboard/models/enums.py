"""
Enum definitions for the application.

These enums are used across models and provide type-safe category/kind values.
"""

from enum import Enum, IntEnum


class TodoCategory(str, Enum):
    """Workload category of a scheduled item."""

    EXTERNAL = "external"  # imported calendar event
    INTERNAL = "internal"  # project todo
    BUFFER = "buffer"  # reserved slack time


class FragmentKind(str, Enum):
    """
    Provenance of a schedule entry.

    WHOLE = the todo itself (possibly shortened for the day)
    BREAK_SPLIT = the part of a todo continued after the break window
    OVERFLOW = the part of a todo carried over to a following day
    """

    WHOLE = "WHOLE"
    BREAK_SPLIT = "BREAK_SPLIT"
    OVERFLOW = "OVERFLOW"


class TodoPriority(IntEnum):
    """Todo priority (higher value is scheduled first)."""

    LOW = 0
    MEDIUM = 1
    HIGH = 2
