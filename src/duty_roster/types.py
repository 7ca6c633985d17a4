"""Shared types: pattern entries, day records, resolved views and errors."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import ClassVar


def parse_assignees(assignee: str | None) -> list[str]:
    """Split a comma-joined assignee string into trimmed, non-empty names."""
    if not assignee:
        return []
    return [name.strip() for name in assignee.split(",") if name.strip()]


@dataclass(frozen=True)
class PatternEntry:
    """One immutable snapshot of the roster pattern.

    Invariants:
        - pattern order is significant; duplicates are allowed
        - entries are never edited; a change appends a new entry
    """

    effective_date: date
    pattern: tuple[str, ...]


@dataclass(frozen=True)
class TaskRecord:
    """A task scheduled on one date. Insertion order is display order.

    ``assignee`` is a comma-joined list of names and may be empty.
    Times are ``HH:MM`` strings or empty; they are not validated on write.
    """

    id: str
    description: str
    assignee: str = ""
    start_time: str = ""
    end_time: str = ""
    note: str = ""

    is_assignment: ClassVar[bool] = False

    @property
    def assignees(self) -> list[str]:
        return parse_assignees(self.assignee)


@dataclass(frozen=True)
class OverrideRecord(TaskRecord):
    """Full-day override of the rotation's assignee.

    Only legacy data produces these; they are honoured on read.
    """

    is_assignment: ClassVar[bool] = True

    @property
    def person(self) -> str:
        return self.assignee or self.description


@dataclass(frozen=True)
class ResolvedAssignment:
    """Who is on duty for a date, plus an optional note. Never persisted."""

    person: str
    note: str = ""


@dataclass(frozen=True)
class TimeSuggestion:
    """Average start/end time for a description; empty when unknown."""

    start_time: str = ""
    end_time: str = ""


@dataclass(frozen=True)
class DaySchedule:
    """Resolved assignment plus the ordinary (non-override) tasks of a day."""

    date: date
    assignment: ResolvedAssignment
    tasks: tuple[TaskRecord, ...]


@dataclass(frozen=True)
class WeekSchedule:
    """Monday..Sunday view of the roster."""

    week_number: int
    days: tuple[DaySchedule, ...]
    has_weekend_activity: bool

    @property
    def visible_days(self) -> tuple[DaySchedule, ...]:
        """Mon-Fri, or the full week when Saturday or Sunday has records."""
        if self.has_weekend_activity:
            return self.days
        return self.days[:5]


class MalformedInputError(ValueError):
    """Raised when persisted or imported state cannot be parsed or validated."""

    def __init__(self, source: str, errors: list[str]) -> None:
        self.source = source
        self.errors = list(errors)
        super().__init__(
            f"Malformed {source}: "
            + "; ".join(self.errors)
        )
