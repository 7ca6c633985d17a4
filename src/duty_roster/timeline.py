"""Layer 1: PatternTimeline: append-only log of date-effective roster patterns."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Iterator, Sequence

from duty_roster.dates import parse_iso_date
from duty_roster.types import PatternEntry


class PatternTimeline:
    """Ordered, append-only history of pattern snapshots.

    Entries are kept in insertion order. Effective dates need not be
    monotonic: a backdated or future-dated entry may be appended after
    later ones. Resolution sorts by effective date, stably, so that among
    entries sharing a date the last appended wins.
    """

    def __init__(self, entries: Iterable[PatternEntry] = ()) -> None:
        self._entries: list[PatternEntry] = list(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[PatternEntry]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PatternTimeline):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"PatternTimeline({self._entries!r})"

    @property
    def entries(self) -> tuple[PatternEntry, ...]:
        return tuple(self._entries)

    def append(
        self, pattern: Sequence[str], effective_date: date | str
    ) -> PatternEntry:
        """Append a new snapshot. No uniqueness or ordering checks."""
        entry = PatternEntry(
            effective_date=parse_iso_date(effective_date),
            pattern=tuple(pattern),
        )
        self._entries.append(entry)
        return entry

    def current_pattern(self) -> tuple[str, ...]:
        """Pattern of the most recently appended entry, or ()."""
        if not self._entries:
            return ()
        return self._entries[-1].pattern

    def pattern_effective_on(self, d: date | str) -> tuple[str, ...]:
        """Pattern in force on a date.

        The last entry (by effective date, then insertion order) whose
        effective date is on or before ``d``. Returns () when ``d``
        precedes every entry.
        """
        target = parse_iso_date(d)
        in_force: tuple[str, ...] = ()
        # sorted() is stable: insertion order breaks ties
        for entry in sorted(self._entries, key=lambda e: e.effective_date):
            if entry.effective_date > target:
                break
            in_force = entry.pattern
        return in_force

    def people(self) -> set[str]:
        """Every name that appears in any snapshot."""
        return {person for entry in self._entries for person in entry.pattern}


# ----------------------------------------------------------------------
# Pattern edits. Each returns the new sequence, or None for a no-op.
# Callers append the result dated today.
# ----------------------------------------------------------------------

def with_person_added(
    pattern: Sequence[str], name: str
) -> tuple[str, ...] | None:
    name = (name or "").strip()
    if not name:
        return None
    return (*pattern, name)


def with_person_removed(
    pattern: Sequence[str], index: int
) -> tuple[str, ...] | None:
    if index < 0 or index >= len(pattern):
        return None
    return tuple(p for i, p in enumerate(pattern) if i != index)


def with_persons_swapped(
    pattern: Sequence[str], first: int, second: int
) -> tuple[str, ...] | None:
    size = len(pattern)
    if first < 0 or second < 0 or first >= size or second >= size:
        return None
    updated = list(pattern)
    updated[first], updated[second] = updated[second], updated[first]
    return tuple(updated)


def with_person_moved(
    pattern: Sequence[str], from_index: int, to_index: int
) -> tuple[str, ...] | None:
    """Move one slot to a new position, shifting the others."""
    size = len(pattern)
    if from_index == to_index:
        return None
    if not (0 <= from_index < size and 0 <= to_index < size):
        return None
    updated = list(pattern)
    person = updated.pop(from_index)
    updated.insert(to_index, person)
    return tuple(updated)
