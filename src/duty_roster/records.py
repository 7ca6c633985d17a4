"""Layer 1: DailyRecordStore: sparse date → ordered task records."""

from __future__ import annotations

import logging
import re
import secrets
import time
from dataclasses import replace
from datetime import date
from typing import Iterable, Iterator

from duty_roster.dates import to_iso_date
from duty_roster.types import TaskRecord, TimeSuggestion, parse_assignees

logger = logging.getLogger(__name__)

_HHMM = re.compile(r"[0-9]{2}:[0-9]{2}")


def new_record_id() -> str:
    """Opaque unique token: millisecond timestamp plus random suffix."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(6)}"


def time_to_minutes(value: str | None) -> int | None:
    """Minutes since midnight for a valid 'HH:MM', else None.

    Valid means two-digit hour and minute with hour < 24, minute < 60.
    """
    if not value or not _HHMM.fullmatch(value):
        return None
    hours, minutes = int(value[:2]), int(value[3:])
    if hours >= 24 or minutes >= 60:
        return None
    return hours * 60 + minutes


def minutes_to_time(total: int) -> str:
    return f"{total // 60:02d}:{total % 60:02d}"


def _average_time(samples: list[int]) -> str:
    if not samples:
        return ""
    # Round half up, not to even
    mean = (2 * sum(samples) + len(samples)) // (2 * len(samples))
    return minutes_to_time(mean)


class DailyRecordStore:
    """Sparse mapping of ISO date → records in display order.

    Invariant: no date maps to an empty list.
    """

    def __init__(
        self, records: dict[str, Iterable[TaskRecord]] | None = None
    ) -> None:
        self._by_date: dict[str, list[TaskRecord]] = {}
        for date_str, items in (records or {}).items():
            items = list(items)
            if items:
                self._by_date.setdefault(to_iso_date(date_str), []).extend(items)

    def __len__(self) -> int:
        return len(self._by_date)

    def __contains__(self, d: object) -> bool:
        try:
            return to_iso_date(d) in self._by_date  # type: ignore[arg-type]
        except ValueError:
            return False

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_date)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DailyRecordStore):
            return NotImplemented
        return self._by_date == other._by_date

    def __repr__(self) -> str:
        return f"DailyRecordStore({self._by_date!r})"

    def items(self) -> Iterator[tuple[str, tuple[TaskRecord, ...]]]:
        for date_str, items in self._by_date.items():
            yield date_str, tuple(items)

    def dates(self) -> list[str]:
        """Dates holding at least one record, sorted."""
        return sorted(self._by_date)

    def records_on(self, d: date | str) -> tuple[TaskRecord, ...]:
        return tuple(self._by_date.get(to_iso_date(d), ()))

    def get(self, d: date | str, record_id: str) -> TaskRecord | None:
        for record in self._by_date.get(to_iso_date(d), ()):
            if record.id == record_id:
                return record
        return None

    def upsert(self, d: date | str, record: TaskRecord) -> TaskRecord:
        """Replace the record with the same id in place, or append it.

        A record without an id gets a fresh one before being appended.
        """
        date_str = to_iso_date(d)
        if not record.id:
            record = replace(record, id=new_record_id())

        items = self._by_date.setdefault(date_str, [])
        for i, existing in enumerate(items):
            if existing.id == record.id:
                items[i] = record
                return record
        items.append(record)
        return record

    def remove(self, d: date | str, record_id: str) -> bool:
        """Delete a record. Unknown date or id is a no-op returning False."""
        date_str = to_iso_date(d)
        items = self._by_date.get(date_str)
        if items is None:
            logger.warning("remove: no records on %s", date_str)
            return False

        kept = [r for r in items if r.id != record_id]
        if len(kept) == len(items):
            logger.warning("remove: no record %r on %s", record_id, date_str)
            return False

        if kept:
            self._by_date[date_str] = kept
        else:
            del self._by_date[date_str]
        return True

    # ------------------------------------------------------------------
    # Suggestions
    # ------------------------------------------------------------------

    def _all_records(self) -> Iterator[TaskRecord]:
        for items in self._by_date.values():
            yield from items

    def all_descriptions(self) -> list[str]:
        """Distinct non-empty descriptions, sorted."""
        return sorted({r.description for r in self._all_records() if r.description})

    def all_assignees(self) -> list[str]:
        """Distinct names parsed from every record's assignee, sorted."""
        names: set[str] = set()
        for record in self._all_records():
            names.update(parse_assignees(record.assignee))
        return sorted(names)

    def suggested_times_for(self, description: str) -> TimeSuggestion:
        """Average valid start/end times over records with this exact description."""
        starts: list[int] = []
        ends: list[int] = []
        for record in self._all_records():
            if record.description != description:
                continue
            start = time_to_minutes(record.start_time)
            if start is not None:
                starts.append(start)
            end = time_to_minutes(record.end_time)
            if end is not None:
                ends.append(end)

        return TimeSuggestion(
            start_time=_average_time(starts),
            end_time=_average_time(ends),
        )
