"""Boundary: calendar date arithmetic: ISO strings, weeks, epoch offsets."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta

EPOCH = date(2024, 1, 1)  # a Monday; rotation phase is anchored here

_YYYY_MM_DD = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def _reject_aware(value: date, name: str) -> None:
    """Reject timezone-aware datetimes. Dates are local calendar dates."""
    if isinstance(value, datetime) and value.tzinfo is not None:
        raise TypeError(
            f"{name} must be a naive datetime or a date (no tzinfo), "
            f"got tzinfo={value.tzinfo!r}. "
            f"All dates are local calendar dates."
        )


def parse_iso_date(value: date | str) -> date:
    """Coerce a date, naive datetime or 'YYYY-MM-DD' string to a date.

    Raises ValueError for anything else.
    """
    if isinstance(value, datetime):
        _reject_aware(value, "value")
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        # fromisoformat also takes week dates and compact forms
        if not _YYYY_MM_DD.fullmatch(value):
            raise ValueError(f"Invalid calendar date: {value!r}")
        try:
            return date.fromisoformat(value)
        except ValueError:
            raise ValueError(f"Invalid calendar date: {value!r}") from None
    raise ValueError(f"Invalid calendar date: {value!r}")


def to_iso_date(value: date | str) -> str:
    """Format as zero-padded YYYY-MM-DD from the local calendar fields."""
    d = parse_iso_date(value)
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def week_start(value: date | str) -> date:
    """Monday on or before the given date. Sunday counts as day 7."""
    d = parse_iso_date(value)
    return d - timedelta(days=d.weekday())


def week_dates(value: date | str) -> list[date]:
    """Monday..Sunday of the week containing the given date."""
    monday = week_start(value)
    return [monday + timedelta(days=i) for i in range(7)]


def iso_week_number(value: date | str) -> int:
    """ISO-8601 week number.

    Shift to the Thursday of the containing week; week 1 is the week
    holding the year's first Thursday.
    """
    d = parse_iso_date(value)
    thursday = d + timedelta(days=3 - d.weekday())
    year_start = date(thursday.year, 1, 1)
    return (thursday - year_start).days // 7 + 1


def days_since_epoch(value: date | str, epoch: date = EPOCH) -> int:
    """Whole days from epoch to the given date (negative before epoch)."""
    return (parse_iso_date(value) - parse_iso_date(epoch)).days


def weeks_since_epoch(value: date | str, epoch: date = EPOCH) -> int:
    """floor(days_since_epoch / 7)."""
    return days_since_epoch(value, epoch) // 7
