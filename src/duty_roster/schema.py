"""Input validation for canonical persisted state."""

from __future__ import annotations

from typing import Any

from duty_roster.dates import parse_iso_date


def _is_iso_date(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        parse_iso_date(value)
    except ValueError:
        return False
    return True


def validate_pattern_history(history: Any) -> list[str]:
    """Validate patternHistory. Returns list of error messages (empty = valid).

    Checks:
    - history is a list of objects
    - each entry has an ISO effectiveDate
    - each pattern is a list of strings
    """
    if not isinstance(history, list):
        return [f"patternHistory must be a list, got {type(history).__name__}"]

    errors: list[str] = []
    for i, entry in enumerate(history):
        if not isinstance(entry, dict):
            errors.append(f"patternHistory[{i}]: expected an object, got {entry!r}")
            continue

        if not _is_iso_date(entry.get("effectiveDate")):
            errors.append(
                f"patternHistory[{i}]: invalid effectiveDate "
                f"{entry.get('effectiveDate')!r}"
            )

        pattern = entry.get("pattern")
        if not isinstance(pattern, list):
            errors.append(f"patternHistory[{i}]: pattern must be a list")
        elif not all(isinstance(p, str) for p in pattern):
            errors.append(f"patternHistory[{i}]: pattern entries must be strings")

    return errors


def validate_daily_tasks(tasks: Any) -> list[str]:
    """Validate dailyTasks. Returns list of error messages.

    Checks:
    - keys parse as ISO dates
    - each value is a list of record objects
    - each record has an id and a string description

    Optional fields are not checked here; record_from_dict coerces them.
    Unparseable times are tolerated and skipped when averaging.
    """
    if not isinstance(tasks, dict):
        return [f"dailyTasks must be an object, got {type(tasks).__name__}"]

    errors: list[str] = []
    for date_str, records in tasks.items():
        if not _is_iso_date(date_str):
            errors.append(f"Invalid date: {date_str}")
            continue

        if not isinstance(records, list):
            errors.append(f"Date {date_str}: records must be a list")
            continue

        for i, record in enumerate(records):
            if not isinstance(record, dict):
                errors.append(f"Date {date_str}, record {i}: expected an object")
                continue

            record_id = record.get("id")
            if isinstance(record_id, bool) or not isinstance(record_id, (str, int)):
                errors.append(f"Date {date_str}, record {i}: missing 'id'")

            if not isinstance(record.get("description"), str):
                errors.append(
                    f"Date {date_str}, record {i}: 'description' must be a string"
                )

    return errors


def validate_state(state: Any) -> list[str]:
    """Validate a migrated, canonical state object."""
    if not isinstance(state, dict):
        return [f"state must be an object, got {type(state).__name__}"]

    errors = validate_pattern_history(state.get("patternHistory", []))
    errors.extend(validate_daily_tasks(state.get("dailyTasks", {})))
    return errors
