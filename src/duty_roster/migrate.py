"""LegacyMigrator: upgrade older persisted shapes to the canonical one.

Three earlier generations exist in the wild:

1. flat ``pattern`` + ``specificAssignments`` (date -> {person, note})
2. flat ``pattern`` + unified ``dailyTasks``
3. ``patternHistory`` + ``dailyTasks`` (possibly still carrying
   ``specificAssignments`` from generation 1)

The canonical shape is ``{"patternHistory": [...], "dailyTasks": {...}}``.
Migration only adds missing pieces; it never deletes or reorders
existing canonical data and is idempotent.
"""

from __future__ import annotations

import copy
import enum
import logging
from collections.abc import Mapping
from datetime import date
from typing import Any

from duty_roster.dates import to_iso_date
from duty_roster.records import new_record_id
from duty_roster.types import MalformedInputError

logger = logging.getLogger(__name__)


class SchemaGeneration(enum.Enum):
    EMPTY = "empty"
    FLAT_ASSIGNMENTS = "flat-pattern+specific-assignments"
    FLAT_TASKS = "flat-pattern+daily-tasks"
    HISTORY_TASKS = "pattern-history+daily-tasks+specific-assignments"
    CANONICAL = "canonical"


def detect_generation(raw: Any) -> SchemaGeneration:
    """Classify a deserialized object by which optional keys it carries.

    A flat pattern counts as FLAT_ASSIGNMENTS only when it carries
    specificAssignments and no dailyTasks; a bare flat pattern is
    FLAT_TASKS with an empty task map.
    """
    if not isinstance(raw, Mapping):
        raise MalformedInputError("state", [
            f"expected a JSON object, got {type(raw).__name__}"
        ])

    has_history = isinstance(raw.get("patternHistory"), list)
    has_flat = isinstance(raw.get("pattern"), list)
    has_legacy = isinstance(raw.get("specificAssignments"), Mapping)
    has_tasks = isinstance(raw.get("dailyTasks"), Mapping)

    if has_history:
        return SchemaGeneration.HISTORY_TASKS if has_legacy else SchemaGeneration.CANONICAL
    if has_flat:
        if has_legacy and not has_tasks:
            return SchemaGeneration.FLAT_ASSIGNMENTS
        return SchemaGeneration.FLAT_TASKS
    if has_legacy:
        return SchemaGeneration.FLAT_ASSIGNMENTS
    if has_tasks:
        return SchemaGeneration.CANONICAL
    return SchemaGeneration.EMPTY


def _merge_specific_assignments(
    daily_tasks: dict[str, Any], assignments: Mapping[str, Any]
) -> int:
    """Fold legacy per-date assignments into override records.

    Skips a date that already holds an override with the same
    description. Returns the number of records added.
    """
    added = 0
    for date_str, assignment in assignments.items():
        if not isinstance(assignment, Mapping):
            logger.warning(
                "Skipping legacy assignment on %s: expected an object, got %r",
                date_str, assignment,
            )
            continue

        person = assignment.get("person") or ""
        records = daily_tasks.setdefault(date_str, [])
        if not isinstance(records, list):
            logger.warning(
                "Skipping legacy assignment on %s: dailyTasks entry is not a list",
                date_str,
            )
            continue

        exists = any(
            isinstance(r, Mapping)
            and r.get("description") == person
            and r.get("isAssignment")
            for r in records
        )
        if exists:
            continue

        records.append({
            "id": new_record_id(),
            "description": person,
            "assignee": person,
            "note": assignment.get("note") or "",
            "startTime": "",
            "endTime": "",
            "isAssignment": True,
        })
        added += 1
    return added


def migrate(raw: Any, today: date | None = None) -> dict[str, Any]:
    """Return the canonical form of a persisted object of any generation.

    The input is not modified. Raises MalformedInputError if it is not
    a JSON object.
    """
    generation = detect_generation(raw)
    if today is None:
        today = date.today()

    history = raw.get("patternHistory")
    if isinstance(history, list):
        pattern_history = copy.deepcopy(history)
    elif isinstance(raw.get("pattern"), list):
        pattern_history = [{
            "effectiveDate": to_iso_date(today),
            "pattern": list(raw["pattern"]),
        }]
        logger.info(
            "Migrated flat pattern of %d people to a timeline effective %s",
            len(raw["pattern"]), pattern_history[0]["effectiveDate"],
        )
    else:
        pattern_history = []

    tasks = raw.get("dailyTasks")
    daily_tasks = copy.deepcopy(dict(tasks)) if isinstance(tasks, Mapping) else {}

    legacy = raw.get("specificAssignments")
    if isinstance(legacy, Mapping):
        added = _merge_specific_assignments(daily_tasks, legacy)
        logger.info("Migrated %d legacy specific assignments", added)

    logger.debug("Migrated %s state", generation.value)
    return {"patternHistory": pattern_history, "dailyTasks": daily_tasks}
