"""duty-roster: date-effective weekly duty rotation with per-day overrides."""

from duty_roster.config import DEFAULT_CONFIG, RosterConfig
from duty_roster.dates import (
    EPOCH,
    days_since_epoch,
    iso_week_number,
    to_iso_date,
    week_dates,
    week_start,
    weeks_since_epoch,
)
from duty_roster.loaders import RosterState
from duty_roster.migrate import SchemaGeneration, detect_generation, migrate
from duty_roster.planner import RosterPlanner
from duty_roster.records import DailyRecordStore
from duty_roster.resolver import AssignmentResolver
from duty_roster.rotation import assignee_for_date
from duty_roster.timeline import PatternTimeline
from duty_roster.types import (
    DaySchedule,
    MalformedInputError,
    OverrideRecord,
    PatternEntry,
    ResolvedAssignment,
    TaskRecord,
    TimeSuggestion,
    WeekSchedule,
)

__all__ = [
    "AssignmentResolver",
    "DEFAULT_CONFIG",
    "DailyRecordStore",
    "DaySchedule",
    "EPOCH",
    "MalformedInputError",
    "OverrideRecord",
    "PatternEntry",
    "PatternTimeline",
    "ResolvedAssignment",
    "RosterConfig",
    "RosterPlanner",
    "RosterState",
    "SchemaGeneration",
    "TaskRecord",
    "TimeSuggestion",
    "WeekSchedule",
    "assignee_for_date",
    "days_since_epoch",
    "detect_generation",
    "iso_week_number",
    "migrate",
    "to_iso_date",
    "week_dates",
    "week_start",
    "weeks_since_epoch",
]
