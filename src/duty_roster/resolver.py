"""Layer 3: AssignmentResolver: overrides first, then the rotation."""

from __future__ import annotations

from datetime import date

from duty_roster.config import DEFAULT_CONFIG, RosterConfig
from duty_roster.dates import iso_week_number, parse_iso_date, week_dates
from duty_roster.records import DailyRecordStore
from duty_roster.rotation import assignee_for_date
from duty_roster.timeline import PatternTimeline
from duty_roster.types import DaySchedule, ResolvedAssignment, WeekSchedule


class AssignmentResolver:
    """Read-only view composing the timeline, rotation and day records.

    Never mutates the timeline or the store.
    """

    def __init__(
        self,
        timeline: PatternTimeline,
        records: DailyRecordStore,
        config: RosterConfig = DEFAULT_CONFIG,
    ) -> None:
        self.timeline = timeline
        self.records = records
        self.config = config

    def resolve(self, d: date | str) -> ResolvedAssignment:
        """Who is on duty on a date.

        1. The first override record on the date wins.
        2. Otherwise the rotation over the pattern in force that day.
        3. No pattern in force yields the "No pattern set" sentinel.
        """
        for record in self.records.records_on(d):
            if record.is_assignment:
                person = record.assignee or record.description
                return ResolvedAssignment(person=person, note=record.note or "")

        pattern = self.timeline.pattern_effective_on(d)
        person = assignee_for_date(d, pattern, self.config.epoch)
        if person is None:
            return ResolvedAssignment(person=self.config.no_pattern_label)
        return ResolvedAssignment(person=person)

    def day(self, d: date | str) -> DaySchedule:
        """Resolved assignment plus the day's ordinary tasks."""
        day_date = parse_iso_date(d)
        tasks = tuple(
            r for r in self.records.records_on(day_date) if not r.is_assignment
        )
        return DaySchedule(
            date=day_date, assignment=self.resolve(day_date), tasks=tasks
        )

    def week(self, d: date | str) -> WeekSchedule:
        """Monday..Sunday schedule for the week containing ``d``."""
        dates = week_dates(d)
        days = tuple(self.day(day_date) for day_date in dates)
        weekend_activity = any(
            self.records.records_on(day_date) for day_date in dates[5:]
        )
        return WeekSchedule(
            week_number=iso_week_number(d),
            days=days,
            has_weekend_activity=weekend_activity,
        )
