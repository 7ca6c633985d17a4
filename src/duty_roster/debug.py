"""ASCII visualisation for development-time verification.

This module is dev-only and not imported by production code.
"""

from __future__ import annotations

from datetime import date, timedelta

from duty_roster.dates import EPOCH, week_start


def show_week(
    resolver: "AssignmentResolver",  # noqa: F821 (avoids a circular import)
    d: date | str,
) -> str:
    """Print one week: day, date, person on duty, then the day's tasks.

    Returns the string and also prints to stdout.
    """
    week = resolver.week(d)
    lines: list[str] = [f"Week {week.week_number}"]
    day_names = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

    for day in week.visible_days:
        label = f"{day_names[day.date.weekday()]} {day.date.strftime('%d %b')}"
        person = day.assignment.person
        if day.assignment.note:
            person += f" ({day.assignment.note})"
        lines.append(f"{label:>10s}  {person}")

        for task in day.tasks:
            info = task.description
            if task.assignee:
                info += f" ({task.assignee})"
            times = "-".join(t for t in (task.start_time, task.end_time) if t)
            if times:
                info += f" {times}"
            if task.note:
                info += f" - {task.note}"
            lines.append(f"{'':>10s}    * {info}")

    result = "\n".join(lines)
    print(result)
    return result


def show_rotation(
    timeline: "PatternTimeline",  # noqa: F821
    start: date | str,
    weeks: int,
    epoch: date = EPOCH,
) -> str:
    """Print who the rotation picks for each of ``weeks`` consecutive weeks.

    Overrides are ignored: this shows the bare rotation.
    Returns the string and also prints to stdout.
    """
    from duty_roster.rotation import assignee_for_date

    lines: list[str] = []
    monday = week_start(start)
    for i in range(weeks):
        current = monday + timedelta(weeks=i)
        pattern = timeline.pattern_effective_on(current)
        person = assignee_for_date(current, pattern, epoch)
        lines.append(f"{current.isoformat()}  {person or '-'}")

    result = "\n".join(lines)
    print(result)
    return result
