"""RosterPlanner: the edit-intent surface over one roster state.

A planner owns exactly one RosterState. Each instance is independent;
nothing is shared at module level. Calls are synchronous and must be
serialized by the host.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from datetime import date
from typing import Callable, Sequence

from duty_roster.config import DEFAULT_CONFIG, RosterConfig
from duty_roster.dates import parse_iso_date
from duty_roster.loaders import (
    RosterState,
    build_share_query,
    decode_share_param,
    export_state,
    load_from_store,
    loads_state,
    save_to_store,
    share_param_from_query,
    state_to_dict,
    view_mode_from_query,
)
from duty_roster.resolver import AssignmentResolver
from duty_roster.timeline import (
    with_person_added,
    with_person_moved,
    with_person_removed,
    with_persons_swapped,
)
from duty_roster.types import (
    DaySchedule,
    MalformedInputError,
    PatternEntry,
    ResolvedAssignment,
    TaskRecord,
    TimeSuggestion,
    WeekSchedule,
)

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str:
    return (value or "").strip()


def _join_assignees(assignee: str | Sequence[str] | None) -> str:
    if assignee is None or isinstance(assignee, str):
        return _clean(assignee)
    return ", ".join(name.strip() for name in assignee if name.strip())


class RosterPlanner:
    """Accepts edit intents, answers resolution and suggestion queries.

    If a store is attached, every mutation is written back to it under
    the configured storage key.
    """

    def __init__(
        self,
        state: RosterState | None = None,
        config: RosterConfig = DEFAULT_CONFIG,
        today: Callable[[], date] = date.today,
        store: MutableMapping[str, str] | None = None,
    ) -> None:
        self.config = config
        self.store = store
        self.view_mode = False
        self._today = today
        self._set_state(state or RosterState())

    def _set_state(self, state: RosterState) -> None:
        self.state = state
        self.resolver = AssignmentResolver(state.timeline, state.records, self.config)

    def _commit(self) -> None:
        if self.store is not None:
            save_to_store(self.store, self.state, self.config)

    def today(self) -> date:
        return self._today()

    # ------------------------------------------------------------------
    # Pattern edits
    # ------------------------------------------------------------------

    @property
    def current_pattern(self) -> tuple[str, ...]:
        return self.state.timeline.current_pattern()

    def _append_today(self, pattern: tuple[str, ...] | None) -> PatternEntry | None:
        if pattern is None:
            return None
        entry = self.state.timeline.append(pattern, self.today())
        self._commit()
        return entry

    def add_person(self, name: str) -> PatternEntry | None:
        return self._append_today(with_person_added(self.current_pattern, name))

    def remove_person(self, index: int) -> PatternEntry | None:
        return self._append_today(with_person_removed(self.current_pattern, index))

    def swap_persons(self, first: int, second: int) -> PatternEntry | None:
        return self._append_today(
            with_persons_swapped(self.current_pattern, first, second)
        )

    def move_person(self, from_index: int, to_index: int) -> PatternEntry | None:
        return self._append_today(
            with_person_moved(self.current_pattern, from_index, to_index)
        )

    def schedule_pattern(
        self, pattern: Sequence[str], effective_date: date | str | None = None
    ) -> PatternEntry:
        """Append a whole new pattern from a chosen date.

        Manual changes may not take effect in the past: a past date is
        moved forward to today.
        """
        today = self.today()
        effective = parse_iso_date(effective_date) if effective_date else today
        if effective < today:
            logger.warning(
                "Effective date %s is in the past; using %s instead",
                effective.isoformat(), today.isoformat(),
            )
            effective = today

        entry = self.state.timeline.append(
            [name.strip() for name in pattern if name.strip()], effective
        )
        self._commit()
        return entry

    # ------------------------------------------------------------------
    # Day records
    # ------------------------------------------------------------------

    def add_task(
        self,
        d: date | str,
        description: str,
        assignee: str | Sequence[str] | None = "",
        start_time: str = "",
        end_time: str = "",
        note: str = "",
    ) -> TaskRecord:
        record = self.state.records.upsert(d, TaskRecord(
            id="",
            description=_clean(description),
            assignee=_join_assignees(assignee),
            start_time=_clean(start_time),
            end_time=_clean(end_time),
            note=_clean(note),
        ))
        self._commit()
        return record

    def update_task(
        self,
        d: date | str,
        record_id: str,
        description: str,
        assignee: str | Sequence[str] | None = "",
        start_time: str = "",
        end_time: str = "",
        note: str = "",
    ) -> TaskRecord | None:
        """Rewrite a record in place. Unknown date or id is a no-op."""
        if self.state.records.get(d, record_id) is None:
            logger.warning("update_task: no record %r on %s", record_id, d)
            return None

        # Editing turns a legacy override into an ordinary task
        record = self.state.records.upsert(d, TaskRecord(
            id=record_id,
            description=_clean(description),
            assignee=_join_assignees(assignee),
            start_time=_clean(start_time),
            end_time=_clean(end_time),
            note=_clean(note),
        ))
        self._commit()
        return record

    def remove_task(self, d: date | str, record_id: str) -> bool:
        removed = self.state.records.remove(d, record_id)
        if removed:
            self._commit()
        return removed

    def tasks_on(self, d: date | str) -> tuple[TaskRecord, ...]:
        return self.state.records.records_on(d)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def resolve(self, d: date | str) -> ResolvedAssignment:
        return self.resolver.resolve(d)

    def day(self, d: date | str) -> DaySchedule:
        return self.resolver.day(d)

    def week(self, d: date | str | None = None) -> WeekSchedule:
        return self.resolver.week(d if d is not None else self.today())

    def description_suggestions(self) -> list[str]:
        return self.state.records.all_descriptions()

    def assignee_suggestions(self) -> list[str]:
        """Everyone in any pattern snapshot plus every task assignee."""
        names = self.state.timeline.people()
        names.update(self.state.records.all_assignees())
        return sorted(names)

    def time_suggestions(self, description: str) -> TimeSuggestion:
        return self.state.records.suggested_times_for(_clean(description))

    # ------------------------------------------------------------------
    # Transports
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        return state_to_dict(self.state)

    def export_json(self) -> str:
        return export_state(self.state)

    def share_query(self, view_mode: bool = True) -> str:
        return build_share_query(self.state, view_mode, self.config)

    def save(self, store: MutableMapping[str, str] | None = None) -> None:
        target = store if store is not None else self.store
        if target is None:
            raise ValueError("no store attached and none given")
        save_to_store(target, self.state, self.config)

    def load(self, store: MutableMapping[str, str] | None = None) -> str | None:
        """Replace state with what the store holds.

        Returns a notice if the stored data was unusable; prior state is
        kept in that case.
        """
        source = store if store is not None else self.store
        if source is None:
            raise ValueError("no store attached and none given")
        try:
            loaded = load_from_store(source, self.today(), self.config)
        except MalformedInputError as e:
            logger.warning("Ignoring stored state: %s", e)
            return f"Could not load saved data: {e}"
        if loaded is not None:
            self._set_state(loaded)
        return None

    def import_json(self, text: str | bytes) -> None:
        """Replace state with an imported file. Raises MalformedInputError."""
        self._set_state(loads_state(text, self.today(), source="import"))
        self._commit()

    def load_share_query(self, query: str) -> str | None:
        """Apply a share link's query string: view mode, then data.

        Returns a notice if the data parameter was unusable.
        """
        self.view_mode = view_mode_from_query(query, self.config)
        encoded = share_param_from_query(query, self.config)
        if not encoded:
            return None
        try:
            shared = decode_share_param(encoded, self.today())
        except MalformedInputError as e:
            logger.warning("Ignoring shared state: %s", e)
            return f"Could not load shared data: {e}"
        self._set_state(shared)
        self._commit()
        return None

    def toggle_view_mode(self) -> bool:
        self.view_mode = not self.view_mode
        return self.view_mode
