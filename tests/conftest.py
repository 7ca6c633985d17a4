"""Shared test fixtures and data loading for duty-roster.

All test data lives in data/fixtures/ as JSON files.  This module loads
that data and exposes helper functions + pytest fixtures for the tests.

Epoch: Mon 2024-01-01 (week 0 of the rotation).
Fixed "today": Mon 2024-06-03.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
FIXTURES_DIR = Path(__file__).resolve().parent.parent / "data" / "fixtures"
SCENARIOS_DIR = FIXTURES_DIR / "scenarios"


# ---------------------------------------------------------------------------
# Data loaders
# ---------------------------------------------------------------------------
def _load_json(path: Path):
    with open(path) as f:
        return json.load(f)


_reference = _load_json(FIXTURES_DIR / "reference.json")
_timelines = _load_json(FIXTURES_DIR / "timelines.json")


# ---------------------------------------------------------------------------
# Reference constants derived from reference.json
# ---------------------------------------------------------------------------
EPOCH = date.fromisoformat(_reference["epoch"])
TODAY = date.fromisoformat(_reference["today"])
STORAGE_KEY = _reference["storage_key"]
NO_PATTERN = _reference["no_pattern_label"]

# Week lookup:  WEEKS["second_week"] → {"monday": date(...), "weeks_since_epoch": 1}
WEEKS: dict[str, dict] = {
    w["name"]: {
        "monday": date.fromisoformat(w["monday"]),
        "weeks_since_epoch": w["weeks_since_epoch"],
    }
    for w in _reference["weeks"]
}


# ---------------------------------------------------------------------------
# Convenience helpers (importable by test modules)
# ---------------------------------------------------------------------------
def fixed_today() -> date:
    return TODAY


def timeline_data(name: str) -> list[dict]:
    """Raw patternHistory list from timelines.json."""
    return _timelines[name]


def make_timeline(name: str):
    """Build a PatternTimeline from timelines.json by name."""
    from duty_roster.timeline import PatternTimeline

    timeline = PatternTimeline()
    for entry in _timelines[name]:
        timeline.append(entry["pattern"], entry["effectiveDate"])
    return timeline


def make_store(records: dict[str, list[dict]] | None = None):
    """Build a DailyRecordStore from raw record dicts keyed by date."""
    from duty_roster.loaders import record_from_dict
    from duty_roster.records import DailyRecordStore

    return DailyRecordStore({
        d: [record_from_dict(r) for r in items]
        for d, items in (records or {}).items()
    })


def make_resolver(timeline_name: str, records: dict[str, list[dict]] | None = None):
    from duty_roster.resolver import AssignmentResolver

    return AssignmentResolver(make_timeline(timeline_name), make_store(records))


def make_planner(timeline_name: str | None = None, store=None):
    """RosterPlanner with a fixed today, optionally seeded from timelines.json."""
    from duty_roster.loaders import RosterState
    from duty_roster.planner import RosterPlanner

    state = RosterState()
    if timeline_name is not None:
        state.timeline = make_timeline(timeline_name)
    return RosterPlanner(state=state, today=fixed_today, store=store)


# ---------------------------------------------------------------------------
# Scenario loader
# ---------------------------------------------------------------------------
def load_scenarios(name: str):
    """Load a scenario file from data/fixtures/scenarios/{name}.json."""
    return _load_json(SCENARIOS_DIR / f"{name}.json")


# ---------------------------------------------------------------------------
# pytest fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def epoch() -> date:
    return EPOCH


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def empty_planner():
    return make_planner()


@pytest.fixture
def two_person_planner():
    """Alice/Bob rotation effective from the epoch."""
    return make_planner("two_person")


@pytest.fixture
def kv_store() -> dict[str, str]:
    """In-memory stand-in for the host's key-value storage."""
    return {}
