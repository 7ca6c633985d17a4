"""Tests for LegacyMigrator: generation detection, upgrade and idempotence.

Test data loaded from: data/fixtures/scenarios/legacy.json
"""

from __future__ import annotations

import copy

import pytest

from conftest import TODAY, load_scenarios

_data = load_scenarios("legacy")
BLOBS = _data["blobs"]


def _expected_history(spec):
    return [
        {**e, "effectiveDate": TODAY.isoformat() if e["effectiveDate"] == "TODAY" else e["effectiveDate"]}
        for e in spec["expected_history"]
    ]


def _overrides(daily_tasks: dict) -> dict:
    """date -> [{person, note}] for override records only."""
    result = {}
    for date_str, records in daily_tasks.items():
        found = [
            {"person": r.get("assignee") or r.get("description"), "note": r.get("note", "")}
            for r in records if r.get("isAssignment")
        ]
        if found:
            result[date_str] = found
    return result


class TestDetectGeneration:

    @pytest.mark.parametrize("spec", BLOBS, ids=lambda s: s["id"])
    def test_detect(self, spec):
        from duty_roster.migrate import SchemaGeneration, detect_generation

        assert detect_generation(spec["raw"]) is SchemaGeneration[spec["generation"]]

    def test_assignments_without_pattern(self):
        from duty_roster.migrate import SchemaGeneration, detect_generation

        raw = {"specificAssignments": {"2024-01-01": {"person": "Dana"}}}
        assert detect_generation(raw) is SchemaGeneration.FLAT_ASSIGNMENTS

    @pytest.mark.parametrize("raw, generation", [
        ({"pattern": ["Alice"]}, "FLAT_TASKS"),
        ({"pattern": ["Alice"], "specificAssignments": {}}, "FLAT_ASSIGNMENTS"),
        ({"pattern": ["Alice"], "specificAssignments": {}, "dailyTasks": {}}, "FLAT_TASKS"),
    ])
    def test_flat_pattern_generations(self, raw, generation):
        from duty_roster.migrate import SchemaGeneration, detect_generation

        assert detect_generation(raw) is SchemaGeneration[generation]

    @pytest.mark.parametrize("raw", [[], "state", 3, None])
    def test_non_object_rejected(self, raw):
        from duty_roster.migrate import detect_generation
        from duty_roster.types import MalformedInputError

        with pytest.raises(MalformedInputError):
            detect_generation(raw)


class TestMigrate:

    @pytest.mark.parametrize("spec", BLOBS, ids=lambda s: s["id"])
    def test_pattern_history(self, spec):
        from duty_roster.migrate import migrate

        result = migrate(spec["raw"], today=TODAY)
        assert result["patternHistory"] == _expected_history(spec)

    @pytest.mark.parametrize("spec", BLOBS, ids=lambda s: s["id"])
    def test_overrides(self, spec):
        from duty_roster.migrate import migrate

        result = migrate(spec["raw"], today=TODAY)
        assert _overrides(result["dailyTasks"]) == spec["expected_overrides"]

    @pytest.mark.parametrize("spec", BLOBS, ids=lambda s: s["id"])
    def test_output_is_canonical_shape(self, spec):
        from duty_roster.migrate import SchemaGeneration, detect_generation, migrate

        result = migrate(spec["raw"], today=TODAY)
        assert set(result) == {"patternHistory", "dailyTasks"}
        assert detect_generation(result) is SchemaGeneration.CANONICAL

    @pytest.mark.parametrize("spec", BLOBS, ids=lambda s: s["id"])
    def test_idempotent(self, spec):
        from duty_roster.migrate import migrate

        once = migrate(spec["raw"], today=TODAY)
        assert migrate(once, today=TODAY) == once

    @pytest.mark.parametrize("spec", BLOBS, ids=lambda s: s["id"])
    def test_input_not_mutated(self, spec):
        from duty_roster.migrate import migrate

        raw = copy.deepcopy(spec["raw"])
        result = migrate(raw, today=TODAY)
        assert raw == spec["raw"]
        for records in result["dailyTasks"].values():
            records.append({"id": "scratch"})
        assert raw == spec["raw"]

    def test_existing_records_kept_in_order(self):
        from duty_roster.migrate import migrate

        raw = {
            "patternHistory": [],
            "dailyTasks": {"2024-05-06": [
                {"id": "a", "description": "Standup"},
                {"id": "b", "description": "Retro"},
            ]},
            "specificAssignments": {"2024-05-06": {"person": "Dana", "note": ""}},
        }
        records = migrate(raw, today=TODAY)["dailyTasks"]["2024-05-06"]
        assert [r["id"] for r in records[:2]] == ["a", "b"]
        assert records[2]["description"] == "Dana"
        assert records[2]["isAssignment"] is True
        assert records[2]["startTime"] == "" and records[2]["endTime"] == ""

    def test_canonical_is_noop(self):
        from duty_roster.migrate import migrate

        spec = next(b for b in BLOBS if b["id"] == "canonical")
        assert migrate(spec["raw"], today=TODAY) == spec["raw"]

    def test_non_object_assignment_skipped(self):
        from duty_roster.migrate import migrate

        raw = {"pattern": ["Alice"], "specificAssignments": {"2024-05-06": "Dana"}}
        assert migrate(raw, today=TODAY)["dailyTasks"] == {}
