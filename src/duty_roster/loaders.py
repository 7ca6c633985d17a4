"""Serialization of roster state: JSON, share links and key-value stores.

Every transport carries the same canonical object:
{
    "patternHistory": [{"effectiveDate": "YYYY-MM-DD", "pattern": [...]}, ...],
    "dailyTasks": {"YYYY-MM-DD": [{"id": ..., "description": ..., ...}]}
}

Inbound data always passes through migrate() and validate_state()
before it is accepted.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any
from urllib.parse import parse_qs, urlencode

from duty_roster.config import DEFAULT_CONFIG, RosterConfig
from duty_roster.dates import to_iso_date
from duty_roster.migrate import migrate
from duty_roster.records import DailyRecordStore
from duty_roster.schema import validate_state
from duty_roster.timeline import PatternTimeline
from duty_roster.types import MalformedInputError, OverrideRecord, TaskRecord

logger = logging.getLogger(__name__)


@dataclass
class RosterState:
    """The single mutable unit of persistence and sharing."""

    timeline: PatternTimeline = field(default_factory=PatternTimeline)
    records: DailyRecordStore = field(default_factory=DailyRecordStore)


# ---------------------------------------------------------------------------
# Canonical dict <-> objects
# ---------------------------------------------------------------------------

def _text(value: Any) -> str:
    """Optional text field as a string; None and missing become ""."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def record_from_dict(raw: Mapping[str, Any]) -> TaskRecord:
    """Build the record variant selected by the isAssignment flag.

    Any truthy flag marks an override. Non-string optional fields are
    stringified rather than rejected.
    """
    cls = OverrideRecord if bool(raw.get("isAssignment")) else TaskRecord
    return cls(
        id=str(raw["id"]),
        description=raw.get("description") or "",
        assignee=_text(raw.get("assignee")),
        start_time=_text(raw.get("startTime")),
        end_time=_text(raw.get("endTime")),
        note=_text(raw.get("note")),
    )


def record_to_dict(record: TaskRecord) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": record.id,
        "description": record.description,
        "assignee": record.assignee,
        "startTime": record.start_time,
        "endTime": record.end_time,
        "note": record.note,
    }
    if record.is_assignment:
        data["isAssignment"] = True
    return data


def state_from_dict(data: Mapping[str, Any]) -> RosterState:
    """Build state from an already migrated and validated canonical dict."""
    timeline = PatternTimeline()
    for entry in data.get("patternHistory", []):
        timeline.append(entry["pattern"], entry["effectiveDate"])

    records = DailyRecordStore({
        date_str: [record_from_dict(r) for r in items]
        for date_str, items in data.get("dailyTasks", {}).items()
    })
    return RosterState(timeline=timeline, records=records)


def state_to_dict(state: RosterState) -> dict[str, Any]:
    return {
        "patternHistory": [
            {
                "effectiveDate": to_iso_date(entry.effective_date),
                "pattern": list(entry.pattern),
            }
            for entry in state.timeline
        ],
        "dailyTasks": {
            date_str: [record_to_dict(r) for r in items]
            for date_str, items in state.records.items()
        },
    }


def parse_state(
    raw: Any, today: date | None = None, source: str = "state"
) -> RosterState:
    """Migrate, validate and build state from any persisted generation.

    Raises MalformedInputError if validation fails.
    """
    try:
        canonical = migrate(raw, today)
    except MalformedInputError as e:
        raise MalformedInputError(source, e.errors) from None

    errors = validate_state(canonical)
    if errors:
        raise MalformedInputError(source, errors)
    return state_from_dict(canonical)


# ---------------------------------------------------------------------------
# JSON text
# ---------------------------------------------------------------------------

def dumps_state(state: RosterState) -> str:
    """Compact JSON, as kept under the local storage key."""
    return json.dumps(state_to_dict(state), ensure_ascii=False, separators=(",", ":"))


def export_state(state: RosterState) -> str:
    """Pretty-printed JSON for file export."""
    return json.dumps(state_to_dict(state), ensure_ascii=False, indent=2)


def loads_state(
    text: str | bytes, today: date | None = None, source: str = "state"
) -> RosterState:
    """Parse JSON text of any generation. Raises MalformedInputError."""
    try:
        raw = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedInputError(source, [f"invalid JSON: {e}"]) from None
    return parse_state(raw, today, source)


# ---------------------------------------------------------------------------
# Share links
# ---------------------------------------------------------------------------

def encode_share_param(state: RosterState) -> str:
    """Base64 of the compact JSON, for the ``data`` query parameter."""
    return base64.b64encode(dumps_state(state).encode("utf-8")).decode("ascii")


def decode_share_param(value: str, today: date | None = None) -> RosterState:
    """Inverse of encode_share_param. Raises MalformedInputError."""
    # An unescaped '+' in a pasted link arrives as a space
    value = value.strip().replace(" ", "+")
    try:
        payload = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedInputError("share link", [f"invalid base64: {e}"]) from None

    try:
        text = payload.decode("utf-8")
    except UnicodeDecodeError:
        # btoa() output is Latin-1 bytes
        text = payload.decode("latin-1")
    return loads_state(text, today, source="share link")


def build_share_query(
    state: RosterState,
    view_mode: bool = True,
    config: RosterConfig = DEFAULT_CONFIG,
) -> str:
    """Query string for a shareable link; read-only by default."""
    params = {config.share_param: encode_share_param(state)}
    if view_mode:
        params[config.view_mode_param] = "true"
    return urlencode(params)


def _first_values(query: str) -> dict[str, str]:
    return {k: v[0] for k, v in parse_qs(query.lstrip("?")).items()}


def view_mode_from_params(
    params: Mapping[str, str], config: RosterConfig = DEFAULT_CONFIG
) -> bool:
    """Read-only mode is requested by viewMode=true or view=dashboard."""
    return (
        params.get(config.view_mode_param) == "true"
        or params.get(config.dashboard_param) == config.dashboard_value
    )


def view_mode_from_query(query: str, config: RosterConfig = DEFAULT_CONFIG) -> bool:
    return view_mode_from_params(_first_values(query), config)


def share_param_from_query(
    query: str, config: RosterConfig = DEFAULT_CONFIG
) -> str | None:
    return _first_values(query).get(config.share_param)


# ---------------------------------------------------------------------------
# Key-value store
# ---------------------------------------------------------------------------

def save_to_store(
    store: MutableMapping[str, str],
    state: RosterState,
    config: RosterConfig = DEFAULT_CONFIG,
) -> None:
    store[config.storage_key] = dumps_state(state)


def load_from_store(
    store: Mapping[str, str],
    today: date | None = None,
    config: RosterConfig = DEFAULT_CONFIG,
) -> RosterState | None:
    """State saved under the storage key, or None if nothing is stored.

    Raises MalformedInputError if the stored text cannot be used.
    """
    text = store.get(config.storage_key)
    if not text:
        return None
    return loads_state(text, today, source="stored state")
