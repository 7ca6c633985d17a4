"""Engine configuration: rotation epoch, storage key and transport names."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from duty_roster.dates import EPOCH


@dataclass(frozen=True)
class RosterConfig:
    """Settings shared by the planner and its transports. Immutable.

    The epoch fixes the rotation phase so that the same date resolves to
    the same person on every machine and after every reload.
    """

    epoch: date = EPOCH
    storage_key: str = "opsPlanning"
    no_pattern_label: str = "No pattern set"
    share_param: str = "data"
    view_mode_param: str = "viewMode"
    dashboard_param: str = "view"
    dashboard_value: str = "dashboard"
    export_filename: str = "ops-planning-data.json"


DEFAULT_CONFIG = RosterConfig()
