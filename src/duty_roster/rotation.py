"""Layer 2: weekly round-robin rotation over a resolved pattern."""

from __future__ import annotations

from datetime import date
from typing import Sequence

from duty_roster.dates import EPOCH, weeks_since_epoch


def rotation_index(d: date | str, size: int, epoch: date = EPOCH) -> int:
    """Slot index for a date in a pattern of ``size`` slots.

    All seven days of a Monday-based week share one index; the phase
    depends only on the fixed epoch, never on today.
    """
    if size <= 0:
        raise ValueError(f"pattern size must be positive, got {size}")
    return weeks_since_epoch(d, epoch) % size


def assignee_for_date(
    d: date | str, pattern: Sequence[str], epoch: date = EPOCH
) -> str | None:
    """Default assignee for a date, or None when the pattern is empty."""
    if not pattern:
        return None
    return pattern[rotation_index(d, len(pattern), epoch)]
