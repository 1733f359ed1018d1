"""
Module time classification: remaining time, configured duration and completion
time for one module snapshot.

Remaining time always comes from the server-calculated `time_remaining` value,
never from a local countdown against `started_at_utc`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from enum import Enum
from typing import Optional

from progress_engine.module_status import ModuleStatus
from progress_engine.snapshots import ModuleProgressSnapshot
from progress_engine.time_utils import (
    ceil_minutes,
    format_completed,
    format_minutes,
    parse_time_remaining,
)

URGENT_THRESHOLD_MINUTES = 10
WARNING_THRESHOLD_MINUTES = 30


class Urgency(str, Enum):
    URGENT = "urgent"
    WARNING = "warning"
    NORMAL = "normal"


@dataclass(frozen=True)
class ModuleTimeInfo:
    remaining_display: Optional[str] = None
    remaining_minutes: Optional[int] = None
    duration_display: Optional[str] = None
    completed_display: Optional[str] = None

    def is_empty(self) -> bool:
        return (
            self.remaining_display is None
            and self.remaining_minutes is None
            and self.duration_display is None
            and self.completed_display is None
        )


def classify_module_time(
    snapshot: ModuleProgressSnapshot,
    tz: Optional[tzinfo] = None,
) -> Optional[ModuleTimeInfo]:
    """
    Derive the time figures shown on a module card.

    - Started and timed: ceil(server remaining seconds / 60); shown only when
      positive and the module is not Completed. Expiry is left to the status badge.
    - Timed but not started: the configured duration, also used as
      remaining_minutes for urgency coloring.
    - Completed timestamp (independent of the above): local completion time.

    Returns None when nothing applies.
    """
    if snapshot.started_at_utc is None and not snapshot.duration_in_minutes:
        return None

    is_completed = snapshot.status is ModuleStatus.COMPLETED
    remaining_display = remaining_minutes = duration_display = completed_display = None

    if snapshot.duration_in_minutes and snapshot.started_at_utc is not None:
        minutes = ceil_minutes(parse_time_remaining(snapshot.time_remaining))
        if minutes > 0 and not is_completed:
            remaining_display = format_minutes(minutes, "remaining")
            remaining_minutes = minutes
    elif snapshot.duration_in_minutes and not is_completed:
        duration = snapshot.duration_in_minutes
        duration_display = format_minutes(duration, "duration")
        remaining_display = duration_display
        remaining_minutes = duration

    if snapshot.completed_at_utc is not None:
        completed_display = format_completed(snapshot.completed_at_utc, tz)

    info = ModuleTimeInfo(
        remaining_display=remaining_display,
        remaining_minutes=remaining_minutes,
        duration_display=duration_display,
        completed_display=completed_display,
    )
    return None if info.is_empty() else info


def urgency(
    remaining_minutes: Optional[int],
    urgent_threshold: int = URGENT_THRESHOLD_MINUTES,
    warning_threshold: int = WARNING_THRESHOLD_MINUTES,
) -> Optional[Urgency]:
    """Color band for a remaining-minutes figure. None when there is no figure."""
    if not remaining_minutes:
        return None
    if remaining_minutes <= urgent_threshold:
        return Urgency.URGENT
    if remaining_minutes <= warning_threshold:
        return Urgency.WARNING
    return Urgency.NORMAL
