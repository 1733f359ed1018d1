"""
When to re-fetch snapshots from upstream rather than just re-render.

A module whose remaining time crosses zero may already have been flipped to
TimeElapsed (and the next module unlocked) on the server. These predicates are
kept apart from classification so a push channel can replace them later.
"""

from __future__ import annotations

from typing import Mapping, Sequence

from progress_engine.snapshots import ModuleProgressSnapshot
from progress_engine.time_classifier import classify_module_time


def remaining_minutes_map(snapshots: Sequence[ModuleProgressSnapshot]) -> dict[str, int]:
    out: dict[str, int] = {}
    for s in snapshots:
        info = classify_module_time(s)
        out[s.id] = (info.remaining_minutes or 0) if info else 0
    return out


def crossed_zero(
    previous: Mapping[str, int],
    current: Mapping[str, int],
    snapshots: Sequence[ModuleProgressSnapshot],
) -> bool:
    """True when a started module went from >0 to <=0 remaining minutes."""
    for s in snapshots:
        if s.started_at_utc is None:
            continue
        if previous.get(s.id, 0) > 0 and current.get(s.id, 0) <= 0:
            return True
    return False


def has_running_modules(snapshots: Sequence[ModuleProgressSnapshot]) -> bool:
    """Started, not completed, and still showing remaining time."""
    for s in snapshots:
        if not s.is_running:
            continue
        info = classify_module_time(s)
        if info and info.remaining_minutes:
            return True
    return False


class CountdownMonitor:
    """Holds the previous remaining-minutes map between timer ticks."""

    def __init__(self) -> None:
        self._previous: dict[str, int] = {}

    @property
    def previous(self) -> dict[str, int]:
        return dict(self._previous)

    def reset(self, snapshots: Sequence[ModuleProgressSnapshot]) -> None:
        self._previous = remaining_minutes_map(snapshots)

    def tick(self, snapshots: Sequence[ModuleProgressSnapshot]) -> bool:
        current = remaining_minutes_map(snapshots)
        should_refresh = crossed_zero(self._previous, current, snapshots)
        self._previous = current
        return should_refresh
