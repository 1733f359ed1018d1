"""
Assignment-level status used by the reporting views.

Completion state (from module statuses) is crossed with the window state
(before start / open / ended) through a fixed decision table.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional

from progress_engine.module_status import ModuleStatus
from progress_engine.snapshots import AssignmentProgress, AssignmentWindow
from progress_engine.time_utils import format_time_spent, parse_utc, utc_now


class UnclassifiedAssignmentError(RuntimeError):
    """A (completion, window) combination has no label in the decision table."""


class CompletionState(str, Enum):
    COMPLETED = "completed"
    IN_PROGRESS = "in-progress"
    NOT_STARTED = "not-started"


class WindowState(str, Enum):
    BEFORE_START = "before-start"
    OPEN = "open"
    ENDED = "ended"


class AssignmentStatus(str, Enum):
    COMPLETED = "Completed"
    COMPLETED_LATE = "Completed Late"
    IN_PROGRESS = "In Progress"
    INCOMPLETE_EXPIRED = "Incomplete (Expired)"
    SCHEDULED = "Scheduled"
    NOT_SUBMITTED = "Not Submitted"
    NOT_STARTED = "Not Started"


class AccessState(str, Enum):
    SCHEDULED = "scheduled"
    ACTIVE = "active"
    ENDED = "ended"


DECISION_TABLE: dict[tuple[CompletionState, WindowState], AssignmentStatus] = {
    (CompletionState.COMPLETED, WindowState.BEFORE_START): AssignmentStatus.COMPLETED,
    (CompletionState.COMPLETED, WindowState.OPEN): AssignmentStatus.COMPLETED,
    (CompletionState.COMPLETED, WindowState.ENDED): AssignmentStatus.COMPLETED_LATE,
    (CompletionState.IN_PROGRESS, WindowState.BEFORE_START): AssignmentStatus.IN_PROGRESS,
    (CompletionState.IN_PROGRESS, WindowState.OPEN): AssignmentStatus.IN_PROGRESS,
    (CompletionState.IN_PROGRESS, WindowState.ENDED): AssignmentStatus.INCOMPLETE_EXPIRED,
    (CompletionState.NOT_STARTED, WindowState.BEFORE_START): AssignmentStatus.SCHEDULED,
    (CompletionState.NOT_STARTED, WindowState.OPEN): AssignmentStatus.NOT_STARTED,
    (CompletionState.NOT_STARTED, WindowState.ENDED): AssignmentStatus.NOT_SUBMITTED,
}


def module_completion_state(progress: AssignmentProgress) -> CompletionState:
    """
    completed: every module is Completed or WaitForModuleDurationToElapse.
    in-progress: any module InProgress or done.
    not-started: otherwise.

    Without module rows, fall back to the assignment-level timestamps.
    """
    if progress.modules:
        statuses = [m.status for m in progress.modules]
        if all(s.counts_as_done for s in statuses):
            return CompletionState.COMPLETED
        if any(s is ModuleStatus.IN_PROGRESS or s.counts_as_done for s in statuses):
            return CompletionState.IN_PROGRESS
        return CompletionState.NOT_STARTED

    if progress.completed_at_utc is not None:
        return CompletionState.COMPLETED
    if progress.started_at_utc is not None:
        return CompletionState.IN_PROGRESS
    return CompletionState.NOT_STARTED


def window_state(window: AssignmentWindow, at: datetime) -> WindowState:
    """
    Position of `at` relative to the window. A missing bound never triggers its state.
    Naive datetimes, bounds included, are read as UTC.
    """
    at = parse_utc(at)
    start = parse_utc(window.start_date_utc)
    end = parse_utc(window.end_date_utc)
    if start is not None and at < start:
        return WindowState.BEFORE_START
    if end is not None and at > end:
        return WindowState.ENDED
    return WindowState.OPEN


def completion_instant(progress: AssignmentProgress) -> Optional[datetime]:
    """Latest module completion time, else the assignment-level completion time."""
    times = [parse_utc(m.completed_at_utc) for m in progress.modules if m.completed_at_utc is not None]
    if times:
        return max(times)
    return parse_utc(progress.completed_at_utc)


def classify_assignment(
    progress: AssignmentProgress,
    now: Optional[datetime] = None,
) -> AssignmentStatus:
    """
    Reporting label for one exam-taker's assignment.

    Completed work is judged at the moment it was completed (late when the
    window had already ended); everything else is judged at `now`.
    """
    now = now or utc_now()
    completion = module_completion_state(progress)
    at = now
    if completion is CompletionState.COMPLETED:
        at = completion_instant(progress) or now
    key = (completion, window_state(progress.window, at))
    try:
        return DECISION_TABLE[key]
    except KeyError:
        raise UnclassifiedAssignmentError(f"No assignment status for {key}") from None


def summarize_statuses(
    progress_list: Iterable[AssignmentProgress],
    now: Optional[datetime] = None,
) -> dict[AssignmentStatus, int]:
    """Count of assignments per label; every label is present."""
    now = now or utc_now()
    counts = Counter(classify_assignment(p, now) for p in progress_list)
    return {status: counts.get(status, 0) for status in AssignmentStatus}


def assignment_score(progress: AssignmentProgress) -> Optional[float]:
    """Average module score; modules without a score count as 0."""
    if not progress.modules:
        return None
    total = sum(m.score or 0 for m in progress.modules)
    return total / len(progress.modules)


def assignment_time_spent(progress: AssignmentProgress, status: AssignmentStatus) -> str:
    return format_time_spent(progress.time_spent_minutes, completed=status is AssignmentStatus.COMPLETED)


def access_state(window: AssignmentWindow, now: Optional[datetime] = None) -> AccessState:
    """Badge for the exam-taker's assignment list."""
    state = window_state(window, now or utc_now())
    if state is WindowState.BEFORE_START:
        return AccessState.SCHEDULED
    if state is WindowState.OPEN:
        return AccessState.ACTIVE
    return AccessState.ENDED
