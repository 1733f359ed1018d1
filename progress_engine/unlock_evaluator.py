"""
Display contract for module cards: badge, button and whether the exam-taker may
enter the module.

Locked / Scheduled / WaitForModuleDurationToElapse are decided by the backend.
This module only maps each status to what the UI offers for it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from enum import Enum
from typing import Optional, Sequence

from progress_engine.module_status import ModuleStatus
from progress_engine.snapshots import (
    GroupSchedulingPolicy,
    ModuleProgressSnapshot,
    check_order_numbers,
)
from progress_engine.time_classifier import (
    URGENT_THRESHOLD_MINUTES,
    WARNING_THRESHOLD_MINUTES,
    ModuleTimeInfo,
    Urgency,
    classify_module_time,
    urgency,
)


class ModuleAction(str, Enum):
    CREATE_PROGRESS = "create_progress"
    FETCH_PROGRESS = "fetch_progress"
    NONE = "none"


@dataclass(frozen=True)
class ModuleDisplay:
    badge: Optional[str]
    button_text: str
    is_enabled: bool
    show_button: bool
    message: Optional[str] = None


@dataclass(frozen=True)
class ModuleEvaluation:
    snapshot: ModuleProgressSnapshot
    display: ModuleDisplay
    action: ModuleAction
    time_info: Optional[ModuleTimeInfo]
    urgency: Optional[Urgency]


LOCKED_MESSAGES: dict[tuple[bool, bool], str] = {
    # (is_member_order_locked, wait_module_completion)
    (True, True): "Complete previous modules in order and wait for completion before accessing this module.",
    (True, False): "Complete previous modules to unlock this one.",
    (False, True): "Wait for the current module to be completed before starting this one.",
    (False, False): "This module is currently locked.",
}

_STATIC_DISPLAYS: dict[ModuleStatus, ModuleDisplay] = {
    ModuleStatus.WAIT_FOR_MODULE_DURATION_TO_ELAPSE: ModuleDisplay(
        badge="Waiting",
        button_text="Waiting",
        is_enabled=False,
        show_button=False,
        message="Module completed - waiting for full duration to elapse before next module becomes available.",
    ),
    ModuleStatus.SCHEDULED: ModuleDisplay(
        badge="Scheduled",
        button_text="Scheduled",
        is_enabled=False,
        show_button=False,
        message="This module is scheduled for later.",
    ),
    ModuleStatus.NOT_STARTED: ModuleDisplay(
        badge=None,
        button_text="Launch Module",
        is_enabled=True,
        show_button=True,
    ),
    ModuleStatus.IN_PROGRESS: ModuleDisplay(
        badge="In Progress",
        button_text="Continue Module",
        is_enabled=True,
        show_button=True,
    ),
    ModuleStatus.COMPLETED: ModuleDisplay(
        badge="Completed",
        button_text="Completed",
        is_enabled=False,
        show_button=False,
    ),
    ModuleStatus.TIME_ELAPSED: ModuleDisplay(
        badge="Time Elapsed",
        button_text="Time Elapsed",
        is_enabled=False,
        show_button=False,
        message="The time allocated for this module has ended.",
    ),
}


def describe_status(
    status: ModuleStatus,
    policy: Optional[GroupSchedulingPolicy] = None,
) -> ModuleDisplay:
    """Badge/button/message for a status. Defined for every ModuleStatus member."""
    if status is ModuleStatus.LOCKED:
        policy = policy or GroupSchedulingPolicy()
        key = (bool(policy.is_member_order_locked), bool(policy.wait_module_completion))
        return ModuleDisplay(
            badge="Locked",
            button_text="Locked",
            is_enabled=False,
            show_button=False,
            message=LOCKED_MESSAGES[key],
        )
    return _STATIC_DISPLAYS[status]


def action_for(status: ModuleStatus) -> ModuleAction:
    """NotStarted opens a new progress record; InProgress resumes the existing one."""
    if status is ModuleStatus.NOT_STARTED:
        return ModuleAction.CREATE_PROGRESS
    if status is ModuleStatus.IN_PROGRESS:
        return ModuleAction.FETCH_PROGRESS
    return ModuleAction.NONE


def evaluate_module(
    snapshot: ModuleProgressSnapshot,
    policy: Optional[GroupSchedulingPolicy] = None,
    tz: Optional[tzinfo] = None,
    urgent_threshold: int = URGENT_THRESHOLD_MINUTES,
    warning_threshold: int = WARNING_THRESHOLD_MINUTES,
) -> ModuleEvaluation:
    time_info = classify_module_time(snapshot, tz)
    return ModuleEvaluation(
        snapshot=snapshot,
        display=describe_status(snapshot.status, policy),
        action=action_for(snapshot.status),
        time_info=time_info,
        urgency=urgency(
            time_info.remaining_minutes if time_info else None,
            urgent_threshold,
            warning_threshold,
        ),
    )


def evaluate_group(
    snapshots: Sequence[ModuleProgressSnapshot],
    policy: Optional[GroupSchedulingPolicy] = None,
    tz: Optional[tzinfo] = None,
    urgent_threshold: int = URGENT_THRESHOLD_MINUTES,
    warning_threshold: int = WARNING_THRESHOLD_MINUTES,
) -> list[ModuleEvaluation]:
    """Evaluate every module of a group, preserving the input order."""
    check_order_numbers(snapshots)
    return [
        evaluate_module(s, policy, tz, urgent_threshold, warning_threshold)
        for s in snapshots
    ]


def enabled_module_ids(evaluations: Sequence[ModuleEvaluation]) -> list[str]:
    return [e.snapshot.id for e in evaluations if e.display.is_enabled]
