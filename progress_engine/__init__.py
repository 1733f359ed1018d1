"""
Status engine for assignment/module progress. Pure functions over snapshots; no I/O.
"""

from progress_engine.aggregate_status import (
    AccessState,
    AssignmentStatus,
    CompletionState,
    UnclassifiedAssignmentError,
    WindowState,
    access_state,
    assignment_score,
    classify_assignment,
    module_completion_state,
    summarize_statuses,
    window_state,
)
from progress_engine.module_status import ModuleStatus, UnknownModuleStatusError, parse_module_status
from progress_engine.refresh import CountdownMonitor, crossed_zero, has_running_modules, remaining_minutes_map
from progress_engine.snapshots import (
    AssignmentProgress,
    AssignmentWindow,
    DuplicateOrderNumberError,
    GroupSchedulingPolicy,
    ModuleProgressSnapshot,
    ModuleReport,
)
from progress_engine.time_classifier import ModuleTimeInfo, Urgency, classify_module_time, urgency
from progress_engine.unlock_evaluator import (
    ModuleAction,
    ModuleDisplay,
    ModuleEvaluation,
    action_for,
    describe_status,
    evaluate_group,
)

__all__ = [
    "AccessState",
    "AssignmentProgress",
    "AssignmentStatus",
    "AssignmentWindow",
    "CompletionState",
    "CountdownMonitor",
    "DuplicateOrderNumberError",
    "GroupSchedulingPolicy",
    "ModuleAction",
    "ModuleDisplay",
    "ModuleEvaluation",
    "ModuleProgressSnapshot",
    "ModuleReport",
    "ModuleStatus",
    "ModuleTimeInfo",
    "UnclassifiedAssignmentError",
    "UnknownModuleStatusError",
    "Urgency",
    "WindowState",
    "access_state",
    "action_for",
    "assignment_score",
    "classify_assignment",
    "classify_module_time",
    "crossed_zero",
    "describe_status",
    "evaluate_group",
    "has_running_modules",
    "module_completion_state",
    "parse_module_status",
    "remaining_minutes_map",
    "summarize_statuses",
    "urgency",
    "window_state",
]
