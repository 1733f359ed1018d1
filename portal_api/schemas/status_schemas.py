"""
Request and response bodies for the status, report and execution endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from portal_api.schemas.snapshot_schemas import (
    AssignmentWindowIn,
    CamelModel,
    ExamTakerAssignmentReportIn,
    GroupStateIn,
    ModuleProgressRecord,
    ModuleSnapshotIn,
    UtcDatetime,
)
from progress_engine import (
    AccessState,
    AssignmentStatus,
    ModuleAction,
    ModuleEvaluation,
    ModuleStatus,
    ModuleTimeInfo,
    Urgency,
)


# ----- Module time / display -----

class ModuleTimeRequest(CamelModel):
    module: ModuleSnapshotIn
    timezone: Optional[str] = None


class ModuleTimeInfoOut(CamelModel):
    remaining_display: Optional[str] = None
    remaining_minutes: Optional[int] = None
    duration_display: Optional[str] = None
    completed_display: Optional[str] = None
    urgency: Optional[Urgency] = None

    @classmethod
    def from_info(cls, info: Optional[ModuleTimeInfo], urgency: Optional[Urgency]) -> Optional["ModuleTimeInfoOut"]:
        if info is None:
            return None
        return cls(
            remaining_display=info.remaining_display,
            remaining_minutes=info.remaining_minutes,
            duration_display=info.duration_display,
            completed_display=info.completed_display,
            urgency=urgency,
        )


class ModuleTimeResponse(CamelModel):
    module_id: str
    time_info: Optional[ModuleTimeInfoOut] = None


class ModuleDisplayOut(CamelModel):
    badge: Optional[str] = None
    button_text: str
    is_enabled: bool
    show_button: bool
    message: Optional[str] = None


class ModuleEvaluationOut(CamelModel):
    id: str
    order_number: int
    assessment_module_id: str
    title: str
    status: ModuleStatus
    status_text: str
    display: ModuleDisplayOut
    action: ModuleAction
    time_info: Optional[ModuleTimeInfoOut] = None

    @classmethod
    def from_evaluation(cls, e: ModuleEvaluation) -> "ModuleEvaluationOut":
        s = e.snapshot
        return cls(
            id=s.id,
            order_number=s.order_number,
            assessment_module_id=s.assessment_module_id,
            title=s.title,
            status=s.status,
            status_text=s.status.display_text,
            display=ModuleDisplayOut(
                badge=e.display.badge,
                button_text=e.display.button_text,
                is_enabled=e.display.is_enabled,
                show_button=e.display.show_button,
                message=e.display.message,
            ),
            action=e.action,
            time_info=ModuleTimeInfoOut.from_info(e.time_info, e.urgency),
        )


class GroupEvaluateRequest(CamelModel):
    group: GroupStateIn
    timezone: Optional[str] = None


class GroupEvaluationResponse(CamelModel):
    group_id: str = ""
    is_member_order_locked: bool
    wait_module_completion: bool
    modules: list[ModuleEvaluationOut]
    enabled_module_ids: list[str]


# ----- Refresh triggers -----

class RefreshCheckRequest(CamelModel):
    previous_remaining_minutes: dict[str, int] = Field(default_factory=dict)
    modules: list[ModuleSnapshotIn]
    visibility_regained: bool = False


class RefreshCheckResponse(CamelModel):
    should_refresh: bool
    reason: Optional[str] = None
    remaining_minutes: dict[str, int]


# ----- Reporting -----

class AssignmentStatusRequest(CamelModel):
    report: ExamTakerAssignmentReportIn
    now: UtcDatetime = None


class AssignmentStatusResponse(CamelModel):
    assignment_id: str
    status: AssignmentStatus
    score: Optional[float] = None
    time_spent: str


class AssignmentSummaryRequest(CamelModel):
    reports: list[ExamTakerAssignmentReportIn]
    now: UtcDatetime = None


class AssignmentSummaryResponse(CamelModel):
    total: int
    counts: dict[str, int]
    assignments: list[AssignmentStatusResponse]


class AccessStateRequest(CamelModel):
    window: AssignmentWindowIn
    now: UtcDatetime = None


class AccessStateResponse(CamelModel):
    state: AccessState


# ----- Execution -----

class ExecutionStateResponse(CamelModel):
    exam_taker_id: str
    assignment_id: str
    group: GroupEvaluationResponse
    error: Optional[str] = None
    refresh_interval_seconds: int
    fetched_at: datetime


class LaunchResponse(CamelModel):
    progress: ModuleProgressRecord
    state: ExecutionStateResponse
