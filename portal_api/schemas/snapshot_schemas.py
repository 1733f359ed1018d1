"""
Wire models for upstream session/reporting payloads.

This is where backend strings become engine types: statuses go through
parse_module_status, timestamps through parse_utc (naive means UTC).
"""

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from progress_engine import (
    AssignmentProgress,
    AssignmentWindow,
    GroupSchedulingPolicy,
    ModuleProgressSnapshot,
    ModuleReport,
    ModuleStatus,
    parse_module_status,
)
from progress_engine.time_utils import parse_utc


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _status(value: Any) -> ModuleStatus:
    return parse_module_status(value)


def _utc(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, (str, datetime)):
        return parse_utc(value)
    raise ValueError(f"Invalid timestamp: {value!r}")


UtcDatetime = Annotated[Optional[datetime], BeforeValidator(_utc)]
WireStatus = Annotated[ModuleStatus, BeforeValidator(_status)]


class ModuleSnapshotIn(CamelModel):
    """One group member state as sent by the session service."""
    id: str
    order_number: int
    assessment_module_id: str = ""
    title: str = Field(
        default="",
        validation_alias=AliasChoices("title", "assessmentModuleTitle", "name"),
    )
    description: str = Field(
        default="",
        validation_alias=AliasChoices("description", "assessmentModuleDescription"),
    )
    status: WireStatus
    started_at_utc: UtcDatetime = None
    completed_at_utc: UtcDatetime = None
    duration_in_minutes: Optional[int] = None
    time_remaining: Optional[str] = None
    passed: Optional[bool] = None
    score_percentage: Optional[float] = None
    passing_score_percentage: Optional[float] = None
    static_file_urls: list[str] = Field(default_factory=list)

    @field_validator("title", "description", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("static_file_urls", mode="before")
    @classmethod
    def none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_snapshot(self) -> ModuleProgressSnapshot:
        return ModuleProgressSnapshot(
            id=self.id,
            order_number=self.order_number,
            assessment_module_id=self.assessment_module_id,
            title=self.title,
            description=self.description,
            status=self.status,
            started_at_utc=self.started_at_utc,
            completed_at_utc=self.completed_at_utc,
            duration_in_minutes=self.duration_in_minutes,
            time_remaining=self.time_remaining,
            passed=self.passed,
            score_percentage=self.score_percentage,
            passing_score_percentage=self.passing_score_percentage,
            static_file_urls=tuple(self.static_file_urls),
        )


class SchedulingPolicyIn(CamelModel):
    is_member_order_locked: bool = False
    wait_module_completion: bool = False

    def to_policy(self) -> GroupSchedulingPolicy:
        return GroupSchedulingPolicy(
            is_member_order_locked=self.is_member_order_locked,
            wait_module_completion=self.wait_module_completion,
        )


class GroupStateIn(SchedulingPolicyIn):
    """Group state: policy flags plus the member states."""
    id: str = ""
    title: str = ""
    description: Optional[str] = None
    group_members: list[ModuleSnapshotIn] = Field(default_factory=list)

    def snapshots(self) -> list[ModuleProgressSnapshot]:
        return [m.to_snapshot() for m in self.group_members]


class AssignmentWindowIn(CamelModel):
    start_date_utc: UtcDatetime = None
    end_date_utc: UtcDatetime = None

    def to_window(self) -> AssignmentWindow:
        return AssignmentWindow(start_date_utc=self.start_date_utc, end_date_utc=self.end_date_utc)


class ModuleReportIn(CamelModel):
    module_id: str
    module_title: str = ""
    status: WireStatus
    score: Optional[float] = None
    passed: Optional[bool] = None
    started_at_utc: UtcDatetime = None
    completed_at_utc: UtcDatetime = None
    time_spent_minutes: float = 0.0
    passing_score: Optional[float] = None

    def to_report(self) -> ModuleReport:
        return ModuleReport(
            module_id=self.module_id,
            title=self.module_title,
            status=self.status,
            score=self.score,
            passed=self.passed,
            started_at_utc=self.started_at_utc,
            completed_at_utc=self.completed_at_utc,
            time_spent_minutes=self.time_spent_minutes,
            passing_score=self.passing_score,
        )


class ExamTakerAssignmentReportIn(CamelModel):
    """Exam-taker assignment report row from the reporting service."""
    assignment_id: str = ""
    assignment_title: str = ""
    assignment_start_date_utc: UtcDatetime = None
    assignment_end_date_utc: UtcDatetime = None
    started_at_utc: UtcDatetime = None
    completed_at_utc: UtcDatetime = None
    time_spent_minutes: Optional[float] = None
    module_reports: list[ModuleReportIn] = Field(default_factory=list)

    def to_progress(self) -> AssignmentProgress:
        return AssignmentProgress(
            window=AssignmentWindow(
                start_date_utc=self.assignment_start_date_utc,
                end_date_utc=self.assignment_end_date_utc,
            ),
            modules=tuple(m.to_report() for m in self.module_reports),
            assignment_id=self.assignment_id,
            title=self.assignment_title,
            started_at_utc=self.started_at_utc,
            completed_at_utc=self.completed_at_utc,
            time_spent_minutes=self.time_spent_minutes,
        )


class ModuleProgressRecord(CamelModel):
    """Progress record returned by the create/lookup calls."""
    id: str
    exam_taker_assignment_id: str
    group_member_id: Optional[str] = None
    started_at_utc: UtcDatetime = None
    completed_at_utc: UtcDatetime = None
    time_remaining: Optional[str] = None

