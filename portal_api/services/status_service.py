"""
Builds API responses from engine results.
"""

from datetime import datetime, tzinfo
from typing import Optional, Sequence

from infra.session.client import UpstreamError
from portal_api.schemas.snapshot_schemas import ExamTakerAssignmentReportIn, ModuleSnapshotIn
from portal_api.schemas.status_schemas import (
    AssignmentStatusResponse,
    AssignmentSummaryResponse,
    GroupEvaluationResponse,
    ModuleEvaluationOut,
    RefreshCheckResponse,
)
from portal_api.services.execution_service import DataFetchError, SessionGateway
from portal_api.utils.logger import get_logger
from progress_engine import (
    GroupSchedulingPolicy,
    ModuleEvaluation,
    ModuleProgressSnapshot,
    assignment_score,
    classify_assignment,
    crossed_zero,
    evaluate_group,
    has_running_modules,
    remaining_minutes_map,
    summarize_statuses,
)
from progress_engine.aggregate_status import assignment_time_spent
from progress_engine.unlock_evaluator import enabled_module_ids
from progress_engine.time_utils import utc_now

logger = get_logger("status_service")


def group_response(
    group_id: str,
    policy: GroupSchedulingPolicy,
    evaluations: Sequence[ModuleEvaluation],
) -> GroupEvaluationResponse:
    return GroupEvaluationResponse(
        group_id=group_id,
        is_member_order_locked=policy.is_member_order_locked,
        wait_module_completion=policy.wait_module_completion,
        modules=[ModuleEvaluationOut.from_evaluation(e) for e in evaluations],
        enabled_module_ids=enabled_module_ids(evaluations),
    )


def evaluate_group_response(
    group_id: str,
    snapshots: Sequence[ModuleProgressSnapshot],
    policy: GroupSchedulingPolicy,
    tz: Optional[tzinfo],
    urgent_threshold: int,
    warning_threshold: int,
) -> GroupEvaluationResponse:
    evaluations = evaluate_group(snapshots, policy, tz, urgent_threshold, warning_threshold)
    return group_response(group_id, policy, evaluations)


def refresh_check(
    previous: dict[str, int],
    modules: Sequence[ModuleSnapshotIn],
    visibility_regained: bool,
) -> RefreshCheckResponse:
    snapshots = [m.to_snapshot() for m in modules]
    current = remaining_minutes_map(snapshots)
    if crossed_zero(previous, current, snapshots):
        return RefreshCheckResponse(should_refresh=True, reason="time-expired", remaining_minutes=current)
    if visibility_regained and has_running_modules(snapshots):
        return RefreshCheckResponse(should_refresh=True, reason="visibility-regained", remaining_minutes=current)
    return RefreshCheckResponse(should_refresh=False, remaining_minutes=current)


def assignment_status(
    report: ExamTakerAssignmentReportIn,
    now: Optional[datetime] = None,
) -> AssignmentStatusResponse:
    progress = report.to_progress()
    status = classify_assignment(progress, now)
    return AssignmentStatusResponse(
        assignment_id=progress.assignment_id,
        status=status,
        score=assignment_score(progress),
        time_spent=assignment_time_spent(progress, status),
    )


def assignment_summary(
    reports: Sequence[ExamTakerAssignmentReportIn],
    now: Optional[datetime] = None,
) -> AssignmentSummaryResponse:
    now = now or utc_now()
    counts = summarize_statuses((r.to_progress() for r in reports), now)
    return AssignmentSummaryResponse(
        total=len(reports),
        counts={status.value: n for status, n in counts.items()},
        assignments=[assignment_status(r, now) for r in reports],
    )


async def fetch_assignment_summary(
    gateway: SessionGateway,
    exam_taker_id: str,
    assignment_id: str,
    now: Optional[datetime] = None,
) -> AssignmentSummaryResponse:
    """Pull report rows from the reporting service and label them."""
    try:
        reports = await gateway.get_assignment_reports(exam_taker_id, assignment_id)
    except UpstreamError as e:
        logger.warning(
            "assignment report fetch failed exam_taker=%s assignment=%s error=%s",
            exam_taker_id, assignment_id, e.message,
        )
        raise DataFetchError(f"Failed to load assignment report: {e.message}") from e
    return assignment_summary(reports, now)
