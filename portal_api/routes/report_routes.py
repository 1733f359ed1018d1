"""
Reporting endpoints: assignment-level status labels and summaries.
"""

from fastapi import APIRouter, Depends

from portal_api.schemas.status_schemas import (
    AccessStateRequest,
    AccessStateResponse,
    AssignmentStatusRequest,
    AssignmentStatusResponse,
    AssignmentSummaryRequest,
    AssignmentSummaryResponse,
)
from portal_api.routes.execution_routes import get_session_gateway
from portal_api.services.execution_service import SessionGateway
from portal_api.services.status_service import assignment_status, assignment_summary, fetch_assignment_summary
from progress_engine import access_state

report_routes = APIRouter()


@report_routes.post("/reports/assignments/status", response_model=AssignmentStatusResponse)
async def get_assignment_status(body: AssignmentStatusRequest) -> AssignmentStatusResponse:
    return assignment_status(body.report, body.now)


@report_routes.post("/reports/assignments/summary", response_model=AssignmentSummaryResponse)
async def get_assignment_summary(body: AssignmentSummaryRequest) -> AssignmentSummaryResponse:
    """Label counts over an exam-taker's assignments, plus each assignment's row."""
    return assignment_summary(body.reports, body.now)


@report_routes.post("/reports/assignments/access", response_model=AccessStateResponse)
async def get_access_state(body: AccessStateRequest) -> AccessStateResponse:
    return AccessStateResponse(state=access_state(body.window.to_window(), body.now))


@report_routes.get(
    "/reports/exam-takers/{exam_taker_id}/assignments/{assignment_id}",
    response_model=AssignmentSummaryResponse,
)
async def get_exam_taker_report(
    exam_taker_id: str,
    assignment_id: str,
    gateway: SessionGateway = Depends(get_session_gateway),
) -> AssignmentSummaryResponse:
    """Same summary as above, with report rows fetched from the reporting service."""
    return await fetch_assignment_summary(gateway, exam_taker_id, assignment_id)
