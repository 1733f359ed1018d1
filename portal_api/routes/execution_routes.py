"""
Execution endpoints: fetch an exam-taker's module states through the session
service and start or resume a module.
"""

from typing import AsyncIterator

from fastapi import APIRouter, Depends, HTTPException

from infra.session.client import SessionServiceClient
from portal_api.config import Settings, get_settings
from portal_api.schemas.status_schemas import ExecutionStateResponse, LaunchResponse
from portal_api.services.execution_service import ExecutionSession, SessionGateway
from portal_api.services.status_service import group_response
from portal_api.utils.logger import get_logger
from progress_engine import ModuleAction, action_for

execution_routes = APIRouter()
logger = get_logger("execution_routes")


async def get_session_gateway(settings: Settings = Depends(get_settings)) -> AsyncIterator[SessionGateway]:
    client = SessionServiceClient(settings.upstream_base_url, timeout=settings.upstream_timeout_seconds)
    try:
        yield client
    finally:
        await client.aclose()


def _session(gateway: SessionGateway, settings: Settings, exam_taker_id: str, assignment_id: str) -> ExecutionSession:
    return ExecutionSession(
        gateway,
        exam_taker_id,
        assignment_id,
        tz=settings.viewer_tz(),
        urgent_threshold=settings.urgent_threshold_minutes,
        warning_threshold=settings.warning_threshold_minutes,
    )


def _state(session: ExecutionSession, settings: Settings) -> ExecutionStateResponse:
    return ExecutionStateResponse(
        exam_taker_id=session.exam_taker_id,
        assignment_id=session.assignment_id,
        group=group_response(session.group_id, session.policy, session.evaluations()),
        error=session.error,
        refresh_interval_seconds=settings.refresh_interval_seconds,
        fetched_at=session.fetched_at,
    )


@execution_routes.get(
    "/execution/{exam_taker_id}/assignments/{assignment_id}",
    response_model=ExecutionStateResponse,
)
async def get_execution_state(
    exam_taker_id: str,
    assignment_id: str,
    gateway: SessionGateway = Depends(get_session_gateway),
    settings: Settings = Depends(get_settings),
) -> ExecutionStateResponse:
    """Current module states for the exam-taker, evaluated for display."""
    session = _session(gateway, settings, exam_taker_id, assignment_id)
    await session.load()
    return _state(session, settings)


@execution_routes.post(
    "/execution/{exam_taker_id}/assignments/{assignment_id}/modules/{module_id}/launch",
    response_model=LaunchResponse,
)
async def launch_module(
    exam_taker_id: str,
    assignment_id: str,
    module_id: str,
    gateway: SessionGateway = Depends(get_session_gateway),
    settings: Settings = Depends(get_settings),
) -> LaunchResponse:
    """
    Start (NotStarted) or resume (InProgress) a module, then return the
    re-fetched state. Other statuses are refused with 409.

    Each request builds its own session, so the launching guard does not
    span requests. Keeping at most one launch in flight is up to the client.
    """
    session = _session(gateway, settings, exam_taker_id, assignment_id)
    await session.load()

    snapshot = session.find(module_id)
    if snapshot is None:
        raise HTTPException(status_code=404, detail="Module not found in assignment")

    action = action_for(snapshot.status)
    if action is ModuleAction.NONE:
        raise HTTPException(
            status_code=409,
            detail=f"Module cannot be launched while {snapshot.status.display_text}",
        )

    if action is ModuleAction.CREATE_PROGRESS:
        await session.select(snapshot.id)
        record = await session.confirm_launch()
    else:
        record = await session.continue_module(snapshot.id)

    logger.info(
        "launch handled exam_taker=%s assignment=%s module=%s action=%s",
        exam_taker_id, assignment_id, snapshot.id, action.value,
    )
    return LaunchResponse(progress=record, state=_state(session, settings))
