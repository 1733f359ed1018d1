"""
Module time, display and refresh endpoints. Stateless: the caller posts the
snapshots it got from the session service.
"""

from fastapi import APIRouter, Depends, HTTPException

from portal_api.config import Settings, get_settings
from portal_api.schemas.status_schemas import (
    GroupEvaluateRequest,
    GroupEvaluationResponse,
    ModuleTimeInfoOut,
    ModuleTimeRequest,
    ModuleTimeResponse,
    RefreshCheckRequest,
    RefreshCheckResponse,
)
from portal_api.services.status_service import evaluate_group_response, refresh_check
from progress_engine import classify_module_time, urgency

status_routes = APIRouter()


def _viewer_tz(settings: Settings, name: str | None):
    """Per-request override; DISPLAY_TIMEZONE is already checked when settings load."""
    try:
        return settings.viewer_tz(name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@status_routes.post("/status/modules/time", response_model=ModuleTimeResponse)
async def module_time(
    body: ModuleTimeRequest,
    settings: Settings = Depends(get_settings),
) -> ModuleTimeResponse:
    """Remaining time, duration and completion display for one module."""
    tz = _viewer_tz(settings, body.timezone)
    info = classify_module_time(body.module.to_snapshot(), tz)
    band = urgency(
        info.remaining_minutes if info else None,
        settings.urgent_threshold_minutes,
        settings.warning_threshold_minutes,
    )
    return ModuleTimeResponse(module_id=body.module.id, time_info=ModuleTimeInfoOut.from_info(info, band))


@status_routes.post("/status/groups/evaluate", response_model=GroupEvaluationResponse)
async def evaluate_group(
    body: GroupEvaluateRequest,
    settings: Settings = Depends(get_settings),
) -> GroupEvaluationResponse:
    """Badge, button, action and time info for every module of a group, in order."""
    return evaluate_group_response(
        body.group.id,
        body.group.snapshots(),
        body.group.to_policy(),
        _viewer_tz(settings, body.timezone),
        settings.urgent_threshold_minutes,
        settings.warning_threshold_minutes,
    )


@status_routes.post("/status/groups/refresh-check", response_model=RefreshCheckResponse)
async def check_refresh(body: RefreshCheckRequest) -> RefreshCheckResponse:
    """
    Whether the client should re-fetch from the session service rather than
    just re-render: a started module's remaining time crossed zero, or the tab
    became visible again while a module is running.
    """
    return refresh_check(body.previous_remaining_minutes, body.modules, body.visibility_regained)
