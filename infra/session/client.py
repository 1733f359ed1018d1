"""
HTTP client for the upstream session/reporting service.

Every response is wrapped as {"isSuccess": bool, "message": str, "data": ...}.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import ValidationError

from portal_api.schemas.snapshot_schemas import (
    ExamTakerAssignmentReportIn,
    GroupStateIn,
    ModuleProgressRecord,
    ModuleSnapshotIn,
)
from portal_api.utils.logger import get_logger, log_request

logger = get_logger("session_client")

DEFAULT_TIMEOUT = 15.0


class UpstreamError(Exception):
    """The session service could not be reached or reported a failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SessionServiceClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        headers: Optional[dict[str, str]] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers=headers,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "SessionServiceClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        with log_request(logger, f"{method} {path}"):
            try:
                response = await self._client.request(method, path, **kwargs)
            except httpx.HTTPError as e:
                raise UpstreamError(f"Session service unreachable: {e}") from e

            try:
                body = response.json()
            except ValueError:
                body = None

            if response.is_error:
                message = body.get("message") if isinstance(body, dict) else None
                raise UpstreamError(
                    message or f"Session service returned status {response.status_code}",
                    status_code=response.status_code,
                )
            if not isinstance(body, dict):
                raise UpstreamError("Session service returned a malformed response", response.status_code)
            if not body.get("isSuccess") or body.get("data") is None:
                raise UpstreamError(body.get("message") or "Unknown error", response.status_code)
            return body["data"]

    @staticmethod
    def _parse(model, data: Any):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise UpstreamError(f"Unexpected session service payload: {e.error_count()} validation error(s)") from e

    async def get_group_state(self, exam_taker_id: str, assignment_id: str) -> GroupStateIn:
        data = await self._request("GET", f"/sessions/{exam_taker_id}/assignment/{assignment_id}/group/state")
        return self._parse(GroupStateIn, data)

    async def get_group_member_states(
        self,
        exam_taker_id: str,
        exam_taker_assignment_id: str,
        group_id: str,
    ) -> list[ModuleSnapshotIn]:
        data = await self._request(
            "GET",
            f"/sessions/{exam_taker_id}/assignment/{exam_taker_assignment_id}/group/{group_id}/members",
        )
        if not isinstance(data, list):
            raise UpstreamError("Unexpected session service payload: member states must be a list")
        return [self._parse(ModuleSnapshotIn, item) for item in data]

    async def get_module_progress(
        self,
        exam_taker_id: str,
        assignment_id: str,
        assessment_module_id: str,
    ) -> ModuleProgressRecord:
        data = await self._request(
            "GET",
            f"/sessions/{exam_taker_id}/assignment/{assignment_id}/module/{assessment_module_id}/progress",
        )
        return self._parse(ModuleProgressRecord, data)

    async def create_module_progress(
        self,
        exam_taker_id: str,
        assignment_id: str,
        assessment_module_id: str,
    ) -> ModuleProgressRecord:
        data = await self._request(
            "POST",
            f"/sessions/{exam_taker_id}/assignment/{assignment_id}/module/{assessment_module_id}/progress",
        )
        return self._parse(ModuleProgressRecord, data)

    async def get_assignment_reports(
        self,
        exam_taker_id: str,
        assignment_id: str,
    ) -> list[ExamTakerAssignmentReportIn]:
        data = await self._request("GET", f"/reports/exam-takers/{exam_taker_id}/assignments/{assignment_id}")
        rows = data.get("assignmentProgress") if isinstance(data, dict) else None
        return [self._parse(ExamTakerAssignmentReportIn, row) for row in rows or []]
