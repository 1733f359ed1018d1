"""
Integration test fixtures. Overrides get_session_gateway for API tests with an
in-memory fake of the session service.
"""
import pytest

from infra.session.client import UpstreamError
from portal_api.schemas.snapshot_schemas import (
    ExamTakerAssignmentReportIn,
    GroupStateIn,
    ModuleProgressRecord,
    ModuleSnapshotIn,
)


class FakeSessionGateway:
    """Serves one group state; member refreshes return `after_launch` once set."""

    def __init__(self, group: dict):
        self.group = group
        self.after_launch: list[dict] | None = None
        self.fail_with: str | None = None
        self.reports: list[dict] = []
        self.created: list[str] = []
        self.fetched: list[str] = []

    def _check(self):
        if self.fail_with:
            raise UpstreamError(self.fail_with, 503)

    async def get_group_state(self, exam_taker_id, assignment_id):
        self._check()
        return GroupStateIn.model_validate(self.group)

    async def get_group_member_states(self, exam_taker_id, exam_taker_assignment_id, group_id):
        self._check()
        members = self.after_launch if self.after_launch is not None else self.group["groupMembers"]
        return [ModuleSnapshotIn.model_validate(m) for m in members]

    async def get_module_progress(self, exam_taker_id, assignment_id, assessment_module_id):
        self._check()
        self.fetched.append(assessment_module_id)
        return ModuleProgressRecord(id=f"p-{assessment_module_id}", exam_taker_assignment_id="eta-1")

    async def create_module_progress(self, exam_taker_id, assignment_id, assessment_module_id):
        self._check()
        self.created.append(assessment_module_id)
        return ModuleProgressRecord(id=f"p-{assessment_module_id}", exam_taker_assignment_id="eta-1")

    async def get_assignment_reports(self, exam_taker_id, assignment_id):
        self._check()
        return [ExamTakerAssignmentReportIn.model_validate(r) for r in self.reports]


def member(id: str, order: int, status: str, **extra) -> dict:
    return {
        "id": id,
        "orderNumber": order,
        "assessmentModuleId": f"am-{id}",
        "title": f"Module {order}",
        "status": status,
        **extra,
    }


@pytest.fixture
def fake_gateway():
    return FakeSessionGateway(
        {
            "id": "g1",
            "title": "Group 1",
            "isMemberOrderLocked": True,
            "waitModuleCompletion": False,
            "groupMembers": [
                member("m1", 1, "NotStarted", durationInMinutes=45),
                member("m2", 2, "Locked"),
                member("m3", 3, "InProgress"),
            ],
        }
    )


@pytest.fixture
def api_client(fake_gateway):
    """FastAPI TestClient with the session service replaced by a fake."""
    from fastapi.testclient import TestClient
    from portal_api.api import app
    from portal_api.routes.execution_routes import get_session_gateway

    app.dependency_overrides[get_session_gateway] = lambda: fake_gateway
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
