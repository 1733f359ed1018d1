"""
API schemas package. Import from submodules or from this package.

Example:
    from portal_api.schemas import GroupStateIn, GroupEvaluationResponse
    from portal_api.schemas.snapshot_schemas import ModuleSnapshotIn
"""

from portal_api.schemas.snapshot_schemas import (
    AssignmentWindowIn,
    CamelModel,
    ExamTakerAssignmentReportIn,
    GroupStateIn,
    ModuleProgressRecord,
    ModuleReportIn,
    ModuleSnapshotIn,
    SchedulingPolicyIn,
)
from portal_api.schemas.status_schemas import (
    AccessStateRequest,
    AccessStateResponse,
    AssignmentStatusRequest,
    AssignmentStatusResponse,
    AssignmentSummaryRequest,
    AssignmentSummaryResponse,
    ExecutionStateResponse,
    GroupEvaluateRequest,
    GroupEvaluationResponse,
    LaunchResponse,
    ModuleDisplayOut,
    ModuleEvaluationOut,
    ModuleTimeInfoOut,
    ModuleTimeRequest,
    ModuleTimeResponse,
    RefreshCheckRequest,
    RefreshCheckResponse,
)

__all__ = [
    "AccessStateRequest",
    "AccessStateResponse",
    "AssignmentStatusRequest",
    "AssignmentStatusResponse",
    "AssignmentSummaryRequest",
    "AssignmentSummaryResponse",
    "AssignmentWindowIn",
    "CamelModel",
    "ExamTakerAssignmentReportIn",
    "ExecutionStateResponse",
    "GroupEvaluateRequest",
    "GroupEvaluationResponse",
    "GroupStateIn",
    "LaunchResponse",
    "ModuleDisplayOut",
    "ModuleEvaluationOut",
    "ModuleProgressRecord",
    "ModuleReportIn",
    "ModuleSnapshotIn",
    "ModuleTimeInfoOut",
    "ModuleTimeRequest",
    "ModuleTimeResponse",
    "RefreshCheckRequest",
    "RefreshCheckResponse",
    "SchedulingPolicyIn",
]
