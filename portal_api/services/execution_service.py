"""
Execution session for one exam-taker working through one assignment.

Module statuses are never changed locally: every transition goes to the
session service and is followed by a full re-fetch of the member states.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional, Protocol

from infra.session.client import UpstreamError
from portal_api.schemas.snapshot_schemas import (
    ExamTakerAssignmentReportIn,
    GroupStateIn,
    ModuleProgressRecord,
    ModuleSnapshotIn,
)
from portal_api.utils.logger import get_logger
from progress_engine import (
    CountdownMonitor,
    GroupSchedulingPolicy,
    ModuleAction,
    ModuleEvaluation,
    ModuleProgressSnapshot,
    action_for,
    evaluate_group,
    has_running_modules,
)
from progress_engine.time_utils import utc_now

logger = get_logger("execution")


class ProgressServiceError(Exception):
    """Base for errors surfaced to the exam-taker."""


class DataFetchError(ProgressServiceError):
    """Loading group or member state failed; previous snapshots are kept."""


class LaunchError(ProgressServiceError):
    """Starting or continuing a module failed; nothing was changed locally."""


class SessionGateway(Protocol):
    async def get_group_state(self, exam_taker_id: str, assignment_id: str) -> GroupStateIn: ...

    async def get_group_member_states(
        self, exam_taker_id: str, exam_taker_assignment_id: str, group_id: str
    ) -> list[ModuleSnapshotIn]: ...

    async def get_module_progress(
        self, exam_taker_id: str, assignment_id: str, assessment_module_id: str
    ) -> ModuleProgressRecord: ...

    async def create_module_progress(
        self, exam_taker_id: str, assignment_id: str, assessment_module_id: str
    ) -> ModuleProgressRecord: ...

    async def get_assignment_reports(
        self, exam_taker_id: str, assignment_id: str
    ) -> list[ExamTakerAssignmentReportIn]: ...


class ExecutionSession:
    def __init__(
        self,
        gateway: SessionGateway,
        exam_taker_id: str,
        assignment_id: str,
        tz: Optional[tzinfo] = None,
        urgent_threshold: int = 10,
        warning_threshold: int = 30,
    ):
        self.gateway = gateway
        self.exam_taker_id = exam_taker_id
        self.assignment_id = assignment_id
        self.tz = tz
        self.urgent_threshold = urgent_threshold
        self.warning_threshold = warning_threshold

        self.group_id: str = ""
        self.policy = GroupSchedulingPolicy()
        self.snapshots: list[ModuleProgressSnapshot] = []
        self.error: Optional[str] = None
        self.launching = False
        self.loading = False
        self.pending_module_id: Optional[str] = None
        self.fetched_at: Optional[datetime] = None
        self.monitor = CountdownMonitor()

    # ----- reads -----

    def evaluations(self) -> list[ModuleEvaluation]:
        return evaluate_group(
            self.snapshots,
            self.policy,
            self.tz,
            self.urgent_threshold,
            self.warning_threshold,
        )

    def find(self, module_id: str) -> Optional[ModuleProgressSnapshot]:
        """Look a module up by group member id or assessment module id."""
        for s in self.snapshots:
            if module_id in (s.id, s.assessment_module_id):
                return s
        return None

    async def load(self) -> None:
        """Fetch group state; on failure keep the previous snapshots and record the error."""
        self.loading = True
        self.error = None
        try:
            state = await self.gateway.get_group_state(self.exam_taker_id, self.assignment_id)
        except UpstreamError as e:
            self.error = f"Failed to load assignment details: {e.message}"
            logger.warning(
                "group state fetch failed exam_taker=%s assignment=%s error=%s",
                self.exam_taker_id, self.assignment_id, e.message,
            )
            raise DataFetchError(self.error) from e
        finally:
            self.loading = False

        self.group_id = state.id
        self.policy = state.to_policy()
        self.snapshots = state.snapshots()
        self.fetched_at = utc_now()
        self.monitor.reset(self.snapshots)
        logger.info(
            "group state loaded exam_taker=%s assignment=%s modules=%d",
            self.exam_taker_id, self.assignment_id, len(self.snapshots),
        )

    async def _refresh_members(self, exam_taker_assignment_id: str) -> None:
        try:
            members = await self.gateway.get_group_member_states(
                self.exam_taker_id, exam_taker_assignment_id, self.group_id
            )
        except UpstreamError as e:
            # The transition itself succeeded upstream; fall back to a full reload.
            logger.warning("member state refresh failed, reloading group state error=%s", e.message)
            await self.load()
            return
        # The monitor keeps its previous map so the next tick can see a zero crossing.
        self.snapshots = [m.to_snapshot() for m in members]
        self.fetched_at = utc_now()

    # ----- actions -----

    async def select(self, module_id: str) -> Optional[ModuleProgressRecord]:
        """
        Click on a module card. NotStarted asks for confirmation first,
        InProgress resumes right away, anything else is ignored.
        """
        if self.loading or self.launching:
            return None
        snapshot = self.find(module_id)
        if snapshot is None:
            raise LaunchError(f"Module {module_id} is not part of this assignment")

        action = action_for(snapshot.status)
        if action is ModuleAction.CREATE_PROGRESS:
            self.pending_module_id = snapshot.id
            return None
        if action is ModuleAction.FETCH_PROGRESS:
            return await self.continue_module(snapshot.id)
        return None

    def cancel_launch(self) -> None:
        self.pending_module_id = None

    async def confirm_launch(self) -> Optional[ModuleProgressRecord]:
        """Create the progress record for the pending module. At most one launch in flight."""
        if self.pending_module_id is None or self.launching:
            return None
        snapshot = self.find(self.pending_module_id)
        if snapshot is None:
            self.pending_module_id = None
            raise LaunchError("Selected module is no longer available")

        self.launching = True
        try:
            record = await self.gateway.create_module_progress(
                self.exam_taker_id, self.assignment_id, snapshot.assessment_module_id
            )
        except UpstreamError as e:
            self.error = f"Failed to launch module: {e.message}"
            self.pending_module_id = None
            self.launching = False
            logger.warning("module launch failed module=%s error=%s", snapshot.id, e.message)
            raise LaunchError(self.error) from e

        try:
            await self._refresh_members(record.exam_taker_assignment_id)
        finally:
            self.pending_module_id = None
            self.launching = False
        self.error = None
        logger.info("module launched module=%s progress=%s", snapshot.id, record.id)
        return record

    async def continue_module(self, module_id: str) -> ModuleProgressRecord:
        """Fetch the existing progress record of an in-progress module."""
        if self.launching:
            raise LaunchError("Another module is already being launched")
        snapshot = self.find(module_id)
        if snapshot is None:
            raise LaunchError(f"Module {module_id} is not part of this assignment")

        self.launching = True
        try:
            record = await self.gateway.get_module_progress(
                self.exam_taker_id, self.assignment_id, snapshot.assessment_module_id
            )
        except UpstreamError as e:
            self.error = f"Failed to access module progress: {e.message}"
            self.pending_module_id = None
            self.launching = False
            logger.warning("module continue failed module=%s error=%s", snapshot.id, e.message)
            raise LaunchError(self.error) from e

        try:
            await self._refresh_members(record.exam_taker_assignment_id)
        finally:
            self.launching = False
        self.error = None
        return record

    # ----- timers -----

    async def tick(self) -> bool:
        """Periodic timer. Re-fetches only when a started module's remaining time crossed zero."""
        if not self.monitor.tick(self.snapshots):
            return False
        logger.info("remaining time crossed zero, refreshing assignment=%s", self.assignment_id)
        await self.load()
        return True

    async def on_visibility_regained(self) -> bool:
        if not self.snapshots or not has_running_modules(self.snapshots):
            return False
        await self.load()
        return True
