"""
Immutable inputs to the status engine. Built once per fetch from upstream data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from progress_engine.module_status import ModuleStatus


class DuplicateOrderNumberError(ValueError):
    """Two modules in one group share an order number."""


@dataclass(frozen=True)
class ModuleProgressSnapshot:
    id: str
    order_number: int
    assessment_module_id: str
    title: str
    status: ModuleStatus
    description: str = ""
    started_at_utc: Optional[datetime] = None
    completed_at_utc: Optional[datetime] = None
    duration_in_minutes: Optional[int] = None
    # Raw server "HH:MM:SS"; parsed leniently by the time classifier.
    time_remaining: Optional[str] = None
    passed: Optional[bool] = None
    score_percentage: Optional[float] = None
    passing_score_percentage: Optional[float] = None
    static_file_urls: tuple[str, ...] = ()

    @property
    def is_running(self) -> bool:
        return self.started_at_utc is not None and self.completed_at_utc is None


@dataclass(frozen=True)
class GroupSchedulingPolicy:
    is_member_order_locked: bool = False
    wait_module_completion: bool = False


@dataclass(frozen=True)
class AssignmentWindow:
    start_date_utc: Optional[datetime] = None
    end_date_utc: Optional[datetime] = None


@dataclass(frozen=True)
class ModuleReport:
    """Per-module row of the exam-taker assignment report."""
    module_id: str
    title: str
    status: ModuleStatus
    score: Optional[float] = None
    passed: Optional[bool] = None
    started_at_utc: Optional[datetime] = None
    completed_at_utc: Optional[datetime] = None
    time_spent_minutes: float = 0.0
    passing_score: Optional[float] = None


@dataclass(frozen=True)
class AssignmentProgress:
    """One exam-taker's progress through one assignment."""
    window: AssignmentWindow
    modules: tuple[ModuleReport, ...] = field(default_factory=tuple)
    assignment_id: str = ""
    title: str = ""
    started_at_utc: Optional[datetime] = None
    completed_at_utc: Optional[datetime] = None
    time_spent_minutes: Optional[float] = None


def check_order_numbers(snapshots: Iterable[ModuleProgressSnapshot]) -> None:
    """Raise DuplicateOrderNumberError if order numbers repeat. Never reorders."""
    seen: dict[int, str] = {}
    for s in snapshots:
        if s.order_number in seen:
            raise DuplicateOrderNumberError(
                f"Modules {seen[s.order_number]!r} and {s.id!r} share order number {s.order_number}"
            )
        seen[s.order_number] = s.id
