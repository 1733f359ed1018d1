"""
Pytest configuration and shared fixtures for the test suite.
Ensures the project root is importable and provides snapshot builders.
"""
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from progress_engine import ModuleProgressSnapshot, ModuleStatus  # noqa: E402

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_snapshot():
    """Build a ModuleProgressSnapshot with sensible defaults."""

    def _make(
        id: str = "m1",
        order_number: int = 1,
        status: ModuleStatus = ModuleStatus.NOT_STARTED,
        **kwargs,
    ) -> ModuleProgressSnapshot:
        kwargs.setdefault("assessment_module_id", f"am-{id}")
        kwargs.setdefault("title", f"Module {order_number}")
        return ModuleProgressSnapshot(id=id, order_number=order_number, status=status, **kwargs)

    return _make


@pytest.fixture
def started_at() -> datetime:
    return NOW - timedelta(minutes=30)
