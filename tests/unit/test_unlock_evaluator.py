"""Unit tests for the status -> display contract and group evaluation."""
import pytest

from progress_engine import (
    DuplicateOrderNumberError,
    GroupSchedulingPolicy,
    ModuleAction,
    ModuleDisplay,
    ModuleStatus,
    Urgency,
    action_for,
    describe_status,
    evaluate_group,
)
from progress_engine.unlock_evaluator import LOCKED_MESSAGES, enabled_module_ids


@pytest.mark.unit
class TestDescribeStatus:
    def test_mapping_is_total(self):
        for status in ModuleStatus:
            display = describe_status(status, GroupSchedulingPolicy())
            assert isinstance(display, ModuleDisplay)
            assert isinstance(display.is_enabled, bool)
            assert isinstance(display.show_button, bool)

    def test_only_not_started_and_in_progress_are_actionable(self):
        enabled = {s for s in ModuleStatus if describe_status(s).is_enabled}
        shown = {s for s in ModuleStatus if describe_status(s).show_button}
        assert enabled == {ModuleStatus.NOT_STARTED, ModuleStatus.IN_PROGRESS}
        assert shown == enabled

    def test_buttons(self):
        assert describe_status(ModuleStatus.NOT_STARTED).button_text == "Launch Module"
        assert describe_status(ModuleStatus.IN_PROGRESS).button_text == "Continue Module"
        assert describe_status(ModuleStatus.NOT_STARTED).badge is None

    def test_messages(self):
        assert "full duration to elapse" in describe_status(ModuleStatus.WAIT_FOR_MODULE_DURATION_TO_ELAPSE).message
        assert "scheduled for later" in describe_status(ModuleStatus.SCHEDULED).message
        assert "time allocated" in describe_status(ModuleStatus.TIME_ELAPSED).message
        assert describe_status(ModuleStatus.NOT_STARTED).message is None
        assert describe_status(ModuleStatus.IN_PROGRESS).message is None
        assert describe_status(ModuleStatus.COMPLETED).message is None

    @pytest.mark.parametrize(
        "order_locked,wait,fragment",
        [
            (True, True, "in order and wait for completion"),
            (True, False, "Complete previous modules to unlock"),
            (False, True, "Wait for the current module"),
            (False, False, "currently locked"),
        ],
    )
    def test_locked_message_by_policy(self, order_locked, wait, fragment):
        policy = GroupSchedulingPolicy(is_member_order_locked=order_locked, wait_module_completion=wait)
        display = describe_status(ModuleStatus.LOCKED, policy)
        assert fragment in display.message
        assert display.badge == "Locked"
        assert not display.is_enabled

    def test_locked_messages_are_distinct(self):
        assert len(set(LOCKED_MESSAGES.values())) == 4

    def test_locked_without_policy(self):
        assert describe_status(ModuleStatus.LOCKED).message == "This module is currently locked."


@pytest.mark.unit
class TestActionFor:
    def test_actions(self):
        assert action_for(ModuleStatus.NOT_STARTED) is ModuleAction.CREATE_PROGRESS
        assert action_for(ModuleStatus.IN_PROGRESS) is ModuleAction.FETCH_PROGRESS
        others = set(ModuleStatus) - {ModuleStatus.NOT_STARTED, ModuleStatus.IN_PROGRESS}
        assert all(action_for(s) is ModuleAction.NONE for s in others)


@pytest.mark.unit
class TestEvaluateGroup:
    def test_only_first_module_enabled_when_order_locked(self, make_snapshot):
        snapshots = [
            make_snapshot("m1", 1, ModuleStatus.NOT_STARTED),
            make_snapshot("m2", 2, ModuleStatus.LOCKED),
            make_snapshot("m3", 3, ModuleStatus.LOCKED),
        ]
        policy = GroupSchedulingPolicy(is_member_order_locked=True)
        evaluations = evaluate_group(snapshots, policy)
        assert enabled_module_ids(evaluations) == ["m1"]
        assert evaluations[1].display.message == "Complete previous modules to unlock this one."

    def test_input_order_preserved(self, make_snapshot):
        snapshots = [
            make_snapshot("c", 3),
            make_snapshot("a", 1),
            make_snapshot("b", 2),
        ]
        evaluations = evaluate_group(snapshots, GroupSchedulingPolicy())
        assert [e.snapshot.id for e in evaluations] == ["c", "a", "b"]

    def test_duplicate_order_numbers_rejected(self, make_snapshot):
        snapshots = [make_snapshot("a", 1), make_snapshot("b", 1)]
        with pytest.raises(DuplicateOrderNumberError):
            evaluate_group(snapshots, GroupSchedulingPolicy())

    def test_time_info_and_urgency_attached(self, make_snapshot, started_at):
        snapshots = [
            make_snapshot(
                "m1",
                1,
                ModuleStatus.IN_PROGRESS,
                duration_in_minutes=60,
                started_at_utc=started_at,
                time_remaining="00:08:00",
            ),
            make_snapshot("m2", 2, ModuleStatus.LOCKED, duration_in_minutes=20),
            make_snapshot("m3", 3, ModuleStatus.LOCKED),
        ]
        evaluations = evaluate_group(snapshots, GroupSchedulingPolicy(wait_module_completion=True))
        assert evaluations[0].urgency is Urgency.URGENT
        assert evaluations[0].action is ModuleAction.FETCH_PROGRESS
        assert evaluations[1].urgency is Urgency.WARNING
        assert evaluations[1].time_info.duration_display == "20m duration"
        assert evaluations[2].time_info is None
        assert evaluations[2].urgency is None

    def test_reevaluation_is_stable(self, make_snapshot):
        snapshots = [make_snapshot("m1", 1, ModuleStatus.IN_PROGRESS), make_snapshot("m2", 2)]
        policy = GroupSchedulingPolicy(is_member_order_locked=True, wait_module_completion=True)
        assert evaluate_group(snapshots, policy) == evaluate_group(snapshots, policy)
