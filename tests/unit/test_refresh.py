"""Unit tests for the zero-crossing refresh trigger."""
import pytest

from progress_engine import CountdownMonitor, ModuleStatus, crossed_zero, has_running_modules, remaining_minutes_map


def _running(make_snapshot, started_at, remaining, id="m1", order_number=1):
    return make_snapshot(
        id,
        order_number,
        ModuleStatus.IN_PROGRESS,
        duration_in_minutes=30,
        started_at_utc=started_at,
        time_remaining=remaining,
    )


@pytest.mark.unit
class TestCrossedZero:
    def test_positive_to_zero_triggers(self, make_snapshot, started_at):
        snaps = [_running(make_snapshot, started_at, "00:00:00")]
        assert crossed_zero({"m1": 1}, {"m1": 0}, snaps)

    def test_still_positive_does_not_trigger(self, make_snapshot, started_at):
        snaps = [_running(make_snapshot, started_at, "00:02:00")]
        assert not crossed_zero({"m1": 3}, {"m1": 2}, snaps)

    def test_already_zero_does_not_trigger_again(self, make_snapshot, started_at):
        snaps = [_running(make_snapshot, started_at, "00:00:00")]
        assert not crossed_zero({"m1": 0}, {"m1": 0}, snaps)

    def test_not_started_modules_are_ignored(self, make_snapshot):
        snaps = [make_snapshot("m1", 1, ModuleStatus.NOT_STARTED, duration_in_minutes=30)]
        assert not crossed_zero({"m1": 30}, {"m1": 0}, snaps)

    def test_missing_keys_read_as_zero(self, make_snapshot, started_at):
        snaps = [_running(make_snapshot, started_at, "00:00:00")]
        assert not crossed_zero({}, {}, snaps)


@pytest.mark.unit
class TestRemainingMinutesMap:
    def test_map(self, make_snapshot, started_at):
        snaps = [
            _running(make_snapshot, started_at, "00:04:10", "a", 1),
            make_snapshot("b", 2, ModuleStatus.LOCKED, duration_in_minutes=20),
            make_snapshot("c", 3, ModuleStatus.LOCKED),
        ]
        assert remaining_minutes_map(snaps) == {"a": 5, "b": 20, "c": 0}

    def test_has_running_modules(self, make_snapshot, started_at):
        assert has_running_modules([_running(make_snapshot, started_at, "00:10:00")])
        assert not has_running_modules([_running(make_snapshot, started_at, "00:00:00")])
        assert not has_running_modules([make_snapshot(duration_in_minutes=30)])


@pytest.mark.unit
class TestCountdownMonitor:
    def test_tick_fires_once_on_crossing(self, make_snapshot, started_at):
        monitor = CountdownMonitor()
        monitor.reset([_running(make_snapshot, started_at, "00:01:00")])
        assert monitor.previous == {"m1": 1}

        expired = [_running(make_snapshot, started_at, "00:00:00")]
        assert monitor.tick(expired) is True
        assert monitor.tick(expired) is False

    def test_tick_without_reset_never_fires(self, make_snapshot, started_at):
        monitor = CountdownMonitor()
        assert monitor.tick([_running(make_snapshot, started_at, "00:00:00")]) is False

    def test_previous_is_a_copy(self, make_snapshot, started_at):
        monitor = CountdownMonitor()
        monitor.reset([_running(make_snapshot, started_at, "00:05:00")])
        monitor.previous["m1"] = 0
        assert monitor.previous == {"m1": 5}
