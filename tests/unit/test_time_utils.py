"""Unit tests for the shared time helpers."""
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from progress_engine.time_utils import (
    ceil_minutes,
    format_completed,
    format_minutes,
    format_time_spent,
    parse_time_remaining,
    parse_utc,
)


@pytest.mark.unit
class TestParseTimeRemaining:
    def test_hours_minutes_seconds(self):
        assert parse_time_remaining("01:02:03") == 3723

    def test_minutes_and_seconds(self):
        assert parse_time_remaining("00:05:30") == 330

    def test_none_and_empty_are_zero(self):
        assert parse_time_remaining(None) == 0
        assert parse_time_remaining("") == 0

    def test_garbage_is_zero(self):
        assert parse_time_remaining("abc") == 0

    def test_bad_segment_counts_as_zero(self):
        assert parse_time_remaining("00:xx:30") == 30

    def test_partial_string(self):
        # Only the hours segment present
        assert parse_time_remaining("02") == 7200

    def test_fractional_seconds_ignored(self):
        assert parse_time_remaining("00:05:30.1234567") == 330

    def test_days_prefix(self):
        assert parse_time_remaining("1.02:00:00") == 86400 + 7200

    def test_negative_duration(self):
        assert parse_time_remaining("-00:01:00") == -60


@pytest.mark.unit
class TestCeilMinutes:
    @pytest.mark.parametrize(
        "seconds,expected",
        [(0, 0), (1, 1), (59, 1), (60, 1), (61, 2), (330, 6), (-60, -1)],
    )
    def test_ceil(self, seconds, expected):
        assert ceil_minutes(seconds) == expected


@pytest.mark.unit
class TestFormatMinutes:
    def test_under_an_hour(self):
        assert format_minutes(45, "remaining") == "45m remaining"

    def test_exact_hour(self):
        assert format_minutes(60, "remaining") == "1h 0m remaining"

    def test_hours_and_minutes(self):
        assert format_minutes(90, "duration") == "1h 30m duration"


@pytest.mark.unit
class TestParseUtc:
    def test_naive_string_is_utc(self):
        dt = parse_utc("2025-01-15T12:30:00")
        assert dt == datetime(2025, 1, 15, 12, 30, tzinfo=timezone.utc)

    def test_z_suffix(self):
        assert parse_utc("2025-01-15T12:30:00Z") == datetime(2025, 1, 15, 12, 30, tzinfo=timezone.utc)

    def test_offset_converted_to_utc(self):
        dt = parse_utc("2025-01-15T04:30:00-08:00")
        assert dt == datetime(2025, 1, 15, 12, 30, tzinfo=timezone.utc)
        assert dt.utcoffset().total_seconds() == 0

    def test_seven_fraction_digits(self):
        dt = parse_utc("2025-01-15T12:30:00.1234567")
        assert dt.microsecond == 123456
        assert dt.tzinfo is not None

    def test_naive_datetime(self):
        dt = parse_utc(datetime(2025, 1, 15, 12, 30))
        assert dt.tzinfo is not None
        assert dt.hour == 12

    def test_none_and_blank(self):
        assert parse_utc(None) is None
        assert parse_utc("  ") is None

    def test_invalid_raises(self):
        with pytest.raises(ValueError):
            parse_utc("not a date")


@pytest.mark.unit
class TestFormatCompleted:
    def test_utc_default(self):
        dt = datetime(2025, 1, 15, 14, 5, tzinfo=timezone.utc)
        assert format_completed(dt) == "Completed 1/15/2025 at 02:05 PM"

    def test_viewer_timezone(self):
        dt = datetime(2025, 1, 15, 14, 5, tzinfo=timezone.utc)
        assert format_completed(dt, ZoneInfo("America/New_York")) == "Completed 1/15/2025 at 09:05 AM"

    def test_date_can_shift(self):
        dt = datetime(2025, 1, 15, 2, 0, tzinfo=timezone.utc)
        assert format_completed(dt, ZoneInfo("America/Los_Angeles")).startswith("Completed 1/14/2025")


@pytest.mark.unit
class TestFormatTimeSpent:
    def test_unknown(self):
        assert format_time_spent(None) == "N/A"

    def test_unknown_but_completed(self):
        assert format_time_spent(None, completed=True) == "less than minute"

    def test_under_a_minute(self):
        assert format_time_spent(0.4) == "less than minute"

    def test_rounds_half_up(self):
        assert format_time_spent(12.5) == "13 min"
        assert format_time_spent(12.4) == "12 min"
