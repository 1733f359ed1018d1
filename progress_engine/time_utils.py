"""
Time and duration helpers shared by the classifiers.

All backend timestamps are UTC. Strings without a zone suffix are still UTC.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone, tzinfo
from typing import Optional, Union

_LEADING_INT = re.compile(r"\s*(\d+)")
# .NET emits up to 7 fractional digits; fromisoformat accepts at most 6.
_FRACTION = re.compile(r"(\.\d{6})\d+")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _segment(value: str) -> int:
    m = _LEADING_INT.match(value)
    return int(m.group(1)) if m else 0


def parse_time_remaining(value: Optional[str]) -> int:
    """
    Parse a server "HH:MM:SS" duration into total seconds.

    Missing or unparseable segments count as zero, so a partial or garbage
    string degrades to 0 instead of raising. A leading "-" makes the total
    negative, and a "D.HH" hours segment is read as days plus hours.
    """
    if not value or not isinstance(value, str):
        return 0
    text = value.strip()
    sign = -1 if text.startswith("-") else 1
    text = text.lstrip("-")
    parts = text.split(":")
    head = parts[0] if parts else ""
    days = 0
    if "." in head:
        day_part, head = head.split(".", 1)
        days = _segment(day_part)
    hours = _segment(head)
    minutes = _segment(parts[1]) if len(parts) > 1 else 0
    seconds = _segment(parts[2]) if len(parts) > 2 else 0
    return sign * (days * 86400 + hours * 3600 + minutes * 60 + seconds)


def ceil_minutes(total_seconds: int) -> int:
    return math.ceil(total_seconds / 60)


def format_minutes(minutes: int, suffix: str) -> str:
    """Render minutes as "45m <suffix>" or "1h 30m <suffix>"."""
    if minutes < 60:
        return f"{minutes}m {suffix}"
    hours, rest = divmod(minutes, 60)
    return f"{hours}h {rest}m {suffix}"


def parse_utc(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse a backend timestamp into an aware UTC datetime. Naive input is taken as UTC."""
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = value.strip()
        if not text:
            return None
        if text[-1] in "zZ":
            text = text[:-1] + "+00:00"
        text = _FRACTION.sub(r"\1", text)
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_completed(completed_at: datetime, tz: Optional[tzinfo] = None) -> str:
    """Format a completion instant in the viewer's zone, e.g. "Completed 1/15/2025 at 02:30 PM"."""
    local = parse_utc(completed_at).astimezone(tz or timezone.utc)
    date_part = f"{local.month}/{local.day}/{local.year}"
    return f"Completed {date_part} at {local.strftime('%I:%M %p')}"


def format_time_spent(minutes: Optional[float], completed: bool = False) -> str:
    """Reporting label for time spent on an assignment or module."""
    if minutes is None:
        return "less than minute" if completed else "N/A"
    if minutes < 1:
        return "less than minute"
    return f"{math.floor(minutes + 0.5)} min"
