"""
Wall-clock helpers for plateau agendas.

Slot times are intraday: arithmetic runs on a fixed reference date and the
hour simply wraps past midnight.
"""
import re
from datetime import datetime, time, timedelta
from typing import Optional

DEFAULT_START = time(10, 0)

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_REFERENCE_DATE = datetime(2000, 1, 1)


def parse_hhmm(value: Optional[str]) -> Optional[time]:
    """
    Parse "H:MM" / "HH:MM" into a time.

    Hours are clamped to [0, 23] and minutes to [0, 59]; anything that does
    not look like a clock string returns None (callers fall back to
    DEFAULT_START).
    """
    m = _HHMM_RE.match(str(value or ""))
    if not m:
        return None
    hh = min(23, max(0, int(m.group(1))))
    mm = min(59, max(0, int(m.group(2))))
    return time(hh, mm)


def add_minutes(base: time, minutes: int) -> time:
    """Shift a clock time by minutes, wrapping modulo 24 hours."""
    moved = datetime.combine(_REFERENCE_DATE.date(), base) + timedelta(minutes=minutes)
    return time(moved.hour, moved.minute)


def fmt_time(t: time) -> str:
    return f"{t.hour:02d}:{t.minute:02d}"


def slot_time(start: time, time_index: int, slot_minutes: int) -> str:
    """Formatted start time of the slot at time_index."""
    return fmt_time(add_minutes(start, time_index * slot_minutes))
