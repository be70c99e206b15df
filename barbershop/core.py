# barbershop/core.py

"""Time-of-day helpers shared by availability and the appointment lifecycle.

Times travel as zero-padded ``HH:MM`` strings and are converted to minutes
since midnight for arithmetic.
"""

import re
from typing import Iterator

from barbershop.errors import InvalidRange, InvalidTimeFormat

MINUTES_PER_DAY = 24 * 60

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_hhmm(value: str) -> int:
    """Return minutes since midnight for an ``HH:MM`` string."""
    match = _HHMM.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise InvalidTimeFormat(f"Invalid time '{value}', expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidTimeFormat(f"Invalid time '{value}', expected HH:MM")
    return hours * 60 + minutes


def format_hhmm(minutes: int) -> str:
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_time(value: str) -> str:
    """'9:05' -> '09:05'. Stored times must compare correctly as strings."""
    return format_hhmm(parse_hhmm(value))


def compute_end_time(start_time: str, duration_minutes: int) -> str:
    """End time of a service starting at ``start_time``.

    Wraps past midnight (``23:45`` + 30 -> ``00:15``); callers that cannot
    accept an overnight booking check ``ends_after_midnight`` first.
    """
    if duration_minutes <= 0:
        raise InvalidRange("Duration must be a positive number of minutes")
    return format_hhmm(parse_hhmm(start_time) + duration_minutes)


def ends_after_midnight(start_time: str, duration_minutes: int) -> bool:
    return parse_hhmm(start_time) + duration_minutes >= MINUTES_PER_DAY


def generate_day_slots(work_start: str, work_end: str, step_minutes: int = 30) -> Iterator[str]:
    """Yield every slot start in ``[work_start, work_end)``."""
    start = parse_hhmm(work_start)
    end = parse_hhmm(work_end)
    if end <= start:
        raise InvalidRange(f"Working day end {work_end} must be after start {work_start}")
    if step_minutes <= 0:
        raise InvalidRange("Slot step must be a positive number of minutes")
    return (format_hhmm(m) for m in range(start, end, step_minutes))


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """True if [a_start, a_end) overlaps [b_start, b_end)."""
    return a_start < b_end and a_end > b_start
