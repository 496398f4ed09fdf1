"""
Time-interval comparison.

Times are wall-clock 'HH:MM' strings (24h, no timezone). Intervals are half-open:
    [start, end)
so back-to-back classes (09:00-10:00 and 10:00-11:00) do NOT overlap.
"""

from __future__ import annotations


class InvalidTimeFormat(ValueError):
    """Raised when a time string is not a valid 24h 'HH:MM' value."""


def time_to_minutes(hhmm: str) -> int:
    """
    Convert 'HH:MM' to minutes since midnight.
    Raises InvalidTimeFormat for invalid formats or out-of-range values.
    """
    if not isinstance(hhmm, str):
        raise InvalidTimeFormat(f"Invalid time format: {hhmm!r}")
    parts = hhmm.strip().split(":")
    if len(parts) != 2 or not all(p.isascii() and p.isdigit() for p in parts):
        raise InvalidTimeFormat(f"Invalid time format: {hhmm!r}")
    if len(parts[0]) > 2 or len(parts[1]) != 2:
        raise InvalidTimeFormat(f"Invalid time format: {hhmm!r}")
    h = int(parts[0])
    m = int(parts[1])
    if not (0 <= h <= 23 and 0 <= m <= 59):
        raise InvalidTimeFormat(f"Invalid time value: {hhmm!r}")
    return h * 60 + m


def intervals_overlap(a_start: str, a_end: str, b_start: str, b_end: str) -> bool:
    """
    True if [a_start, a_end) and [b_start, b_end) share at least one minute.

    Zero-length intervals never overlap anything.
    """
    s1 = time_to_minutes(a_start)
    e1 = time_to_minutes(a_end)
    s2 = time_to_minutes(b_start)
    e2 = time_to_minutes(b_end)
    if s1 >= e1 or s2 >= e2:
        return False
    return s1 < e2 and s2 < e1
