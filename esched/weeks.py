"""
Week keys.

Assignments are scoped to one week instance by a week key: the timestamp
(epoch milliseconds) of Monday 00:00 of that week, in the zone of whoever
created the record (the web app uses the browser's local time).

Every function takes an optional tz. None means the system's local zone,
which is what the web app does; tests and the CLI's --tz pass an explicit zone.

Stored keys made in another zone are not exactly our Monday midnight, so
records are always matched to a week through week_of() / normalize_week_key().
"""

from __future__ import annotations

import os
import re
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from esched.model import ClassAssignment, DayOfWeek

WEEK_MS = 7 * 24 * 60 * 60 * 1000

TZ_ENV = "ESCHED_TZ"

# Monday 00:00 in one zone (UTC-12 .. UTC+14) is at most 26h away from Monday 00:00
# in another; keys are snapped to the nearest Monday, not floored.
_SNAP = timedelta(days=3, hours=12)

_OFFSET_RE = re.compile(r"^(?:UTC)?([+-])(\d{1,2})(?::?(\d{2}))?$", re.IGNORECASE)


def resolve_tz(name: Optional[str] = None) -> Optional[tzinfo]:
    """
    Resolve a zone name ('Asia/Manila'), a fixed offset ('+08:00', 'UTC-5') or 'UTC'.

    Without a name the ESCHED_TZ environment variable is used; if that is unset too,
    None is returned (system local zone). Raises ValueError for unknown zones.
    """
    text = (name if name is not None else os.environ.get(TZ_ENV, "")).strip()
    if not text or text.lower() == "local":
        return None
    if text.upper() in ("UTC", "Z"):
        return timezone.utc
    m = _OFFSET_RE.match(text)
    if m:
        sign, hours, minutes = m.groups()
        delta = timedelta(hours=int(hours), minutes=int(minutes or 0))
        return timezone(-delta if sign == "-" else delta)
    try:
        return ZoneInfo(text)
    except (KeyError, ValueError) as e:
        # ZoneInfoNotFoundError is a KeyError
        raise ValueError(f"Unknown time zone: {text!r}") from e


def _midnight_ms(day: date, tz: Optional[tzinfo]) -> int:
    if tz is None:
        # naive -> interpreted as system local time
        dt = datetime(day.year, day.month, day.day).astimezone()
    else:
        dt = datetime(day.year, day.month, day.day, tzinfo=tz)
    return int(dt.timestamp()) * 1000


def week_key_for(day: date, tz: Optional[tzinfo] = None) -> int:
    """
    Return the week key of the week (Monday-based) containing the given date.
    """
    monday = day - timedelta(days=day.weekday())
    return _midnight_ms(monday, tz)


def week_of(week_key: int, tz: Optional[tzinfo] = None) -> date:
    """
    The Monday of the week a stored key belongs to, viewed in tz.
    """
    seconds = week_key / 1000
    if tz is None:
        local = datetime.fromtimestamp(seconds)
    else:
        local = datetime.fromtimestamp(seconds, tz=tz)
    day = (local + _SNAP).date()
    return day - timedelta(days=day.weekday())


def normalize_week_key(week_key: int, tz: Optional[tzinfo] = None) -> int:
    return week_key_for(week_of(week_key, tz), tz)


def current_week_key(today: Optional[date] = None, tz: Optional[tzinfo] = None) -> int:
    if today is None:
        today = datetime.now(tz).date() if tz is not None else date.today()
    return week_key_for(today, tz)


def shift_week(week_key: int, weeks: int, tz: Optional[tzinfo] = None) -> int:
    # by calendar days, so DST changes inside the week do not skew the key
    return week_key_for(week_of(week_key, tz) + timedelta(weeks=weeks), tz)


def week_start(week_key: int, tz: Optional[tzinfo] = None) -> date:
    return week_of(week_key, tz)


def date_for(week_key: int, day: DayOfWeek, tz: Optional[tzinfo] = None) -> date:
    """
    Calendar date of a weekday inside the given week.
    """
    return week_of(week_key, tz) + timedelta(days=day.offset)


def parse_week(text: str, today: Optional[date] = None, tz: Optional[tzinfo] = None) -> int:
    """
    Parse a week given on the command line: 'current', 'next', 'prev' or an ISO date (YYYY-MM-DD).
    Raises ValueError for anything else.
    """
    value = (text or "").strip().lower()
    if value in ("", "current"):
        return current_week_key(today, tz)
    if value == "next":
        return shift_week(current_week_key(today, tz), 1, tz)
    if value in ("prev", "previous"):
        return shift_week(current_week_key(today, tz), -1, tz)
    return week_key_for(datetime.strptime(value, "%Y-%m-%d").date(), tz)


def in_week(
    assignments: Iterable[ClassAssignment], week_key: int, tz: Optional[tzinfo] = None
) -> list[ClassAssignment]:
    """
    Assignments whose stored key belongs to the same week as week_key.
    """
    monday = week_of(week_key, tz)
    return [a for a in assignments if week_of(a.week_key, tz) == monday]


def normalized(assignments: Iterable[ClassAssignment], tz: Optional[tzinfo] = None) -> list[ClassAssignment]:
    """
    Copies whose week keys are snapped to Monday 00:00 in tz.

    evaluate() compares week keys exactly; feed it these instead of raw stored records.
    """
    out: list[ClassAssignment] = []
    for a in assignments:
        key = normalize_week_key(a.week_key, tz)
        out.append(a if key == a.week_key else a.with_changes(week_key=key))
    return out
