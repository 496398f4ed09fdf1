"""
iCalendar (.ics) export.

We convert the assignments of one week into a calendar file that can be imported into:
- Google Calendar
- Outlook
- Apple Calendar
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from pathlib import Path
from typing import Iterable, Optional

from esched.model import ClassAssignment, DeliveryMode, Directory
from esched.times import InvalidTimeFormat, time_to_minutes
from esched.weeks import date_for, in_week


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _dt_local(week_key: int, a: ClassAssignment, hhmm: str, tz: Optional[tzinfo]) -> str:
    """
    Convert week + weekday + 'HH:MM' to ICS local datetime string 'YYYYMMDDTHHMM00'.
    """
    minutes = time_to_minutes(hhmm)
    day = date_for(week_key, a.day_of_week, tz)
    return f"{day.strftime('%Y%m%d')}T{minutes // 60:02d}{minutes % 60:02d}00"


def export_week_to_ics(
    assignments: Iterable[ClassAssignment],
    week_key: int,
    out_path: str | Path,
    directory: Optional[Directory] = None,
    tz: Optional[tzinfo] = None,
) -> int:
    """
    Export the assignments of one week to an .ics file. Returns number of exported events.
    """
    lookup = directory if directory is not None else Directory()
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//esched//EN")
    lines.append("CALSCALE:GREGORIAN")

    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")

    count = 0
    for a in sorted(in_week(assignments, week_key, tz), key=lambda x: (x.day_of_week.offset, x.start_time.zfill(5))):
        try:
            dtstart = _dt_local(week_key, a, a.start_time, tz)
            dtend = _dt_local(week_key, a, a.end_time, tz)
        except InvalidTimeFormat:
            continue

        subject = lookup.subject_code(a.subject_id) if a.subject_id else ""
        summary = f"{subject} {a.section or ''}".strip() or "Class"
        if a.delivery_mode is DeliveryMode.REMOTE:
            location = "Online"
        else:
            location = lookup.room_code(a.room_id) if a.room_id else ""
        description = f"{a.delivery_mode.label} - {lookup.instructor_name(a.instructor_id)}"
        if a.notes:
            description += f"\n{a.notes.strip()}"

        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:{_ics_escape(a.id)}@esched")
        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append(f"DTSTART:{dtstart}")
        lines.append(f"DTEND:{dtend}")
        lines.append(f"SUMMARY:{_ics_escape(summary)}")
        if location:
            lines.append(f"LOCATION:{_ics_escape(location)}")
        lines.append(f"DESCRIPTION:{_ics_escape(description)}")
        lines.append("END:VEVENT")
        count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    out.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return count
