"""
Central data model definitions used across the project.

This module defines the canonical structure of class assignments and conflict
reports so that:
- the conflict engine, storage, export and CLI share the same field names
- stored documents (camelCase, as written by the web app) are converted in one place
- day and delivery mode are closed enumerations instead of free strings
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional


class DayOfWeek(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def parse(cls, value: Any) -> "DayOfWeek":
        """
        Accept full names ("Monday") and three-letter abbreviations ("mon").
        """
        if isinstance(value, DayOfWeek):
            return value
        text = str(value or "").strip().lower()
        for day in cls:
            if text == day.value or (len(text) == 3 and day.value.startswith(text)):
                return day
        raise ValueError(f"Invalid day of week: {value!r}")

    @property
    def offset(self) -> int:
        """0 = Monday ... 6 = Sunday"""
        return list(DayOfWeek).index(self)


class DeliveryMode(str, Enum):
    IN_PERSON = "in-person"
    REMOTE = "remote"

    @classmethod
    def parse(cls, value: Any) -> "DeliveryMode":
        if isinstance(value, DeliveryMode):
            return value
        text = str(value or "").strip().lower()
        if text in _MODE_ALIASES:
            return _MODE_ALIASES[text]
        raise ValueError(f"Invalid delivery mode: {value!r}")

    @property
    def label(self) -> str:
        return "in-person class" if self is DeliveryMode.IN_PERSON else "remote class"


# the web app stores "face-to-face" / "online"
_MODE_ALIASES = {
    "in-person": DeliveryMode.IN_PERSON,
    "face-to-face": DeliveryMode.IN_PERSON,
    "remote": DeliveryMode.REMOTE,
    "online": DeliveryMode.REMOTE,
}

_STORED_MODE = {
    DeliveryMode.IN_PERSON: "face-to-face",
    DeliveryMode.REMOTE: "online",
}


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


@dataclass(frozen=True)
class ClassAssignment:
    """
    One scheduled class occurrence (subject + instructor + room/mode + day + time + week).

    Instances are treated as immutable input records by the conflict engine.
    """

    id: str
    instructor_id: str
    day_of_week: DayOfWeek
    start_time: str
    end_time: str
    week_key: int
    delivery_mode: DeliveryMode = DeliveryMode.IN_PERSON
    room_id: Optional[str] = None
    section_label: Optional[str] = None
    subject_id: Optional[str] = None
    semester: Optional[str] = None
    academic_year: Optional[str] = None
    year_level: Optional[str] = None
    notes: Optional[str] = None

    @property
    def section(self) -> Optional[str]:
        """
        Trimmed section label, or None when blank.
        """
        if self.section_label is None:
            return None
        label = self.section_label.strip()
        return label or None

    def with_changes(self, **changes: Any) -> "ClassAssignment":
        return replace(self, **changes)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "ClassAssignment":
        """
        Build an assignment from a stored schedule document.

        Raises ValueError (or KeyError for missing required fields) on bad input.
        """
        return cls(
            id=str(record["id"]),
            instructor_id=str(record["professorId"]),
            day_of_week=DayOfWeek.parse(record["dayOfWeek"]),
            start_time=str(record["startTime"]).strip(),
            end_time=str(record["endTime"]).strip(),
            week_key=int(record["weekStartDate"]),
            delivery_mode=DeliveryMode.parse(record.get("classType") or "face-to-face"),
            room_id=_opt_str(record.get("roomId")),
            section_label=_opt_str(record.get("section")),
            subject_id=_opt_str(record.get("subjectId")),
            semester=_opt_str(record.get("semester")),
            academic_year=_opt_str(record.get("academicYear")),
            year_level=_opt_str(record.get("yearLevel")),
            notes=_opt_str(record.get("notes")),
        )

    def to_record(self) -> dict[str, Any]:
        """
        Inverse of from_record(). Optional fields that are unset are omitted.
        """
        out: dict[str, Any] = {
            "id": self.id,
            "professorId": self.instructor_id,
            "dayOfWeek": self.day_of_week.value,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "weekStartDate": self.week_key,
            "classType": _STORED_MODE[self.delivery_mode],
        }
        optional = {
            "roomId": self.room_id,
            "section": self.section_label,
            "subjectId": self.subject_id,
            "semester": self.semester,
            "academicYear": self.academic_year,
            "yearLevel": self.year_level,
            "notes": self.notes,
        }
        for key, value in optional.items():
            if value is not None:
                out[key] = value
        return out


@dataclass(frozen=True)
class ConflictReport:
    """
    Result of one conflict evaluation.

    reasons keeps discovery order; has_conflict is True iff reasons is non-empty.
    """

    reasons: tuple[str, ...] = ()

    @property
    def has_conflict(self) -> bool:
        return len(self.reasons) > 0

    def summary(self, sep: str = "; ") -> str:
        return sep.join(self.reasons)


@dataclass
class Directory:
    """
    Display-name lookups for conflict messages and exports.

    Unknown ids fall back to the id itself, so an empty Directory is always usable.
    """

    instructors: dict[str, str] = field(default_factory=dict)
    rooms: dict[str, str] = field(default_factory=dict)
    subjects: dict[str, str] = field(default_factory=dict)

    def instructor_name(self, instructor_id: str) -> str:
        return self.instructors.get(instructor_id, instructor_id)

    def room_code(self, room_id: Optional[str]) -> str:
        if room_id is None:
            return "-"
        return self.rooms.get(room_id, room_id)

    def subject_code(self, subject_id: Optional[str]) -> str:
        if subject_id is None:
            return "?"
        return self.subjects.get(subject_id, subject_id)
