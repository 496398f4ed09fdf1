"""
Conflict rules.

Each rule looks at one (proposed, existing) pair that is already known to share
week, day and an overlapping time interval, and decides whether one conflict
dimension applies:

- instructor: same instructor, any delivery mode
- room:       same room, both in-person
- section:    same non-blank section, same delivery mode

A triggered rule yields a ConflictReason. The key is used by the aggregator to
report each dimension at most once per evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from esched.model import ClassAssignment, DeliveryMode, Directory


@dataclass(frozen=True)
class ConflictReason:
    key: str
    message: str


def _slot_text(existing: ClassAssignment) -> str:
    day = existing.day_of_week.value.capitalize()
    return f"on {day} from {existing.start_time} to {existing.end_time}"


def instructor_clash(
    proposed: ClassAssignment, existing: ClassAssignment, directory: Directory
) -> Optional[ConflictReason]:
    if proposed.instructor_id != existing.instructor_id:
        return None
    name = directory.instructor_name(proposed.instructor_id)
    return ConflictReason(
        key=f"instructor-{proposed.instructor_id}",
        message=f"Instructor {name} is already teaching a {existing.delivery_mode.label} {_slot_text(existing)}",
    )


def room_clash(
    proposed: ClassAssignment, existing: ClassAssignment, directory: Directory
) -> Optional[ConflictReason]:
    # remote classes do not occupy a room
    if proposed.delivery_mode is not DeliveryMode.IN_PERSON:
        return None
    if existing.delivery_mode is not DeliveryMode.IN_PERSON:
        return None
    if not proposed.room_id or proposed.room_id != existing.room_id:
        return None
    code = directory.room_code(proposed.room_id)
    return ConflictReason(
        key=f"room-{proposed.room_id}",
        message=f"Room {code} is already booked {_slot_text(existing)}",
    )


def section_clash(
    proposed: ClassAssignment, existing: ClassAssignment, directory: Directory
) -> Optional[ConflictReason]:
    if proposed.delivery_mode is not existing.delivery_mode:
        return None
    section = proposed.section
    if section is None or section != existing.section:
        return None
    subject = directory.subject_code(existing.subject_id)
    return ConflictReason(
        key=f"section-{section}-{proposed.delivery_mode.value}",
        message=f"Section {section} already has a {proposed.delivery_mode.label} ({subject}) {_slot_text(existing)}",
    )


RULES = (instructor_clash, room_clash, section_clash)


def check_pair(
    proposed: ClassAssignment, existing: ClassAssignment, directory: Optional[Directory] = None
) -> list[ConflictReason]:
    """
    Apply all rules to one overlapping pair, in the order instructor, room, section.
    """
    lookup = directory if directory is not None else Directory()
    out: list[ConflictReason] = []
    for rule in RULES:
        reason = rule(proposed, existing, lookup)
        if reason is not None:
            out.append(reason)
    return out
