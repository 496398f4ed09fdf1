"""
Conflict detection.

Given a proposed class assignment and the existing assignments of the schedule,
report every conflict dimension (instructor, room, section) it collides on.

Only existing assignments of the same week and day are considered, and only if
their time intervals overlap:
    start < other_end AND other_start < end
Touching endpoints (end == start) is NOT a conflict.
"""

from __future__ import annotations

from datetime import tzinfo
from typing import Iterable, Optional

from esched.model import ClassAssignment, ConflictReport, Directory
from esched.rules import check_pair
from esched.times import intervals_overlap
from esched.weeks import in_week, normalized


def _same_slot_candidates(
    proposed: ClassAssignment, candidates: Iterable[ClassAssignment], exclude_id: Optional[str]
) -> list[ClassAssignment]:
    """
    Keep candidates of the proposal's week and day, minus the excluded (edited) one.
    """
    return [
        c
        for c in candidates
        if (exclude_id is None or c.id != exclude_id)
        and c.week_key == proposed.week_key
        and c.day_of_week == proposed.day_of_week
    ]


def evaluate(
    proposed: ClassAssignment,
    candidates: Iterable[ClassAssignment],
    exclude_id: Optional[str] = None,
    directory: Optional[Directory] = None,
) -> ConflictReport:
    """
    Evaluate one proposed assignment against existing ones.

    A found conflict is a normal result (has_conflict=True), not an exception.
    Raises InvalidTimeFormat if any relevant time string is malformed.
    """
    lookup = directory if directory is not None else Directory()

    reasons: list[str] = []
    seen_keys: set[str] = set()

    for existing in _same_slot_candidates(proposed, candidates, exclude_id):
        if not intervals_overlap(proposed.start_time, proposed.end_time, existing.start_time, existing.end_time):
            continue
        for reason in check_pair(proposed, existing, lookup):
            # first match per dimension wins
            if reason.key in seen_keys:
                continue
            seen_keys.add(reason.key)
            reasons.append(reason.message)

    return ConflictReport(reasons=tuple(reasons))


def find_week_conflicts(
    assignments: Iterable[ClassAssignment],
    week_key: int,
    directory: Optional[Directory] = None,
    tz: Optional[tzinfo] = None,
) -> list[tuple[ClassAssignment, ConflictReport]]:
    """
    Audit a stored week: evaluate every assignment of that week against all others.

    Records are matched to the week with the same rule as listing and export
    (esched.weeks.in_week), then compared on their normalized week keys.

    Returns (assignment, report) pairs for the conflicted assignments only,
    ordered by day, start time and id. A clash between A and B shows up on both.
    The returned assignments are the records as stored.
    """
    week = in_week(assignments, week_key, tz)
    week.sort(key=lambda a: (a.day_of_week.offset, a.start_time.zfill(5), a.id))
    snapped = normalized(week, tz)

    out: list[tuple[ClassAssignment, ConflictReport]] = []
    for stored, a in zip(week, snapped):
        report = evaluate(a, snapped, exclude_id=a.id, directory=directory)
        if report.has_conflict:
            out.append((stored, report))
    return out
