"""
CLI (Command Line Interface).

This module provides terminal commands for schedule administrators, e.g.:

    esched check --instructor P1 --room R101 --day monday --start 09:00 --end 10:30
    esched add ...            (saved only if conflict-free)
    esched update <id> ...    (re-checked without conflicting with itself)
    esched remove <id>
    esched list --week 2026-02-16
    esched conflicts --week current
    esched export <file.ics>
    esched pull --project <firebase-project>

Note:
- The schedule snapshot lives in data/schedules.json (see esched.storage)
- Conflict detection itself lives in esched.conflicts and never prints anything
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

import requests
from rich import box
from rich.console import Console
from rich.table import Table

from esched.conflicts import evaluate, find_week_conflicts
from esched.export_ics import export_week_to_ics
from esched.firestore import pull_snapshot
from esched.model import ClassAssignment, ConflictReport, DayOfWeek, DeliveryMode, Directory
from esched.storage import (
    directory_path,
    load_assignments,
    load_directory,
    new_assignment_id,
    save_assignments,
    save_directory,
    schedules_path,
)
from esched.times import InvalidTimeFormat, time_to_minutes
from esched.weeks import date_for, in_week, normalized, parse_week, resolve_tz, week_start

console = Console()


def _validate(a: ClassAssignment) -> None:
    """
    Input checks the web form performs before a proposal reaches the conflict engine.
    Raises ValueError with a user-facing message.
    """
    start = time_to_minutes(a.start_time)
    end = time_to_minutes(a.end_time)
    if end <= start:
        raise ValueError(f"End time {a.end_time} must be after start time {a.start_time}")
    if a.delivery_mode is DeliveryMode.IN_PERSON and not a.room_id:
        raise ValueError("Room is required for in-person classes")
    if a.delivery_mode is DeliveryMode.REMOTE and a.room_id:
        # remote classes do not occupy a room
        raise ValueError("Remote classes cannot have a room")


def _proposal_from_args(args: argparse.Namespace, assignment_id: str) -> ClassAssignment:
    if not args.instructor or not args.day or not args.start or not args.end:
        raise ValueError("--instructor, --day, --start and --end are required")
    return ClassAssignment(
        id=assignment_id,
        instructor_id=args.instructor.strip(),
        day_of_week=DayOfWeek.parse(args.day),
        start_time=args.start.strip(),
        end_time=args.end.strip(),
        week_key=parse_week(args.week or "current", tz=args.tzinfo),
        delivery_mode=DeliveryMode.parse(args.mode or "in-person"),
        room_id=(args.room or "").strip() or None,
        section_label=(args.section or "").strip() or None,
        subject_id=(args.subject or "").strip() or None,
        notes=(args.notes or "").strip() or None,
    )


def _apply_changes(existing: ClassAssignment, args: argparse.Namespace) -> ClassAssignment:
    """
    Apply only the flags given on the command line to an existing assignment.
    """
    changes: dict[str, object] = {}
    if args.instructor:
        changes["instructor_id"] = args.instructor.strip()
    if args.day:
        changes["day_of_week"] = DayOfWeek.parse(args.day)
    if args.start:
        changes["start_time"] = args.start.strip()
    if args.end:
        changes["end_time"] = args.end.strip()
    if args.week:
        changes["week_key"] = parse_week(args.week, tz=args.tzinfo)
    if args.mode:
        changes["delivery_mode"] = DeliveryMode.parse(args.mode)
        if changes["delivery_mode"] is DeliveryMode.REMOTE and args.room is None:
            changes["room_id"] = None
    if args.room is not None:
        changes["room_id"] = args.room.strip() or None
    if args.section is not None:
        changes["section_label"] = args.section.strip() or None
    if args.subject is not None:
        changes["subject_id"] = args.subject.strip() or None
    if args.notes is not None:
        changes["notes"] = args.notes.strip() or None
    return existing.with_changes(**changes)


def _print_report(report: ConflictReport) -> None:
    if not report.has_conflict:
        print("No conflicts found.")
        return
    print(f"Scheduling conflicts detected: {len(report.reasons)}")
    for reason in report.reasons:
        print(f"- {reason}")


def _cmd_check(args: argparse.Namespace, assignments: list[ClassAssignment], directory: Directory) -> int:
    """
    Evaluate a proposal without saving it. Exit code 1 if it conflicts.
    """
    try:
        proposal = _proposal_from_args(args, args.exclude or "<proposed>")
        _validate(proposal)
    except ValueError as e:
        print(f"Invalid input: {e}")
        return 2

    report = evaluate(proposal, normalized(assignments, args.tzinfo), exclude_id=args.exclude, directory=directory)
    _print_report(report)
    return 1 if report.has_conflict else 0


def _cmd_add(args: argparse.Namespace, assignments: list[ClassAssignment], directory: Directory) -> int:
    """
    Add a new assignment to schedules.json, but only if it is conflict-free.
    """
    try:
        proposal = _proposal_from_args(args, new_assignment_id())
        _validate(proposal)
    except ValueError as e:
        print(f"Invalid input: {e}")
        return 2

    report = evaluate(proposal, normalized(assignments, args.tzinfo), directory=directory)
    if report.has_conflict:
        _print_report(report)
        print("Not saved.")
        return 1

    assignments.append(proposal)
    save_assignments(assignments, schedules_path(args.data_dir))
    print(f"Added: {proposal.id} (schedules: {len(assignments)})")
    return 0


def _find(assignments: list[ClassAssignment], assignment_id: str) -> Optional[ClassAssignment]:
    for a in assignments:
        if a.id == assignment_id:
            return a
    return None


def _cmd_update(args: argparse.Namespace, assignments: list[ClassAssignment], directory: Directory) -> int:
    """
    Edit an existing assignment; it is checked against everything except itself.
    """
    aid = (args.id or "").strip()
    existing = _find(assignments, aid)
    if existing is None:
        print(f"Unknown schedule id: {aid}")
        return 1

    try:
        updated = _apply_changes(existing, args)
        _validate(updated)
    except ValueError as e:
        print(f"Invalid input: {e}")
        return 2

    # the edited record keeps its stored key unless --week was given
    candidate = normalized([updated], args.tzinfo)[0]
    report = evaluate(candidate, normalized(assignments, args.tzinfo), exclude_id=aid, directory=directory)
    if report.has_conflict:
        _print_report(report)
        print("Not saved.")
        return 1

    out = [updated if a.id == aid else a for a in assignments]
    save_assignments(out, schedules_path(args.data_dir))
    print(f"Updated: {aid}")
    return 0


def _cmd_remove(args: argparse.Namespace, assignments: list[ClassAssignment]) -> int:
    aid = (args.id or "").strip()
    if _find(assignments, aid) is None:
        print(f"Not found: {aid}")
        return 0

    out = [a for a in assignments if a.id != aid]
    save_assignments(out, schedules_path(args.data_dir))
    print(f"Removed: {aid} (schedules: {len(out)})")
    return 0


def _cmd_list(args: argparse.Namespace, assignments: list[ClassAssignment], directory: Directory) -> int:
    """
    Print the assignments of one week (optionally one day) as a table.
    """
    week_key = parse_week(args.week, tz=args.tzinfo)
    rows = in_week(assignments, week_key, args.tzinfo)
    if args.day:
        day = DayOfWeek.parse(args.day)
        rows = [a for a in rows if a.day_of_week is day]

    if not rows:
        print("No schedules.")
        return 0

    rows.sort(key=lambda a: (a.day_of_week.offset, a.start_time.zfill(5), a.id))

    table = Table(title=f"Week of {week_start(week_key, args.tzinfo).isoformat()}", box=box.SIMPLE_HEAVY)
    table.add_column("ID", style="dim")
    table.add_column("Day")
    table.add_column("Time")
    table.add_column("Subject")
    table.add_column("Section")
    table.add_column("Instructor")
    table.add_column("Room")
    table.add_column("Mode")

    for a in rows:
        table.add_row(
            a.id,
            f"{a.day_of_week.value.capitalize()} {date_for(week_key, a.day_of_week, args.tzinfo).strftime('%d.%m.')}",
            f"{a.start_time}-{a.end_time}",
            directory.subject_code(a.subject_id) if a.subject_id else "",
            a.section or "",
            directory.instructor_name(a.instructor_id),
            "-" if a.delivery_mode is DeliveryMode.REMOTE else directory.room_code(a.room_id),
            a.delivery_mode.value,
        )

    console.print(table)
    return 0


def _cmd_conflicts(args: argparse.Namespace, assignments: list[ClassAssignment], directory: Directory) -> int:
    """
    Print all conflicts among the stored assignments of one week.
    """
    week_key = parse_week(args.week, tz=args.tzinfo)
    found = find_week_conflicts(assignments, week_key, directory=directory, tz=args.tzinfo)
    if not found:
        print("No conflicts found.")
        return 0

    print(f"Conflicted schedules: {len(found)}")
    for a, report in found:
        print(f"- {a.id} {a.day_of_week.value.capitalize()} {a.start_time}-{a.end_time}")
        for reason in report.reasons:
            print(f"    {reason}")
    return 1


def _cmd_export(args: argparse.Namespace, assignments: list[ClassAssignment], directory: Directory) -> int:
    """
    Export one week into an iCalendar (.ics) file.
    """
    out_path = (args.out or "").strip()
    if not out_path:
        print("Please provide output .ics path.")
        return 1

    week_key = parse_week(args.week, tz=args.tzinfo)
    if not in_week(assignments, week_key, args.tzinfo):
        print("No schedules to export.")
        return 0

    n = export_week_to_ics(assignments, week_key, out_path, directory=directory, tz=args.tzinfo)
    print(f"Exported {n} schedules to: {out_path}")
    return 0


def _cmd_pull(args: argparse.Namespace) -> int:
    """
    Replace the local snapshot with the schedules stored in Firestore.
    """
    project = (args.project or "").strip()
    if not project:
        print("Please provide a Firebase project id.")
        return 1

    print(f"Pulling project: {project}")
    try:
        assignments, directory = pull_snapshot(project, api_key=args.api_key)
    except requests.RequestException as e:
        print(f"Pull failed: {e}")
        return 1

    save_assignments(assignments, schedules_path(args.data_dir))
    save_directory(directory, directory_path(args.data_dir))
    print(f"Saved {len(assignments)} schedules, {len(directory.instructors)} professors, {len(directory.rooms)} rooms.")
    return 0


def _add_proposal_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--instructor", type=str, help="Professor ID")
    p.add_argument("--room", type=str, help="Room ID (in-person classes only)")
    p.add_argument("--section", type=str, help="Section label (e.g. BSIT-4A)")
    p.add_argument("--subject", type=str, help="Subject ID")
    p.add_argument("--day", type=str, help="Day of week (e.g. monday, tue)")
    p.add_argument("--start", type=str, help="Start time HH:MM")
    p.add_argument("--end", type=str, help="End time HH:MM")
    p.add_argument("--mode", type=str, choices=["in-person", "remote", "face-to-face", "online"])
    p.add_argument("--week", type=str, help="Week: current, next, prev or any date YYYY-MM-DD inside it")
    p.add_argument("--notes", type=str)


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="esched", description="Class schedule conflict checker")
    parser.add_argument("--data-dir", type=Path, default=None, help="Directory holding schedules.json/directory.json")
    parser.add_argument(
        "--tz",
        type=str,
        default=None,
        help="Time zone of week keys, e.g. Asia/Manila or +08:00 (default: $ESCHED_TZ, else local time)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_check = sub.add_parser("check", help="Check a proposed schedule for conflicts")
    _add_proposal_args(p_check)
    p_check.add_argument("--exclude", type=str, help="Schedule ID being edited (ignored when checking)")

    p_add = sub.add_parser("add", help="Add a schedule if it has no conflicts")
    _add_proposal_args(p_add)

    p_update = sub.add_parser("update", help="Edit a schedule if the result has no conflicts")
    p_update.add_argument("id", type=str, help="Schedule ID")
    _add_proposal_args(p_update)

    p_remove = sub.add_parser("remove", help="Remove a schedule by ID")
    p_remove.add_argument("id", type=str, help="Schedule ID")

    p_list = sub.add_parser("list", help="List the schedules of a week")
    p_list.add_argument("--week", type=str, default="current")
    p_list.add_argument("--day", type=str)

    p_conf = sub.add_parser("conflicts", help="Show conflicts among stored schedules of a week")
    p_conf.add_argument("--week", type=str, default="current")

    p_export = sub.add_parser("export", help="Export a week to .ics")
    p_export.add_argument("out", type=str, help="Output file path (e.g. week.ics)")
    p_export.add_argument("--week", type=str, default="current")

    p_pull = sub.add_parser("pull", help="Download schedules from Firestore into the local snapshot")
    p_pull.add_argument("--project", type=str, required=True, help="Firebase project id")
    p_pull.add_argument("--api-key", type=str, default=None, help="Web API key")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        args.tzinfo = resolve_tz(args.tz)
    except ValueError as e:
        print(f"Invalid input: {e}")
        raise SystemExit(2)

    if args.command == "pull":
        raise SystemExit(_cmd_pull(args))

    assignments = load_assignments(schedules_path(args.data_dir))
    directory = load_directory(directory_path(args.data_dir))

    try:
        if args.command == "check":
            raise SystemExit(_cmd_check(args, assignments, directory))
        if args.command == "add":
            raise SystemExit(_cmd_add(args, assignments, directory))
        if args.command == "update":
            raise SystemExit(_cmd_update(args, assignments, directory))
        if args.command == "remove":
            raise SystemExit(_cmd_remove(args, assignments))
        if args.command == "list":
            raise SystemExit(_cmd_list(args, assignments, directory))
        if args.command == "conflicts":
            raise SystemExit(_cmd_conflicts(args, assignments, directory))
        if args.command == "export":
            raise SystemExit(_cmd_export(args, assignments, directory))
    except InvalidTimeFormat as e:
        # a stored schedule with a broken time reached the conflict engine
        print(f"Invalid stored data: {e}")
        raise SystemExit(2)
    except ValueError as e:
        # bad --week / --day values
        print(f"Invalid input: {e}")
        raise SystemExit(2)

    raise SystemExit(2)
