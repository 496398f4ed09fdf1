"""
Local storage for the schedule snapshot.

This module manages two files:

    data/schedules.json   - class assignments ({"schedules": [...]})
    data/directory.json   - display names ({"professors": [...], "rooms": [...], "subjects": [...]})

Records use the same camelCase document shape as the web app's database, so a
snapshot pulled from the remote store (see esched.firestore) can be saved as-is.

Loading is defensive: a missing or corrupted file never crashes the application.
"""

from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import Any, Iterable

from esched.model import ClassAssignment, Directory


def _default_data_dir() -> Path:
    """
    Return the default data directory inside the package.

    Using a function instead of a constant makes testing easier,
    because tests can pass their own paths.
    """
    base_dir = Path(__file__).resolve().parent
    return base_dir / "data"


def schedules_path(data_dir: str | Path | None = None) -> Path:
    base = Path(data_dir) if data_dir is not None else _default_data_dir()
    return base / "schedules.json"


def directory_path(data_dir: str | Path | None = None) -> Path:
    base = Path(data_dir) if data_dir is not None else _default_data_dir()
    return base / "directory.json"


def _read_json(path: Path) -> Any:
    """
    Return parsed JSON, or None if the file is missing or unreadable.
    """
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError):
        return None


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def parse_assignments(records: Iterable[Any]) -> list[ClassAssignment]:
    """
    Convert stored records to assignments, skipping malformed ones.
    """
    out: list[ClassAssignment] = []
    for rec in records:
        if not isinstance(rec, dict):
            continue
        try:
            out.append(ClassAssignment.from_record(rec))
        except (KeyError, TypeError, ValueError):
            continue
    return out


def load_assignments(path: str | Path | None = None) -> list[ClassAssignment]:
    """
    Load assignments from schedules.json.

    Returns an empty list if the file does not exist or is invalid.
    """
    data = _read_json(Path(path) if path is not None else schedules_path())
    if not isinstance(data, dict):
        return []
    records = data.get("schedules", [])
    if not isinstance(records, list):
        return []
    return parse_assignments(records)


def save_assignments(assignments: Iterable[ClassAssignment], path: str | Path | None = None) -> None:
    """
    Save assignments to schedules.json (sorted by id for a stable file format).
    """
    target = Path(path) if path is not None else schedules_path()
    records = [a.to_record() for a in sorted(assignments, key=lambda a: a.id)]
    _write_json(target, {"schedules": records})


def directory_from_documents(
    professors: Iterable[dict[str, Any]],
    rooms: Iterable[dict[str, Any]],
    subjects: Iterable[dict[str, Any]],
) -> Directory:
    """
    Build a Directory from professor/room/subject documents.
    """
    directory = Directory()
    for p in professors:
        pid = str(p.get("id", "")).strip()
        if not pid:
            continue
        name = f"{p.get('firstName', '')} {p.get('lastName', '')}".strip()
        directory.instructors[pid] = name or pid
    for r in rooms:
        rid = str(r.get("id", "")).strip()
        if rid:
            directory.rooms[rid] = str(r.get("code") or r.get("name") or rid)
    for s in subjects:
        sid = str(s.get("id", "")).strip()
        if sid:
            directory.subjects[sid] = str(s.get("code") or s.get("name") or sid)
    return directory


def load_directory(path: str | Path | None = None) -> Directory:
    """
    Load display names from directory.json. Missing/invalid file -> empty Directory.
    """
    data = _read_json(Path(path) if path is not None else directory_path())
    if not isinstance(data, dict):
        return Directory()

    def _docs(key: str) -> list[dict[str, Any]]:
        items = data.get(key, [])
        if not isinstance(items, list):
            return []
        return [x for x in items if isinstance(x, dict)]

    return directory_from_documents(_docs("professors"), _docs("rooms"), _docs("subjects"))


def save_directory(directory: Directory, path: str | Path | None = None) -> None:
    target = Path(path) if path is not None else directory_path()
    payload = {
        "professors": [
            {"id": pid, "firstName": name, "lastName": ""} for pid, name in sorted(directory.instructors.items())
        ],
        "rooms": [{"id": rid, "code": code} for rid, code in sorted(directory.rooms.items())],
        "subjects": [{"id": sid, "code": code} for sid, code in sorted(directory.subjects.items())],
    }
    _write_json(target, payload)


def new_assignment_id() -> str:
    return uuid.uuid4().hex[:20]
