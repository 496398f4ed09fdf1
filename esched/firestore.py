from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Optional

import requests

from esched.model import ClassAssignment, Directory
from esched.storage import directory_from_documents, parse_assignments


# ---------------------------------------------------------------------------
# URLs
# ---------------------------------------------------------------------------

BASE_URL = "https://firestore.googleapis.com/v1"

SCHEDULES = "schedules"
PROFESSORS = "professors"
ROOMS = "rooms"
SUBJECTS = "subjects"

PAGE_SIZE = 300

# RFC 3339 with up to nanosecond precision: 2026-02-16T08:00:00.123456789-05:00
_TIMESTAMP_RE = re.compile(r"^(?P<head>[^.]+?)(?:\.(?P<frac>\d+))?(?P<offset>Z|[+-]\d{2}:\d{2})?$")


def documents_url(project: str, collection: str) -> str:
    return f"{BASE_URL}/projects/{project}/databases/(default)/documents/{collection}"


# ---------------------------------------------------------------------------
# Value decoding
# ---------------------------------------------------------------------------


def _parse_timestamp(text: str) -> datetime:
    m = _TIMESTAMP_RE.match(text.strip())
    if not m:
        raise ValueError(f"Invalid Firestore timestamp: {text!r}")
    # fromisoformat only takes microseconds; Firestore sends nanoseconds
    frac = f".{m.group('frac')[:6]}" if m.group("frac") else ""
    offset = m.group("offset") or ""
    if offset == "Z":
        offset = "+00:00"
    return datetime.fromisoformat(f"{m.group('head')}{frac}{offset}")


def decode_value(value: dict[str, Any]) -> Any:
    """
    Convert one Firestore REST typed value into a plain Python value.

    Example: {"integerValue": "1735516800000"} -> 1735516800000
    """
    if "stringValue" in value:
        return value["stringValue"]
    if "integerValue" in value:
        # int64 is transported as a string
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "nullValue" in value:
        return None
    if "timestampValue" in value:
        return _parse_timestamp(str(value["timestampValue"]))
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    if "mapValue" in value:
        return {k: decode_value(v) for k, v in value["mapValue"].get("fields", {}).items()}
    if "referenceValue" in value:
        return value["referenceValue"]
    raise ValueError(f"Unsupported Firestore value: {value!r}")


def decode_document(doc: dict[str, Any]) -> dict[str, Any]:
    """
    Flatten a Firestore document into {"id": ..., **fields}.
    """
    name = str(doc.get("name", ""))
    out: dict[str, Any] = {"id": name.rsplit("/", 1)[-1]}
    for key, value in doc.get("fields", {}).items():
        out[key] = decode_value(value)
    return out


# ---------------------------------------------------------------------------
# Fetching
# ---------------------------------------------------------------------------


def fetch_collection(
    project: str,
    collection: str,
    api_key: Optional[str] = None,
    session: Optional[requests.Session] = None,
    timeout: float = 30,
) -> list[dict[str, Any]]:
    """
    Load every document of one collection (follows nextPageToken pagination).
    """
    if session is None:
        with requests.Session() as own:
            return fetch_collection(project, collection, api_key=api_key, session=own, timeout=timeout)

    url = documents_url(project, collection)

    docs: list[dict[str, Any]] = []
    page_token: Optional[str] = None
    while True:
        params: dict[str, Any] = {"pageSize": PAGE_SIZE}
        if api_key:
            params["key"] = api_key
        if page_token:
            params["pageToken"] = page_token

        resp = session.get(url, params=params, timeout=timeout)
        resp.raise_for_status()
        payload = resp.json()

        for doc in payload.get("documents", []):
            docs.append(decode_document(doc))

        page_token = payload.get("nextPageToken")
        if not page_token:
            break

    return docs


def pull_snapshot(
    project: str,
    api_key: Optional[str] = None,
    session: Optional[requests.Session] = None,
) -> tuple[list[ClassAssignment], Directory]:
    """
    Fetch schedules plus the professor/room/subject lookups in one go.

    Schedule documents that do not form a valid assignment are skipped.
    """
    if session is None:
        with requests.Session() as own:
            return pull_snapshot(project, api_key=api_key, session=own)

    schedules = fetch_collection(project, SCHEDULES, api_key=api_key, session=session)
    professors = fetch_collection(project, PROFESSORS, api_key=api_key, session=session)
    rooms = fetch_collection(project, ROOMS, api_key=api_key, session=session)
    subjects = fetch_collection(project, SUBJECTS, api_key=api_key, session=session)

    return parse_assignments(schedules), directory_from_documents(professors, rooms, subjects)
