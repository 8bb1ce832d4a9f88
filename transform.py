"""
Planning Center webhook payload -> Airtable record.

Each field is an ordered-priority lookup over ``data.attributes`` with a
fallback when nothing usable is present.
"""
import json
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from models import OutgoingRecord

NAME_FALLBACK_PREFIX = "Planning Center Item - "
NOTES_FALLBACK_PREFIX = "Raw data: "

STATUS_NOT_STARTED = "Not started"
STATUS_IN_PROGRESS = "In progress"
STATUS_DONE = "Done"

ALLOWED_STATUSES = (STATUS_IN_PROGRESS, STATUS_DONE, STATUS_NOT_STARTED)

ACTION_STATUS = {
    "created": STATUS_NOT_STARTED,
    "updated": STATUS_IN_PROGRESS,
    "deleted": STATUS_DONE,
    "completed": STATUS_DONE,
}


def transform_webhook(payload: Mapping[str, Any]) -> OutgoingRecord:
    data = payload.get("data") if isinstance(payload, Mapping) else None
    if not isinstance(data, Mapping):
        return OutgoingRecord(name="Unknown", notes="No data received", status="ERROR")

    action = payload.get("action")
    return OutgoingRecord(
        name=extract_name(data),
        notes=extract_notes(data),
        status=extract_status(data, action if isinstance(action, str) else None),
    )


def extract_name(data: Mapping[str, Any]) -> str:
    attributes = _attributes(data)
    first_name = _text(attributes.get("first_name"))
    last_name = _text(attributes.get("last_name"))
    if first_name and last_name:
        return f"{first_name} {last_name}"

    name = _first_text(attributes, "name", "title")
    if name:
        return name

    return NAME_FALLBACK_PREFIX + datetime.now(timezone.utc).isoformat()


def extract_notes(data: Mapping[str, Any]) -> str:
    notes = _first_text(_attributes(data), "description", "notes")
    if notes:
        return notes
    return NOTES_FALLBACK_PREFIX + json.dumps(data, default=str, separators=(",", ":"))


def extract_status(data: Mapping[str, Any], action: Optional[str] = None) -> str:
    # An action that maps wins over anything the payload claims.
    if action and action.lower() in ACTION_STATUS:
        return ACTION_STATUS[action.lower()]

    status = _text(_attributes(data).get("status"))
    if status in ALLOWED_STATUSES:
        return status

    return STATUS_NOT_STARTED


def _attributes(data: Mapping[str, Any]) -> Mapping[str, Any]:
    attributes = data.get("attributes")
    return attributes if isinstance(attributes, Mapping) else {}


def _first_text(attributes: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = _text(attributes.get(key))
        if value:
            return value
    return ""


def _text(value: Any) -> str:
    if not value or not isinstance(value, (str, int, float)):
        return ""
    return value if isinstance(value, str) else str(value)
