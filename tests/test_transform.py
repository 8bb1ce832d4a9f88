import json
import re

import pytest

from transform import (
    extract_name,
    extract_notes,
    extract_status,
    transform_webhook,
)


def _data(**attributes):
    return {"id": "1", "type": "Person", "attributes": attributes}


def test_name_from_first_and_last():
    assert extract_name(_data(first_name="Jane", last_name="Doe", name="ignored")) == "Jane Doe"


def test_name_needs_both_parts():
    assert extract_name(_data(first_name="Jane", name="J. Doe")) == "J. Doe"


def test_name_falls_back_to_title():
    assert extract_name(_data(title="Sunday Service")) == "Sunday Service"


def test_name_fallback_is_timestamped():
    name = extract_name({"id": "1"})
    assert re.match(r"^Planning Center Item - \d{4}-\d{2}-\d{2}T", name)


def test_notes_priority():
    assert extract_notes(_data(description="desc", notes="n")) == "desc"
    assert extract_notes(_data(notes="n")) == "n"


def test_notes_fallback_dumps_data():
    data = _data(name="Jane Doe")
    notes = extract_notes(data)
    assert notes.startswith("Raw data: ")
    assert json.loads(notes[len("Raw data: "):]) == data


@pytest.mark.parametrize(
    "action,expected",
    [
        ("created", "Not started"),
        ("updated", "In progress"),
        ("deleted", "Done"),
        ("completed", "Done"),
        ("UPDATED", "In progress"),
        ("archived", "Not started"),
        (None, "Not started"),
    ],
)
def test_status_from_action(action, expected):
    assert extract_status(_data(), action) == expected


def test_status_action_wins_over_attribute():
    assert extract_status(_data(status="Done"), "updated") == "In progress"


def test_status_from_allowed_attribute():
    assert extract_status(_data(status="Done"), None) == "Done"
    assert extract_status(_data(status="Done"), "archived") == "Done"


def test_status_ignores_unknown_attribute():
    assert extract_status(_data(status="pending"), None) == "Not started"


def test_missing_data_yields_error_record():
    record = transform_webhook({"action": "created"})
    assert record.to_fields() == {"Name": "Unknown", "Notes": "No data received", "Status": "ERROR"}


def test_non_mapping_data_yields_error_record():
    assert transform_webhook({"data": "oops"}).status == "ERROR"


def test_transform_full_payload():
    payload = {"data": {"attributes": {"name": "Jane Doe", "status": "Done"}}, "action": "updated"}
    record = transform_webhook(payload)
    assert record.name == "Jane Doe"
    assert record.status == "In progress"
    assert record.notes == 'Raw data: {"attributes":{"name":"Jane Doe","status":"Done"}}'


def test_transform_tolerates_missing_attributes():
    record = transform_webhook({"data": {"id": "42"}})
    assert record.name.startswith("Planning Center Item - ")
    assert record.notes == 'Raw data: {"id":"42"}'
    assert record.status == "Not started"


@pytest.mark.parametrize("value", [False, 0, "", [], {"first": "Jane"}, ["Jane"]])
def test_falsy_and_nested_values_are_ignored(value):
    data = _data(first_name=value, last_name=value, name=value, title="Fallback Title", description=value)
    assert extract_name(data) == "Fallback Title"
    assert extract_notes(data).startswith("Raw data: ")


def test_numeric_values_are_stringified():
    assert extract_name(_data(name=42)) == "42"
