"""
Pytest configuration and shared fixtures.
"""

import os

import pytest

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("AIRTABLE_API_KEY", "test-key")
os.environ.setdefault("AIRTABLE_BASE_ID", "appTEST")

from models import StoreRecord  # noqa: E402


class FakeStore:
    """In-memory stand-in for AirtableStore."""

    def __init__(self, rows=None, list_error=None, create_error=None):
        self.table_name = "Test"
        self.rows = list(rows or [])
        self.created = []
        self.list_calls = []
        self.list_error = list_error
        self.create_error = create_error

    async def list(self, options=None):
        self.list_calls.append(options)
        if self.list_error:
            raise self.list_error
        limit = options.max_records if options else len(self.rows)
        return self.rows[:limit]

    async def create(self, records):
        if self.create_error:
            raise self.create_error
        result = []
        for record in records:
            self.created.append(record)
            result.append(StoreRecord(id=f"rec{len(self.created):03d}", fields=record.to_fields()))
        return result

    async def aclose(self):
        pass


@pytest.fixture
def fake_store():
    return FakeStore(rows=[
        StoreRecord(id="recA", fields={"Name": "Alice", "Status": "Done"}),
        StoreRecord(id="recB", fields={"Name": "Bob", "Notes": "hi", "Status": "In progress"}),
    ])
