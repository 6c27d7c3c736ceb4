"""Shared fixtures for Campaign API tests.

Provides:
- fake_db: patches supabase_client with an in-memory fake
- client: TestClient wired to the FastAPI app
- sample data factories for sessions, campaigns, sequence steps
"""

import os
import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from unittest.mock import patch, MagicMock

import pytest
from postgrest.exceptions import APIError

# Set env vars before any app imports
os.environ.setdefault("SUPABASE_URL", "https://fake.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "fake-key")


# ---------------------------------------------------------------------------
# In-memory fake Supabase
# ---------------------------------------------------------------------------

class FakeQueryResult:
    def __init__(self, data=None, count=None):
        self.data = data or []
        self.count = count


class FakeQueryBuilder:
    """Mimics the supabase-py query builder chain."""

    def __init__(self, db, table_name):
        self._db = db
        self._table = table_name
        self._filters = []
        self._order_col = None
        self._order_desc = False
        self._limit_val = None
        self._columns = "*"
        self._delete_mode = False
        self._insert_data = None

    def select(self, columns="*", count=None):
        self._columns = columns
        return self

    def insert(self, data):
        self._insert_data = data
        return self

    def delete(self):
        self._delete_mode = True
        return self

    def eq(self, col, val):
        self._filters.append((col, val))
        return self

    def order(self, col, desc=False):
        self._order_col = col
        self._order_desc = desc
        return self

    def limit(self, n):
        self._limit_val = n
        return self

    def _match(self, row):
        return all(row.get(col) == val for col, val in self._filters)

    def _operation(self):
        if self._insert_data is not None:
            return "insert"
        if self._delete_mode:
            return "delete"
        return "select"

    def execute(self):
        op = self._operation()
        self._db.calls.append((self._table, op))

        message = self._db.failures.get((self._table, op))
        if message is not None:
            raise APIError({"message": message, "code": "XX000", "hint": None, "details": None})

        table = self._db.store[self._table]

        if op == "insert":
            data = self._insert_data
            rows = [dict(r) for r in (data if isinstance(data, list) else [data])]
            for row in rows:
                row.setdefault("id", str(uuid.uuid4()))
            table.extend(rows)
            return FakeQueryResult(data=[dict(r) for r in rows])

        if op == "delete":
            remaining = [r for r in table if not self._match(r)]
            removed = [r for r in table if self._match(r)]
            table.clear()
            table.extend(remaining)
            return FakeQueryResult(data=removed)

        # SELECT
        rows = [r for r in table if self._match(r)]

        if self._order_col:
            rows.sort(
                key=lambda r: r.get(self._order_col, 0),
                reverse=self._order_desc,
            )

        if self._limit_val is not None:
            rows = rows[:self._limit_val]

        return FakeQueryResult(data=rows)


class FakeDB:
    """In-memory store keyed by table name, with per-operation failure injection."""

    def __init__(self):
        self.store = defaultdict(list)
        self.failures = {}
        self.calls = []

    def table(self, name):
        return FakeQueryBuilder(self, name)

    def fail(self, table, op, message="boom"):
        """Make every ``op`` ("select", "insert", "delete") on ``table`` raise APIError."""
        self.failures[(table, op)] = message

    def clear(self):
        self.store.clear()
        self.failures.clear()
        self.calls.clear()


@pytest.fixture
def fake_db():
    """Provides a clean in-memory DB and patches supabase_client._table."""
    db = FakeDB()

    with patch("campaign_api.supabase_client._table", side_effect=db.table):
        with patch("campaign_api.supabase_client.get_client", return_value=MagicMock()):
            yield db


@pytest.fixture
def client(fake_db):
    """Sync test client for FastAPI app with mocked DB."""
    from campaign_api.app import create_app
    from fastapi.testclient import TestClient

    app = create_app()

    with TestClient(app) as c:
        yield c


# ---------------------------------------------------------------------------
# Data factories
# ---------------------------------------------------------------------------

def make_session(**overrides):
    defaults = {
        "id": str(uuid.uuid4()),
        "session_token": "tok-" + uuid.uuid4().hex,
        "user_id": "user-1",
        "expires_at": (datetime.now(timezone.utc) + timedelta(days=7)).isoformat(),
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    defaults.update(overrides)
    return defaults


def make_campaign(**overrides):
    defaults = {
        "id": str(uuid.uuid4()),
        "user_id": "user-1",
        "name": "Spring Outreach",
        "status": "draft",
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    defaults.update(overrides)
    return defaults


def make_step(**overrides):
    defaults = {
        "id": str(uuid.uuid4()),
        "campaign_id": str(uuid.uuid4()),
        "step_number": 1,
        "subject": "Quick question",
        "content": "Hi there",
        "timing_days": 1,
        "variants": 1,
        "outreach_method": "email",
    }
    defaults.update(overrides)
    return defaults
