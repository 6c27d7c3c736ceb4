"""Supabase connection and query helpers for sessions, campaigns and sequence steps."""

import threading

from postgrest.exceptions import APIError
from supabase import Client, create_client

from campaign_api.config import (
    CAMPAIGNS_TABLE,
    SEQUENCES_TABLE,
    SESSIONS_TABLE,
    SUPABASE_SERVICE_KEY,
    SUPABASE_URL,
)

_client: Client | None = None
_client_lock = threading.Lock()


class StoreError(Exception):
    """A query against Supabase failed. ``message`` is the store's own text."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def get_client() -> Client:
    """Return the Supabase client singleton (thread-safe)."""
    global _client
    if _client is None:
        with _client_lock:
            if _client is None:
                if not SUPABASE_URL or not SUPABASE_SERVICE_KEY:
                    raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set")
                _client = create_client(SUPABASE_URL, SUPABASE_SERVICE_KEY)
    return _client


# ---------------------------------------------------------------------------
# Generic helpers
# ---------------------------------------------------------------------------

def _table(name: str):
    """Return a table query builder."""
    return get_client().table(name)


def _execute(q):
    """Run a query, translating PostgREST errors into StoreError."""
    try:
        return q.execute()
    except APIError as e:
        raise StoreError(e.message or str(e)) from e


def insert_many(table: str, rows: list[dict]) -> list[dict]:
    """Insert rows in one request and return them as stored."""
    if not rows:
        return []
    result = _execute(_table(table).insert(rows))
    return result.data or []


def delete(table: str, match: dict) -> list:
    """Delete rows matching conditions. Returns the deleted rows."""
    q = _table(table).delete()
    for k, v in match.items():
        q = q.eq(k, v)
    result = _execute(q)
    return result.data or []


def select(table: str, columns: str = "*", match: dict | None = None,
           order: str | None = None, order_desc: bool = False,
           limit: int | None = None) -> list[dict]:
    """Select rows with optional filtering and ordering."""
    q = _table(table).select(columns)
    if match:
        for k, v in match.items():
            q = q.eq(k, v)
    if order:
        q = q.order(order, desc=order_desc)
    if limit:
        q = q.limit(limit)
    result = _execute(q)
    return result.data or []


def select_one(table: str, columns: str = "*", match: dict | None = None) -> dict | None:
    """Select a single row."""
    rows = select(table, columns, match, limit=1)
    return rows[0] if rows else None


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

def get_session(session_token: str) -> dict | None:
    """Get the user id and expiry for a session token."""
    return select_one(SESSIONS_TABLE, columns="user_id, expires_at",
                      match={"session_token": session_token})


# ---------------------------------------------------------------------------
# Campaigns
# ---------------------------------------------------------------------------

def get_campaign_for_user(campaign_id: str, user_id: str) -> dict | None:
    """Get a campaign by id, only if owned by user_id."""
    return select_one(CAMPAIGNS_TABLE, columns="id",
                      match={"id": campaign_id, "user_id": user_id})


# ---------------------------------------------------------------------------
# Sequence steps
# ---------------------------------------------------------------------------

def get_sequence_steps(campaign_id: str) -> list[dict]:
    """Get all sequence steps for a campaign, in send order."""
    return select(SEQUENCES_TABLE, match={"campaign_id": campaign_id}, order="step_number")


def delete_sequence_steps(campaign_id: str) -> list[dict]:
    """Delete all sequence steps for a campaign. Returns the deleted rows."""
    return delete(SEQUENCES_TABLE, {"campaign_id": campaign_id})


def insert_sequence_steps(rows: list[dict]) -> list[dict]:
    """Bulk insert sequence steps."""
    return insert_many(SEQUENCES_TABLE, rows)
