"""Session resolver — maps the session cookie to a user id."""

import logging
import re
from datetime import datetime, timezone

from campaign_api import supabase_client as db

logger = logging.getLogger(__name__)

# PostgREST trims trailing zeros from fractional seconds
_FRACTION_RE = re.compile(r"\.(\d+)")


def _parse_expiry(value) -> datetime:
    """Parse a stored expires_at into an aware UTC datetime."""
    if isinstance(value, datetime):
        expires = value
    else:
        text = str(value).replace("Z", "+00:00")
        text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
        expires = datetime.fromisoformat(text)
    if expires.tzinfo is None:
        expires = expires.replace(tzinfo=timezone.utc)
    return expires


def get_user_id_from_session(session_token: str | None) -> str | None:
    """Return the user id for a live session, or None.

    None covers a missing cookie, an unknown token, an expired session and
    any failure during the lookup. Never raises.
    """
    if not session_token:
        return None

    try:
        session = db.get_session(session_token)
        if not session:
            return None

        if _parse_expiry(session["expires_at"]) < datetime.now(timezone.utc):
            return None

        return session["user_id"]
    except Exception as e:
        logger.warning("Session lookup failed: %s", e)
        return None
