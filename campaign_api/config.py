"""Campaign API configuration — loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# Supabase
SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_SERVICE_KEY = os.environ.get("SUPABASE_SERVICE_KEY", "")

# Tables
SESSIONS_TABLE = "user_sessions"
CAMPAIGNS_TABLE = "campaigns"
SEQUENCES_TABLE = "campaign_sequences"

# Session cookie set by the login flow
SESSION_COOKIE_NAME = os.environ.get("SESSION_COOKIE_NAME", "session")

# Server
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8000"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").lower()
